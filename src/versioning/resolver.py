"""Desired version list per package: configured versions, then recorded ones."""

import logging
from typing import Callable, List, Sequence

from common.errors import DependencyParseError, StoreError
from common.logging_utils import extra_context
from .models import PackageDependency
from .store import DependenciesStore

logger = logging.getLogger(__name__)


class DependencyVersionResolver:
    """Merges configuration-declared versions with the historical store.

    Order matters: the first version returned is treated as "latest".
    Duplicates are kept; already-present tags filter them downstream.
    """

    def __init__(
        self,
        scheme: str,
        config_dependencies: Sequence[str],
        parse_dependency: Callable[[str], PackageDependency],
        store: DependenciesStore,
    ):
        self.scheme = scheme
        self.config_dependencies = list(config_dependencies)
        self.parse_dependency = parse_dependency
        self.store = store

    def configured_versions(self, package_name: str) -> List[str]:
        """Versions of ``package_name`` declared in configuration, in order."""
        versions: List[str] = []
        for raw in self.config_dependencies:
            try:
                dep = self.parse_dependency(raw)
            except DependencyParseError as exc:
                logger.warning(
                    "skipping malformed dependency %r: %s",
                    raw,
                    exc,
                    extra=extra_context(event="skip_malformed_dependency", scheme=self.scheme),
                )
                continue
            if dep.package_syntax() == package_name:
                versions.append(dep.package_version())
        return versions

    def versions(self, package_name: str) -> List[str]:
        """Configured versions followed by stored versions (newest first)."""
        versions = self.configured_versions(package_name)
        try:
            records = self.store.list_dependency_repos(scheme=self.scheme, name=package_name, newest_first=True)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise StoreError(f"failed to list dependencies of {package_name} from the store") from exc
        versions.extend(record.version for record in records)
        return versions
