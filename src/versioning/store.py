"""Historical version records: versions already known to have been synced."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable, List, Protocol

import yaml
from packaging.utils import canonicalize_name

from constants import DependencySchemes
from common.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyRepo:
    """One recorded ``(scheme, name, version)`` triple."""
    scheme: str
    name: str
    version: str


def normalized_name(scheme: str, name: str) -> str:
    """Name as compared within ``scheme``; Python names follow PEP 503."""
    if scheme == DependencySchemes.PYTHON_PACKAGES.value:
        return canonicalize_name(name)
    return name


class DependenciesStore(Protocol):
    """Read interface consumed by the version resolver."""

    def list_dependency_repos(self, *, scheme: str, name: str, newest_first: bool = False) -> List[DependencyRepo]:
        """Return every recorded version of ``name`` under ``scheme``."""
        ...


class InMemoryDependenciesStore:
    """Insertion-ordered store; the most recently recorded version is the newest."""

    def __init__(self, records: Iterable[DependencyRepo] = ()):
        self._records: List[DependencyRepo] = []
        for record in records:
            self.upsert(record)

    def upsert(self, record: DependencyRepo) -> bool:
        """Record a version; returns False when it was already present."""
        if record in self._records:
            return False
        self._records.append(record)
        return True

    def list_dependency_repos(self, *, scheme: str, name: str, newest_first: bool = False) -> List[DependencyRepo]:
        target = normalized_name(scheme, name)
        matches = [
            r for r in self._records
            if r.scheme == scheme and normalized_name(r.scheme, r.name) == target
        ]
        if newest_first:
            matches.reverse()
        return matches

    def __len__(self) -> int:
        return len(self._records)


def _record_from_mapping(entry: Any, path: str) -> DependencyRepo:
    if not isinstance(entry, dict):
        raise ConfigError(f"{path}: every record must be a mapping, got {type(entry).__name__}")
    try:
        return DependencyRepo(scheme=str(entry["scheme"]), name=str(entry["name"]), version=str(entry["version"]))
    except KeyError as exc:
        raise ConfigError(f"{path}: record {entry!r} is missing {exc.args[0]!r}") from exc


def load_store_file(path: str) -> InMemoryDependenciesStore:
    """Load records (oldest first) from a YAML or JSON list of mappings.

    Args:
        path: File with a top-level list, or a mapping with a ``records`` list.

    Returns:
        InMemoryDependenciesStore holding the records in file order.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"store file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to read store file {path}: {exc}") from exc

    if isinstance(data, dict):
        data = data.get("records", [])
    if data is None:
        data = []
    if not isinstance(data, list):
        raise ConfigError(f"{path}: expected a list of records")

    store = InMemoryDependenciesStore(_record_from_mapping(entry, path) for entry in data)
    logger.info("Loaded %d dependency records from %s", len(store), path)
    return store
