"""Capability interface every package ecosystem implements."""

from abc import ABC, abstractmethod

from common.context import SyncContext
from versioning.models import PackageDependency


class DependenciesSyncer(ABC):
    """Registry access and naming rules for one package ecosystem.

    Implementations hold only immutable connection configuration (their
    registry client) and write only under the directory they are given.
    """

    #: Syncer type, also used as the scratch directory prefix.
    type: str = ""
    #: Scheme under which the version store records this ecosystem.
    scheme: str = ""
    #: Dependency whose identity is used for git commands that create nothing.
    placeholder: str = ""

    @abstractmethod
    def get(self, ctx: SyncContext, name: str, version: str) -> PackageDependency:
        """Confirm ``name`` at ``version`` is published and return it.

        Raises:
            NotFoundError: the registry does not have this version.
        """

    @abstractmethod
    def download(self, ctx: SyncContext, dest_dir: str, dependency: PackageDependency) -> None:
        """Write the unpacked contents of ``dependency`` into ``dest_dir``.

        Raises:
            NoSourcesError: the version exists but has no source content.
        """

    @abstractmethod
    def parse_dependency(self, dependency: str) -> PackageDependency:
        """Parse a configured dependency string (with version)."""

    @abstractmethod
    def parse_dependency_from_repo_name(self, repo_name: str) -> PackageDependency:
        """Parse the package identity (empty version) from a synthetic repo name."""

    def placeholder_dependency(self) -> PackageDependency:
        return self.parse_dependency(self.placeholder)
