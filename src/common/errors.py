"""Exception hierarchy shared by registry clients, adapters and the syncer."""
from __future__ import annotations

from typing import Optional, Sequence


class SyncError(Exception):
    """Base class for every failure raised while synchronizing a package repo."""


class NotFoundError(SyncError):
    """The registry does not know the requested package version."""

    def __init__(self, dependency: str, detail: Optional[str] = None):
        self.dependency = dependency
        message = f"{dependency} not found"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DependencyParseError(SyncError, ValueError):
    """A dependency string or synthetic repo name could not be parsed."""


class NoSourcesError(SyncError):
    """The registry has the version but publishes no source content for it."""

    def __init__(self, dependency: str):
        self.dependency = dependency
        super().__init__(f"no sources for dependency {dependency}")


class RegistryError(SyncError):
    """Transient or unexpected failure talking to a package registry."""


class DownloadError(RegistryError):
    """An artifact could not be fetched or is not a readable archive."""


class StoreError(SyncError):
    """The historical version store could not be queried."""


class ConfigError(SyncError):
    """Configuration file missing required structure or unreadable."""


class SyncCancelledError(SyncError):
    """The operation context was cancelled or ran past its deadline."""


class CommandError(SyncError):
    """A git subprocess exited non-zero."""

    def __init__(self, args: Sequence[str], output: str, returncode: int):
        self.args_list = list(args)
        self.output = output
        self.returncode = returncode
        super().__init__(f"command {self.args_list} failed with output {output!r}")


class DependencyPushError(SyncError):
    """Building or pushing the tag of one dependency version failed."""

    def __init__(self, dependency: str, cause: Optional[BaseException] = None):
        self.dependency = dependency
        message = f"error pushing dependency {dependency!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DependencyLookupError(SyncError):
    """Checking whether the registry has one dependency version failed."""

    def __init__(self, dependency: str, cause: Optional[BaseException] = None):
        self.dependency = dependency
        message = f"error looking up dependency {dependency!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
