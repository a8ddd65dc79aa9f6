"""Repository synchronization contract for package-backed repositories.

The host treats every repository the same way: it can be checked, described,
cloned from scratch or fetched. For package repositories "fetch" means
converging the tag set of a bare repository onto the desired version list:
missing versions are materialized and pushed, stale tags are deleted, and
tags that are already present are never rebuilt.

Passes against the same bare repository must be serialized by the caller.
"""
from __future__ import annotations

import dataclasses
import logging
import os
from typing import List, Sequence

from common.context import SyncContext
from common.errors import (
    CommandError,
    DependencyLookupError,
    DependencyPushError,
    NotFoundError,
    SyncError,
)
from common.logging_utils import extra_context
from syncers.base import DependenciesSyncer
from versioning.models import PackageDependency
from versioning.resolver import DependencyVersionResolver
from versioning.store import DependenciesStore
from .commit import push_dependency_tag
from .git import GitCommand, list_tags, run_command_in_directory

logger = logging.getLogger(__name__)


class VCSDependenciesSyncer:
    """Synchronizes synthetic repositories of one package ecosystem.

    Args:
        syncer: Ecosystem adapter.
        config_dependencies: Dependency strings declared in configuration.
        store: Historical version records.
    """

    def __init__(
        self,
        syncer: DependenciesSyncer,
        config_dependencies: Sequence[str],
        store: DependenciesStore,
    ):
        self.syncer = syncer
        self.placeholder = syncer.placeholder_dependency()
        self.resolver = DependencyVersionResolver(
            scheme=syncer.scheme,
            config_dependencies=config_dependencies,
            parse_dependency=syncer.parse_dependency,
            store=store,
        )

    @property
    def type(self) -> str:
        return self.syncer.type

    def is_cloneable(self, ctx: SyncContext, remote_url: str) -> None:
        """Package repositories are always cloneable; missing versions are skipped during fetch."""

    def remote_show_command(self, ctx: SyncContext, remote_url: str) -> GitCommand:
        return GitCommand.of("remote", "show", "./")

    def clone_command(self, ctx: SyncContext, remote_url: str, bare_git_directory: str) -> GitCommand:
        """Create and populate ``bare_git_directory``.

        Returns:
            A no-op command; all work happens before it is returned.
        """
        os.makedirs(bare_git_directory, mode=0o755, exist_ok=True)
        run_command_in_directory(ctx, ["git", "--bare", "init"], bare_git_directory, self.placeholder)
        try:
            self.fetch(ctx, remote_url, bare_git_directory)
        except SyncError as exc:
            raise SyncError(f"failed to fetch repo for {remote_url}: {exc}") from exc
        return GitCommand.of("--version")

    def cloneable_dependencies(self, ctx: SyncContext, remote_url: str) -> List[PackageDependency]:
        """Desired versions of the package behind ``remote_url`` that the registry has."""
        package = self.syncer.parse_dependency_from_repo_name(remote_url)
        name = package.package_syntax()

        cloneable = []
        for version in self.resolver.versions(name):
            try:
                dependency = self.syncer.get(ctx, name, version)
            except NotFoundError:
                logger.warning(
                    "skipping missing dependency %s version %s",
                    name,
                    version,
                    extra=extra_context(event="skip_missing_version", package=name, version=version, type=self.type),
                )
                continue
            except SyncError as exc:
                display = dataclasses.replace(package, version=version).package_manager_syntax()
                raise DependencyLookupError(display, exc) from exc
            cloneable.append(dependency)
        return cloneable

    def fetch(self, ctx: SyncContext, remote_url: str, git_dir: str) -> None:
        """Converge the tags of ``git_dir`` onto the desired versions."""
        dependencies = self.cloneable_dependencies(ctx, remote_url)
        existing = set(list_tags(ctx, git_dir, self.placeholder))

        present = set(existing)
        for i, dependency in enumerate(dependencies):
            tag = dependency.git_tag_from_version()
            if tag in present:
                continue
            try:
                pushed = push_dependency_tag(ctx, self.syncer, git_dir, dependency, is_latest=i == 0)
            except (SyncError, OSError) as exc:
                raise DependencyPushError(dependency.package_manager_syntax(), exc) from exc
            if pushed:
                present.add(tag)

        desired_tags = {dependency.git_tag_from_version() for dependency in dependencies}
        for tag in sorted(existing - desired_tags):
            try:
                run_command_in_directory(ctx, ["git", "tag", "-d", tag], git_dir, self.placeholder)
            except CommandError as exc:
                logger.error(
                    "Failed to delete git tag %s: %s",
                    tag,
                    exc,
                    extra=extra_context(event="tag_delete_failed", tag=tag),
                )
