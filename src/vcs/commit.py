"""Build the commit and annotated tag of one package version and push it."""
from __future__ import annotations

import logging
import tempfile
from typing import List

from constants import Constants
from common.context import SyncContext
from common.errors import NoSourcesError
from common.logging_utils import extra_context
from syncers.base import DependenciesSyncer
from versioning.models import PackageDependency
from .git import GitCommand, run_command_in_directory, run_pipeline

logger = logging.getLogger(__name__)


def commit_and_tag_steps(workdir: str, bare_git_directory: str, dependency: PackageDependency) -> List[GitCommand]:
    """Steps turning the files in ``workdir`` into a tagged commit pushed to the bare repo.

    Hooks are bypassed with ``--no-verify``: package contents are untrusted.
    """
    message = dependency.package_manager_syntax()
    tag = dependency.git_tag_from_version()
    return [
        GitCommand.of("init", cwd=workdir),
        GitCommand.of("add", ".", cwd=workdir),
        GitCommand.of(
            "commit", "--no-verify", "--no-gpg-sign",
            "-m", message, "--date", Constants.STABLE_GIT_COMMIT_DATE,
            cwd=workdir,
        ),
        GitCommand.of("-c", "tag.gpgSign=false", "tag", "-m", message, tag, cwd=workdir),
        GitCommand.of("remote", "add", "origin", bare_git_directory, cwd=workdir),
        GitCommand.of("push", "--no-verify", "--force", "origin", "--tags", cwd=workdir),
    ]


def push_latest(ctx: SyncContext, workdir: str, dependency: PackageDependency) -> None:
    """Point the ``latest`` branch of the bare repo at this version's commit."""
    branch = run_command_in_directory(
        ctx, ["git", "rev-parse", "--abbrev-ref", "HEAD"], workdir, dependency
    ).strip()
    run_command_in_directory(
        ctx,
        [
            "git", "push", "--no-verify", "--force", "origin",
            f"{branch}:{Constants.LATEST_REF}", dependency.git_tag_from_version(),
        ],
        workdir,
        dependency,
    )


def push_dependency_tag(
    ctx: SyncContext,
    syncer: DependenciesSyncer,
    bare_git_directory: str,
    dependency: PackageDependency,
    is_latest: bool,
) -> bool:
    """Materialize ``dependency`` and push its tag to ``bare_git_directory``.

    The scratch workspace is removed on every exit path.

    Returns:
        True when the tag was pushed, False when the registry has no sources
        for this version and it was skipped.
    """
    with tempfile.TemporaryDirectory(prefix=syncer.type) as workdir:
        try:
            syncer.download(ctx, workdir, dependency)
        except NoSourcesError:
            logger.info(
                "Skipping %s: no sources available",
                dependency,
                extra=extra_context(event="skip_no_sources", dependency=str(dependency)),
            )
            return False

        run_pipeline(ctx, commit_and_tag_steps(workdir, bare_git_directory, dependency), dependency)
        if is_latest:
            push_latest(ctx, workdir, dependency)

    logger.info(
        "Pushed tag %s for %s",
        dependency.git_tag_from_version(),
        dependency,
        extra=extra_context(event="tag_pushed", dependency=str(dependency), latest=is_latest),
    )
    return True
