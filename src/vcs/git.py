"""Running git with a deterministic identity.

Every invocation gets the same author/committer name, email and date
derived from one dependency, so synthesizing identical content always yields
identical commit and tag hashes.
"""
from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from constants import Constants
from common.context import SyncContext
from common.errors import CommandError, SyncCancelledError
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning.models import PackageDependency

logger = logging.getLogger(__name__)

_POLL_INTERVAL_SEC = 0.1
# Would redirect commands away from their working directory.
_REPOSITORY_ENV_VARS = ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE", "GIT_OBJECT_DIRECTORY")


@dataclass(frozen=True)
class GitCommand:
    """One step of a git pipeline: argv plus optional working directory."""
    args: Tuple[str, ...]
    cwd: Optional[str] = None

    @classmethod
    def of(cls, *args: str, cwd: Optional[str] = None) -> "GitCommand":
        return cls(args=("git",) + tuple(args), cwd=cwd)


def git_environment(dependency: PackageDependency) -> Dict[str, str]:
    """Identity and timestamp variables for commands run on behalf of ``dependency``."""
    name = dependency.package_manager_syntax() + Constants.GIT_AUTHOR_SUFFIX
    email = Constants.GIT_EMAIL
    date = Constants.STABLE_GIT_COMMIT_DATE
    return {
        "EMAIL": email,
        "GIT_AUTHOR_NAME": name,
        "GIT_AUTHOR_EMAIL": email,
        "GIT_AUTHOR_DATE": date,
        "GIT_COMMITTER_NAME": name,
        "GIT_COMMITTER_EMAIL": email,
        "GIT_COMMITTER_DATE": date,
        "GIT_TERMINAL_PROMPT": "0",
    }


def run_command(ctx: SyncContext, args: Sequence[str], cwd: Optional[str], env: Dict[str, str]) -> str:
    """Run ``args`` to completion unless ``ctx`` is cancelled first.

    Returns:
        Combined stdout/stderr output.

    Raises:
        CommandError: non-zero exit status, or the executable cannot be started.
        SyncCancelledError: the context finished while the command ran.
    """
    ctx.check()
    full_env = os.environ.copy()
    for inherited in _REPOSITORY_ENV_VARS:
        full_env.pop(inherited, None)
    full_env.update(env)
    with Timer() as t:
        try:
            proc = subprocess.Popen(  # noqa: S603
                list(args),
                cwd=cwd,
                env=full_env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except OSError as exc:
            raise CommandError(args, str(exc), -1) from exc
        with proc:
            while True:
                try:
                    raw, _ = proc.communicate(timeout=_POLL_INTERVAL_SEC)
                    break
                except subprocess.TimeoutExpired:
                    if ctx.done():
                        proc.kill()
                        proc.communicate()
                        raise SyncCancelledError(f"command {list(args)} interrupted") from None
    output = raw.decode("utf-8", errors="replace")
    if is_debug_enabled(logger):
        logger.debug(
            "git command finished",
            extra=extra_context(
                event="git_command",
                command=" ".join(args),
                cwd=cwd,
                returncode=proc.returncode,
                duration_ms=t.duration_ms(),
            ),
        )
    if proc.returncode != 0:
        raise CommandError(args, output, proc.returncode)
    return output


def run_command_in_directory(
    ctx: SyncContext,
    args: Sequence[str],
    working_directory: str,
    dependency: PackageDependency,
) -> str:
    """Run one git command in ``working_directory`` with the identity of ``dependency``."""
    return run_command(ctx, args, working_directory, git_environment(dependency))


def run_pipeline(ctx: SyncContext, steps: Iterable[GitCommand], dependency: PackageDependency) -> List[str]:
    """Run ``steps`` in order, stopping at the first failure.

    Returns:
        The output of every step.
    """
    env = git_environment(dependency)
    outputs = []
    for step in steps:
        outputs.append(run_command(ctx, step.args, step.cwd, env))
    return outputs


def list_tags(ctx: SyncContext, git_dir: str, dependency: PackageDependency) -> List[str]:
    """Tag names present in ``git_dir``."""
    out = run_command_in_directory(ctx, ["git", "tag"], git_dir, dependency)
    return [line for line in out.splitlines() if line]
