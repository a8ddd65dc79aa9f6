"""depsync - synthesize git repositories from published package versions.

Returns:
    int: Exit code
"""
import logging
import os
import sys
from typing import Optional

from args import parse_args
from config import load_config
from constants import ExitCodes
from common.context import SyncContext
from common.errors import ConfigError, RegistryError, SyncError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from syncers.factory import build_syncers, syncer_for_repo
from versioning.store import InMemoryDependenciesStore, load_store_file

logger = logging.getLogger(__name__)


def exit_code_for(exc: BaseException) -> int:
    """Map a failure (or anything in its cause chain) to an exit code."""
    current: Optional[BaseException] = exc
    while current is not None:
        if isinstance(current, ConfigError):
            return ExitCodes.FILE_ERROR.value
        if isinstance(current, RegistryError):
            return ExitCodes.CONNECTION_ERROR.value
        current = current.__cause__
    return ExitCodes.SYNC_ERROR.value


def run(args) -> int:
    """Execute the parsed command; returns an exit code."""
    config = load_config(args.CONFIG)
    store = load_store_file(args.STORE) if args.STORE else InMemoryDependenciesStore()
    syncers = build_syncers(config, store)
    syncer = syncer_for_repo(args.REPO, syncers)
    ctx = SyncContext(timeout=args.TIMEOUT)

    if is_debug_enabled(logger):
        logger.debug(
            "Dispatching command",
            extra=extra_context(event="dispatch", action=args.action, repo=args.REPO, type=syncer.type),
        )

    if args.action == "remote-show":
        command = syncer.remote_show_command(ctx, args.REPO)
        sys.stdout.write(" ".join(command.args) + "\n")
        return ExitCodes.SUCCESS.value

    syncer.is_cloneable(ctx, args.REPO)
    if args.action == "clone":
        syncer.clone_command(ctx, args.REPO, os.path.abspath(args.GIT_DIR))
    else:
        git_dir = os.path.abspath(args.GIT_DIR)
        if not os.path.isdir(git_dir):
            raise ConfigError(f"git directory does not exist: {git_dir}")
        syncer.fetch(ctx, args.REPO, git_dir)
    logger.info("Synchronized %s into %s", args.REPO, args.GIT_DIR)
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    try:
        code = run(args)
    except SyncError as exc:
        logger.error("%s", exc)
        code = exit_code_for(exc)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
