"""Argument parsing functionality for depsync."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depsync",
        description=(
            "depsync - Synthesize git repositories from published package versions"
        ),
        add_help=True,
    )

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="YAML file describing registries and configured dependencies",
                        action="store",
                        type=str)
    parser.add_argument("-s", "--store",
                        dest="STORE",
                        help="YAML/JSON file of previously recorded dependency versions",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="TIMEOUT",
                        help="Abort the operation after this many seconds",
                        action="store",
                        type=float)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    subparsers = parser.add_subparsers(dest="action", required=True)

    clone = subparsers.add_parser("clone", help="Create a bare repository and populate it")
    clone.add_argument("REPO", help="Synthetic repository name, e.g. maven/junit/junit")
    clone.add_argument("-g", "--git-dir",
                       dest="GIT_DIR",
                       help="Bare repository directory to create",
                       required=True)

    fetch = subparsers.add_parser("fetch", help="Update an existing bare repository in place")
    fetch.add_argument("REPO", help="Synthetic repository name, e.g. npm/left-pad")
    fetch.add_argument("-g", "--git-dir",
                       dest="GIT_DIR",
                       help="Existing bare repository directory",
                       required=True)

    remote_show = subparsers.add_parser("remote-show", help="Print the diagnostic remote command")
    remote_show.add_argument("REPO", help="Synthetic repository name")

    return parser.parse_args(argv)
