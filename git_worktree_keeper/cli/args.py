"""Command-line argument parsing for git-worktree-keeper."""

import argparse
from git_worktree_keeper.__version__ import __version__
from git_worktree_keeper.constants import PROG_NAME, ROOT_DIR_ENV


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with list/scan/run/config subcommands."""
    parser = argparse.ArgumentParser(
        prog=PROG_NAME,
        description="Clean up git worktrees whose branches were merged or deleted remotely",
        epilog=f"Setup: {PROG_NAME} config set root_dir ~/git (or set {ROOT_DIR_ENV}). "
        "Each repository lives in <root>/<repo>/main with worktrees beside it.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument("--version", action="version", version=f"{PROG_NAME} {__version__}")
    parser.add_argument("--root", metavar="PATH", help="Folder holding the repositories")
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECS",
        help="Timeout for each git command (default: 30)",
    )
    parser.add_argument(
        "--deadline",
        type=float,
        metavar="SECS",
        help="Time budget for scanning all repositories (default: 300)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Maximum repositories scanned in parallel (default: one per repository)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    list_parser = subparsers.add_parser(
        "list",
        help="List all worktrees and their status",
        description="Status tags: [active] in use, [merged] merged to the default branch, "
        "[deleted] remote branch deleted, [changes] uncommitted changes (never cleaned)",
    )
    list_parser.add_argument("repo", nargs="?", help="Only this repository")

    scan_parser = subparsers.add_parser(
        "scan", help="Show what would be cleaned (dry-run)"
    )
    scan_parser.add_argument("repo", nargs="?", help="Only this repository")

    run_parser = subparsers.add_parser(
        "run",
        help="Remove stale worktrees, asking before each one",
        description="Removes clean worktrees whose branch is merged or gone from the remote, "
        "then prunes git worktree metadata",
    )
    run_parser.add_argument("repo", nargs="?", help="Only this repository")
    run_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Skip confirmation prompts and remove all stale worktrees",
    )

    config_parser = subparsers.add_parser("config", help="Read or change settings")
    config_sub = config_parser.add_subparsers(dest="config_command", metavar="ACTION")
    config_sub.required = True
    get_parser = config_sub.add_parser("get", help="Print a setting")
    get_parser.add_argument("key")
    set_parser = config_sub.add_parser("set", help="Change a setting")
    set_parser.add_argument("key")
    set_parser.add_argument("value")
    config_sub.add_parser("path", help="Print the config file location")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
