"""Shared constants for git-worktree-keeper."""

from enum import IntEnum


# Layout of a repository container
CANONICAL_CHECKOUT = "main"
FALLBACK_DEFAULT_BRANCH = "main"
DEFAULT_REMOTE = "origin"

# Command budgets (seconds)
DEFAULT_COMMAND_TIMEOUT = 30
DEFAULT_DEADLINE = 300

# Config keys and locations
ROOT_DIR_KEY = "root_dir"
ROOT_DIR_ENV = "GIT_WORKTREE_KEEPER_ROOT"
GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
APP_DIR_NAME = ".git-worktree-keeper"
PROG_NAME = "git-worktree-keeper"
CONFIG_FIX_COMMAND = f"{PROG_NAME} config set {ROOT_DIR_KEY} ~/git"


# Reasons attached to scanned worktrees
REASON_CHANGES = "Has uncommitted changes"
REASON_STATUS_ERROR = "Error checking status"
REASON_MERGED = "Merged to {default_branch}"
REASON_REMOTE_DELETED = "Remote branch deleted"


# Status tags, in priority order
TAG_CHANGES = "[changes]"
TAG_MERGED = "[merged]"
TAG_DELETED = "[deleted]"
TAG_ACTIVE = "[active]"


# CLI colors (Rich color names)
TAG_COLORS = {
    TAG_CHANGES: "yellow",
    TAG_MERGED: "red",
    TAG_DELETED: "red",
    TAG_ACTIVE: "green",
}

SYMBOL_OK = "✓"
SYMBOL_FAIL = "✗"


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    FAILURE = 1
    PARTIAL = 3
