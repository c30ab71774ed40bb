"""Git-related services for git-worktree-keeper."""

from .runner import CommandRunner, CommandResult, Deadline
from .operations import GitOperations
from .worktrees import WorktreeService
from .github import GitHubService

__all__ = [
    "CommandRunner",
    "CommandResult",
    "Deadline",
    "GitOperations",
    "WorktreeService",
    "GitHubService",
]
