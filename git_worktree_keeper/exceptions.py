"""Custom exceptions for git-worktree-keeper"""

from typing import Optional


class GitWorktreeKeeperError(Exception):
    """Base exception for all git-worktree-keeper errors."""
    pass


class ConfigurationError(GitWorktreeKeeperError):
    """Exception raised when required configuration is missing or invalid."""

    def __init__(self, message: str, fix: Optional[str] = None):
        self.message = message
        self.fix = fix

        error_msg = message
        if fix:
            error_msg += f"\nRun: {fix}"

        super().__init__(error_msg)


class GitOperationError(GitWorktreeKeeperError):
    """Exception raised for errors in Git operations."""

    def __init__(self, operation: str, path: Optional[str] = None, message: Optional[str] = None):
        self.operation = operation
        self.path = path
        self.message = message

        error_msg = f"Git operation '{operation}' failed"
        if path:
            error_msg += f" in '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class CommandTimeoutError(GitOperationError):
    """Exception raised when a command exceeds its timeout or the run deadline."""

    def __init__(self, operation: str, path: Optional[str] = None, timeout: Optional[float] = None):
        self.timeout = timeout
        if timeout is not None:
            message = f"timed out after {timeout:.0f}s"
        else:
            message = "deadline exceeded"
        super().__init__(operation, path, message)


class GitHubAPIError(GitWorktreeKeeperError):
    """Exception raised for errors in GitHub API operations."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.message = message

        error_msg = f"GitHub API operation '{operation}' failed"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RepositoryScanError(GitWorktreeKeeperError):
    """Exception raised when the worktrees of a repository cannot be enumerated."""

    def __init__(self, repo_name: str, message: Optional[str] = None):
        self.repo_name = repo_name
        self.message = message

        error_msg = "failed to list worktrees"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class WorktreeRemovalError(GitWorktreeKeeperError):
    """Exception raised when a worktree could not be removed."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        self.message = message

        error_msg = f"Could not remove worktree '{path}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class RemovalRefusedError(WorktreeRemovalError):
    """Exception raised when a worktree has uncommitted changes at removal time."""

    def __init__(self, path: str):
        super().__init__(path, "worktree has uncommitted changes, refusing to remove")
