"""Bounded execution of git subcommands."""

import os
import threading
import time
from dataclasses import dataclass
from typing import Optional

import git

from git_worktree_keeper.constants import DEFAULT_COMMAND_TIMEOUT
from git_worktree_keeper.exceptions import CommandTimeoutError, GitOperationError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class Deadline:
    """Overall time budget and cancellation token for one invocation.

    Every command started through a CommandRunner is capped by the time left
    on the deadline; once it expires or is cancelled no new command starts.
    """

    def __init__(self, seconds: Optional[float] = None):
        self.seconds = seconds
        self._expires_at = time.monotonic() + seconds if seconds else None
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    def restart(self) -> None:
        """Start a fresh budget of the same length. Cancellation is permanent."""
        if self.seconds:
            self._expires_at = time.monotonic() + self.seconds

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Seconds left, 0 when expired or cancelled, None when unbounded."""
        if self.cancelled:
            return 0.0
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0


@dataclass
class CommandResult:
    """Captured output of one command."""

    args: tuple
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner:
    """Runs git subcommands in a working directory with a bounded timeout.

    GitPython's `Git.execute` does the process handling; `kill_after_timeout`
    kills a hung git process once its budget runs out.
    """

    def __init__(self, timeout: float = DEFAULT_COMMAND_TIMEOUT, deadline: Optional[Deadline] = None):
        """Initialize the runner.

        Args:
            timeout: Per-command budget in seconds
            deadline: Invocation-wide deadline shared by every command
        """
        self.timeout = timeout
        self.deadline = deadline or Deadline()

    def _effective_timeout(self) -> Optional[float]:
        remaining = self.deadline.remaining()
        if remaining is None:
            return self.timeout
        if not self.timeout:
            return remaining
        return min(self.timeout, remaining)

    def run(self, working_dir: Optional[str], *args: str) -> CommandResult:
        """Run `git <args>` in working_dir and capture its result.

        A non-zero exit code is returned, not raised.

        Raises:
            CommandTimeoutError: if the deadline is spent or the command timed out
            GitOperationError: if git could not be started at all
        """
        operation = args[0] if args else "git"
        if self.deadline.expired:
            raise CommandTimeoutError(operation, working_dir)

        timeout = self._effective_timeout()
        if working_dir and not os.path.isdir(working_dir):
            raise GitOperationError(operation, working_dir, "directory does not exist")

        logger.debug(f"git {' '.join(args)} (cwd={working_dir}, timeout={timeout})")
        started = time.monotonic()
        try:
            status, stdout, stderr = git.Git(working_dir).execute(
                ["git", *args],
                with_extended_output=True,
                with_exceptions=False,
                kill_after_timeout=timeout,
            )
        except (git.exc.GitCommandNotFound, OSError) as e:
            raise GitOperationError(operation, working_dir, str(e))

        elapsed = time.monotonic() - started
        if status != 0 and timeout is not None and elapsed >= timeout:
            logger.warning(f"git {operation} in {working_dir} killed after {timeout:.0f}s")
            raise CommandTimeoutError(operation, working_dir, timeout)

        return CommandResult(
            args=tuple(args),
            stdout=(stdout or "").strip(),
            stderr=(stderr or "").strip(),
            exit_code=status if status is not None else 0,
        )

    def run_checked(self, working_dir: Optional[str], *args: str) -> str:
        """Run a command and return its stdout, raising on a non-zero exit."""
        result = self.run(working_dir, *args)
        if not result.ok:
            message = f"exit {result.exit_code}"
            if result.stderr:
                message += f": {result.stderr}"
            raise GitOperationError(args[0] if args else "git", working_dir, message)
        return result.stdout
