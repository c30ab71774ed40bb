"""Worktree operations service for git-worktree-keeper."""

import os
from typing import Any, Dict

from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeInfo
from git_worktree_keeper.services.git.runner import CommandRunner

logger = get_logger(__name__)


def parse_worktree_list(output: str) -> list[WorktreeInfo]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name
        (blank line between worktrees)

    The first entry is always the main working tree.
    """
    worktree_list: list[WorktreeInfo] = []
    current: Dict[str, Any] = {}

    def flush():
        path = current.get("path", "")
        if path:
            worktree_list.append(
                WorktreeInfo(
                    path=path,
                    branch_name=current.get("branch", ""),
                    commit_sha=current.get("HEAD", ""),
                    is_main=not worktree_list,
                    is_orphaned=not os.path.exists(path),
                )
            )

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            # Empty line marks end of worktree entry
            if current:
                flush()
                current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = ""
        elif line.startswith("detached"):
            current["branch"] = ""

    # Handle last entry if no trailing blank line
    if current:
        flush()

    return worktree_list


class WorktreeService:
    """Service for listing, inspecting and removing git worktrees."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def list_worktrees(self, main_path: str) -> list[WorktreeInfo]:
        """List every worktree attached to the repository at main_path.

        Raises:
            GitOperationError: if the worktree list cannot be read
        """
        output = self.runner.run_checked(main_path, "worktree", "list", "--porcelain")
        worktrees = parse_worktree_list(output)

        logger.debug(f"Found {len(worktrees)} worktrees in {main_path}")
        for wt in worktrees:
            logger.debug(f"  {wt}")
        return worktrees

    def get_status(self, worktree_path: str) -> str:
        """Return `git status --porcelain` output for a worktree.

        An empty string means the working tree is clean.

        Raises:
            GitOperationError: if status cannot be determined
        """
        return self.runner.run_checked(worktree_path, "status", "--porcelain")

    def remove_worktree(self, main_path: str, worktree_path: str) -> None:
        """Remove a worktree, running git from the canonical checkout.

        No --force: git refuses to drop a dirty or locked worktree on its own.
        """
        result = self.runner.run(main_path, "worktree", "remove", worktree_path)
        if not result.ok:
            if result.stderr:
                error_msg = f"git worktree remove failed (exit {result.exit_code}): {result.stderr}"
            else:
                error_msg = f"git worktree remove failed with exit code {result.exit_code}"
            logger.error(f"Failed to remove worktree at {worktree_path}: {error_msg}")
            raise GitOperationError("worktree remove", main_path, error_msg)

        logger.info(f"Removed worktree at {worktree_path}")

    def prune_worktrees(self, main_path: str) -> None:
        """Prune metadata of worktrees whose directories are gone."""
        result = self.runner.run(main_path, "worktree", "prune")
        if not result.ok:
            error_msg = f"git worktree prune failed (exit {result.exit_code}): {result.stderr}"
            raise GitOperationError("worktree prune", main_path, error_msg)

        logger.info(f"Pruned worktree metadata in {main_path}")
