"""Safe removal of stale worktrees."""

import os
from typing import Iterable, List

from git_worktree_keeper.constants import CANONICAL_CHECKOUT
from git_worktree_keeper.exceptions import (
    GitOperationError,
    RemovalRefusedError,
    WorktreeRemovalError,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.git.worktrees import WorktreeService

logger = get_logger(__name__)


class RemovalExecutor:
    """Deletes worktrees after re-validating them."""

    def __init__(self, worktree_service: WorktreeService):
        self.worktree_service = worktree_service

    def remove(self, record: WorktreeRecord) -> None:
        """Remove a worktree believed stale.

        The working tree status is checked again right before deletion, since
        an arbitrary amount of time may have passed since the scan.

        Raises:
            RemovalRefusedError: if the worktree now has uncommitted changes
            WorktreeRemovalError: if the re-check or the removal itself fails
        """
        try:
            status = self.worktree_service.get_status(record.path)
        except GitOperationError as e:
            raise WorktreeRemovalError(record.path, f"failed to check status: {e}") from e

        if status:
            logger.warning(f"Refusing to remove {record.path}: uncommitted changes appeared")
            raise RemovalRefusedError(record.path)

        # Run from the canonical checkout; the worktree directory may be half gone
        main_path = os.path.join(record.repo_path, CANONICAL_CHECKOUT)
        try:
            self.worktree_service.remove_worktree(main_path, record.path)
        except GitOperationError as e:
            raise WorktreeRemovalError(record.path, e.message or str(e)) from e

    def prune(self, repo_paths: Iterable[str]) -> List[str]:
        """Prune worktree metadata once per repository.

        Returns:
            Warning messages for repositories that could not be pruned
        """
        warnings = []
        seen = set()
        for repo_path in repo_paths:
            if repo_path in seen:
                continue
            seen.add(repo_path)

            main_path = os.path.join(repo_path, CANONICAL_CHECKOUT)
            try:
                self.worktree_service.prune_worktrees(main_path)
            except GitOperationError as e:
                warning = f"Could not prune {os.path.basename(repo_path)}: {e}"
                logger.warning(warning)
                warnings.append(warning)
        return warnings
