"""Per-repository worktree scanning."""

import os
from datetime import datetime
from typing import Optional

from git_worktree_keeper.constants import (
    FALLBACK_DEFAULT_BRANCH,
    REASON_CHANGES,
    REASON_MERGED,
    REASON_REMOTE_DELETED,
    REASON_STATUS_ERROR,
)
from git_worktree_keeper.exceptions import (
    CommandTimeoutError,
    GitHubAPIError,
    GitOperationError,
    RepositoryScanError,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import RepositoryContainer, RepositoryScanResult
from git_worktree_keeper.models.worktree import WorktreeInfo, WorktreeRecord
from git_worktree_keeper.services.git.github import GitHubService
from git_worktree_keeper.services.git.operations import GitOperations
from git_worktree_keeper.services.git.worktrees import WorktreeService

logger = get_logger(__name__)


def get_last_modified(worktree_path: str) -> Optional[datetime]:
    """Modification time of the worktree's `.git` marker, None if unreadable."""
    try:
        return datetime.fromtimestamp(os.stat(os.path.join(worktree_path, ".git")).st_mtime)
    except OSError:
        return None


def get_dir_size(path: str) -> int:
    """Approximate size of all files below path; unreadable entries are skipped."""
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path, onerror=lambda e: None):
        for filename in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, filename)).st_size
            except OSError:
                continue
    return total


class WorktreeScanner:
    """Builds a WorktreeRecord for every secondary worktree of a repository.

    Probes run cheapest first and stop as soon as the verdict is settled:
    working-tree status, then the merged-branch list, then the remote.
    """

    def __init__(
        self,
        git_operations: GitOperations,
        worktree_service: WorktreeService,
        github_service: Optional[GitHubService] = None,
    ):
        self.git_operations = git_operations
        self.worktree_service = worktree_service
        self.github_service = github_service

    def resolve_default_branch(self, main_path: str) -> str:
        """Default branch of the repository, "main" if it cannot be determined."""
        if self.github_service and self.github_service.enabled:
            remote_url = self.git_operations.get_remote_url(main_path)
            if remote_url:
                try:
                    return self.github_service.get_default_branch(remote_url)
                except GitHubAPIError as e:
                    logger.debug(f"GitHub lookup failed for {main_path}: {e}")

        try:
            return self.git_operations.get_remote_head_branch(main_path)
        except CommandTimeoutError:
            raise
        except GitOperationError as e:
            logger.debug(
                f"Could not determine default branch for {main_path}, "
                f"falling back to {FALLBACK_DEFAULT_BRANCH}: {e}"
            )
            return FALLBACK_DEFAULT_BRANCH

    def scan(self, container: RepositoryContainer) -> RepositoryScanResult:
        """Scan one repository container.

        Raises:
            RepositoryScanError: if the worktrees cannot be enumerated
        """
        main_path = container.main_path
        result = RepositoryScanResult(container=container)

        default_branch = self.resolve_default_branch(main_path)
        logger.debug(f"{container.name}: default branch is {default_branch}")

        try:
            self.git_operations.fetch_prune(main_path)
        except GitOperationError as e:
            # Non-fatal: continue with whatever remote refs we already have
            warning = f"Could not fetch from remote for {container.name}: {e}"
            logger.warning(warning)
            result.warnings.append(warning)

        try:
            worktrees = self.worktree_service.list_worktrees(main_path)
        except GitOperationError as e:
            raise RepositoryScanError(container.name, str(e)) from e

        merged_cache: dict[str, set[str]] = {}
        for info in worktrees:
            if self._is_canonical(info, container):
                continue
            result.worktrees.append(
                self._scan_worktree(info, container, default_branch, merged_cache)
            )

        return result

    @staticmethod
    def _is_canonical(info: WorktreeInfo, container: RepositoryContainer) -> bool:
        if info.is_main:
            return True
        return os.path.normpath(info.path) == os.path.normpath(container.main_path)

    def _merged_branches(self, main_path: str, default_branch: str, cache: dict) -> set[str]:
        """Merged-branch list, computed at most once per repository scan."""
        if default_branch not in cache:
            try:
                target = self.git_operations.get_merge_target(main_path, default_branch)
                cache[default_branch] = self.git_operations.get_merged_branches(main_path, target)
            except CommandTimeoutError:
                raise
            except GitOperationError as e:
                logger.debug(f"Could not list branches merged into {default_branch}: {e}")
                cache[default_branch] = set()
        return cache[default_branch]

    def _scan_worktree(
        self,
        info: WorktreeInfo,
        container: RepositoryContainer,
        default_branch: str,
        merged_cache: dict,
    ) -> WorktreeRecord:
        record = WorktreeRecord(
            path=info.path,
            branch=info.branch_name,
            repo_name=container.name,
            repo_path=container.path,
            default_branch=default_branch,
            last_modified=get_last_modified(info.path),
            size_bytes=get_dir_size(info.path),
        )

        try:
            status = self.worktree_service.get_status(info.path)
        except CommandTimeoutError:
            raise
        except GitOperationError as e:
            # Fail closed: a worktree we cannot inspect is never disposable
            logger.warning(f"Could not check worktree status for {info.path}: {e}")
            record.has_uncommitted_changes = True
            record.reason = REASON_STATUS_ERROR
            return record

        if status:
            record.has_uncommitted_changes = True
            record.reason = REASON_CHANGES
            return record

        if not info.branch_name:
            logger.debug(f"{info.path} is on a detached HEAD, treating as active")
            return record

        # A branch cannot be merged into itself
        if info.branch_name == default_branch:
            logger.debug(f"{info.path} is on the default branch {default_branch}")
        elif info.branch_name in self._merged_branches(
            container.main_path, default_branch, merged_cache
        ):
            record.is_merged_to_default = True
            record.reason = REASON_MERGED.format(default_branch=default_branch)
            return record

        try:
            exists = self.git_operations.remote_branch_exists(info.path, info.branch_name)
        except CommandTimeoutError:
            raise
        except GitOperationError as e:
            logger.debug(f"Could not query remote branch {info.branch_name}: {e}")
            return record

        if not exists:
            record.is_remote_deleted = True
            record.reason = REASON_REMOTE_DELETED

        return record
