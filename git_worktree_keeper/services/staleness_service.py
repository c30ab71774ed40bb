"""Staleness classification for scanned worktrees."""

from git_worktree_keeper.constants import TAG_ACTIVE, TAG_CHANGES, TAG_DELETED, TAG_MERGED
from git_worktree_keeper.models.worktree import WorktreeRecord


class StalenessClassifier:
    """Single source of truth for whether a worktree may be deleted.

    list, scan and run all go through this class so they can never disagree.
    """

    @staticmethod
    def is_stale(record: WorktreeRecord) -> bool:
        """
        Check if a worktree is disposable.

        Args:
            record: Scanned worktree status

        Returns:
            True if the worktree is clean and its branch is merged or gone from the remote
        """
        return not record.has_uncommitted_changes and (
            record.is_merged_to_default or record.is_remote_deleted
        )

    @staticmethod
    def status_tag(record: WorktreeRecord) -> str:
        """Display tag, in priority order changes > merged > deleted > active."""
        if record.has_uncommitted_changes:
            return TAG_CHANGES
        if record.is_merged_to_default:
            return TAG_MERGED
        if record.is_remote_deleted:
            return TAG_DELETED
        return TAG_ACTIVE

    @classmethod
    def classify(cls, record: WorktreeRecord) -> tuple[bool, str]:
        """Return (stale, reason) for a worktree."""
        return cls.is_stale(record), record.reason
