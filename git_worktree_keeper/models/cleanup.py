"""Models describing the outcome of a cleanup run."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from git_worktree_keeper.models.worktree import WorktreeRecord


class RemovalOutcome(Enum):
    """Terminal state of a stale worktree within one cleanup run."""
    REMOVED = "removed"
    REFUSED = "refused"  # Dirty when re-checked before removal
    FAILED = "failed"
    SKIPPED = "skipped"  # Declined at the prompt


@dataclass
class RemovalResult:
    """What happened to one stale worktree."""
    record: WorktreeRecord
    outcome: RemovalOutcome
    message: Optional[str] = None


@dataclass
class CleanupSummary:
    """Tally printed at the end of `run`."""
    results: List[RemovalResult] = field(default_factory=list)
    prune_warnings: List[str] = field(default_factory=list)

    def _count(self, outcome: RemovalOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def removed(self) -> int:
        return self._count(RemovalOutcome.REMOVED)

    @property
    def refused(self) -> int:
        return self._count(RemovalOutcome.REFUSED)

    @property
    def failed(self) -> int:
        return self._count(RemovalOutcome.FAILED)

    @property
    def skipped(self) -> int:
        """Everything not removed: declined, refused on re-check, or failed."""
        return len(self.results) - self.removed

    @property
    def freed_bytes(self) -> int:
        return sum(r.record.size_bytes for r in self.results if r.outcome == RemovalOutcome.REMOVED)

    def touched_repositories(self) -> List[str]:
        """Repository paths with at least one removal, in first-seen order."""
        seen: List[str] = []
        for r in self.results:
            if r.outcome == RemovalOutcome.REMOVED and r.record.repo_path not in seen:
                seen.append(r.record.repo_path)
        return seen
