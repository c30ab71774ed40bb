"""Data models for git-worktree-keeper."""

from .worktree import WorktreeInfo, WorktreeRecord
from .repository import RepositoryContainer, RepositoryScanResult, CleanupReport
from .cleanup import RemovalOutcome, RemovalResult, CleanupSummary

__all__ = [
    "WorktreeInfo",
    "WorktreeRecord",
    "RepositoryContainer",
    "RepositoryScanResult",
    "CleanupReport",
    "RemovalOutcome",
    "RemovalResult",
    "CleanupSummary",
]
