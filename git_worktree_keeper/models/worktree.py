"""Worktree data models."""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class WorktreeInfo:
    """Information about a git worktree, as listed by `git worktree list`."""

    path: str
    branch_name: str
    commit_sha: str
    is_main: bool  # Is this the main working tree?
    is_orphaned: bool  # Directory missing?

    def __str__(self) -> str:
        """String representation of worktree."""
        status = "orphaned" if self.is_orphaned else "active"
        main_marker = " (main)" if self.is_main else ""
        branch = self.branch_name or "(detached)"
        return f"{branch} @ {self.path}{main_marker} [{status}]"


@dataclass
class WorktreeRecord:
    """Scanned status of one secondary worktree of a repository container."""

    path: str
    branch: str
    repo_name: str
    repo_path: str
    default_branch: str
    has_uncommitted_changes: bool = False
    is_merged_to_default: bool = False
    is_remote_deleted: bool = False
    reason: str = ""
    last_modified: Optional[datetime] = None
    size_bytes: int = 0

    @property
    def name(self) -> str:
        """Directory name of the worktree inside its container."""
        return os.path.basename(self.path.rstrip(os.sep))
