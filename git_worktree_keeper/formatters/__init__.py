"""Formatting utilities for git-worktree-keeper.

- date: timestamp formatting
- size: human-readable byte counts
- status: status tags and worktree labels
"""

from .date import format_timestamp
from .size import format_bytes
from .status import format_status_tag, format_worktree_label

__all__ = [
    "format_timestamp",
    "format_bytes",
    "format_status_tag",
    "format_worktree_label",
]
