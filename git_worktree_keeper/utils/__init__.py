"""Utility functions for git-worktree-keeper.

- threading: worker sizing and threading-mode diagnostics
"""

from .threading import (
    is_free_threading_enabled,
    get_python_threading_mode,
    get_worker_count,
    get_threading_info,
)

__all__ = [
    "is_free_threading_enabled",
    "get_python_threading_mode",
    "get_worker_count",
    "get_threading_info",
]
