"""
git-worktree-keeper - Find and remove git worktrees whose branches are done
"""

from .__version__ import __version__
from .core import WorktreeKeeper
from .cli.main import main

__all__ = ["WorktreeKeeper", "main", "__version__"]
