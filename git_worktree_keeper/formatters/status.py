"""Status formatting utilities."""

from rich.markup import escape

from git_worktree_keeper.constants import TAG_COLORS
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.staleness_service import StalenessClassifier


def format_status_tag(record: WorktreeRecord) -> str:
    """
    Format the status tag of a worktree as Rich markup.

    Args:
        record: Scanned worktree

    Returns:
        Escaped, colored tag such as "[red]\\[merged][/red]"
    """
    tag = StalenessClassifier.status_tag(record)
    color = TAG_COLORS.get(tag)
    if color:
        return f"[{color}]{escape(tag)}[/{color}]"
    return escape(tag)


def format_worktree_label(record: WorktreeRecord) -> str:
    """Label used in prompts and removal messages, e.g. "svc/feat-x"."""
    return f"{record.repo_name}/{record.name}"
