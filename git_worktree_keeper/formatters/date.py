"""Date and time formatting utilities."""

from datetime import datetime
from typing import Optional


def format_timestamp(value: Optional[datetime]) -> str:
    """
    Format a timestamp as YYYY-MM-DD HH:MM.

    Args:
        value: Timestamp, or None when unknown

    Returns:
        Formatted string, "unknown" for None
    """
    if value is None:
        return "unknown"
    return value.strftime("%Y-%m-%d %H:%M")
