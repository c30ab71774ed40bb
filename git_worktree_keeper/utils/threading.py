"""Threading utilities for sizing the repository scan pool."""

import os
import sys
from typing import Any, Dict, Optional


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with the GIL disabled
    """
    try:
        return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()
    except Exception:
        return False


def get_python_threading_mode() -> str:
    """Get a description of the current threading mode."""
    try:
        if hasattr(sys, "_is_gil_enabled"):
            if sys._is_gil_enabled():
                return "GIL-enabled"
            else:
                return "free-threading"
        else:
            return "GIL-enabled (Python < 3.13)"
    except Exception:
        return "unknown"


def get_worker_count(task_count: int, user_specified: Optional[int] = None) -> int:
    """Number of threads for scanning task_count repositories.

    One thread per repository; the work is subprocess and network bound, so
    the GIL is not the bottleneck. A user-specified value caps the pool.

    Args:
        task_count: Number of repositories to scan
        user_specified: User-specified maximum, if provided

    Returns:
        Worker count, at least 1
    """
    workers = max(1, task_count)
    if user_specified is not None and user_specified > 0:
        workers = min(workers, user_specified)
    return workers


def get_threading_info() -> Dict[str, Any]:
    """Get information about the Python threading configuration."""
    return {
        "mode": get_python_threading_mode(),
        "free_threading": is_free_threading_enabled(),
        "cpu_count": os.cpu_count() or 1,
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
    }
