"""Byte count formatting."""

UNITS = "KMGTPE"


def format_bytes(size: int) -> str:
    """
    Format a byte count using binary units.

    Examples:
        512 -> "512 B", 1536 -> "1.5 KB", 5 * 1024**3 -> "5.0 GB"
    """
    unit = 1024
    if size < unit:
        return f"{size} B"

    div, exp = unit, 0
    n = size // unit
    while n >= unit and exp < len(UNITS) - 1:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {UNITS[exp]}B"
