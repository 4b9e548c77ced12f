"""Download progress text."""

import math


def format_progress(position: int, total: int, speed: int) -> str:
    """Format a download sample as '(50% @ 10 KiB/s)' or '(2KiB @ 5 KiB/s)'.

    An unknown or non-positive total falls back to the raw KiB count.
    """
    if total > 0:
        return f"({math.floor(100 * position / total)}% @ {speed} KiB/s)"
    return f"({math.floor(position / 1000)}KiB @ {speed} KiB/s)"


def format_download_line(prefix: str, downloading: str,
                         position: int, total: int, speed: int) -> str:
    """Full status line while a package is downloading."""
    return f"{prefix} {downloading} {format_progress(position, total, speed)}"
