"""Shared utility functions for formatting."""

from datetime import datetime


def format_seconds_to_timestamp(seconds: float) -> str:
    """Convert seconds to H:MM:SS or M:SS format."""
    if seconds is None:
        return "??:??"
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_size(size_bytes: int) -> str:
    """Human-readable byte count, e.g. 512B, 3.4KB, 12.0MB."""
    if size_bytes < 1024:
        return f"{size_bytes}B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f}KB"
    return f"{size_bytes / (1024 * 1024):.1f}MB"


def format_created_at(value) -> str:
    """Format a row timestamp for display.

    Accepts ISO string or datetime object.
    Returns: 'YYYY-MM-DD HH:MM' format.
    """
    if value is None:
        return ""
    try:
        if isinstance(value, str):
            dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
        else:
            dt = value
        return dt.strftime("%Y-%m-%d %H:%M")
    except (TypeError, ValueError):
        return str(value)
