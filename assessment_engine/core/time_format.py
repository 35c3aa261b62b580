"""Helpers for presenting the attempt countdown."""

from __future__ import annotations

from assessment_engine.constants.session_constants import LOW_TIME_WARNING_SECONDS


def format_remaining(seconds: int) -> str:
    """Format a countdown as ``H:MM:SS`` from one hour upwards, else ``M:SS``."""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def is_low_on_time(seconds: int, threshold: int = LOW_TIME_WARNING_SECONDS) -> bool:
    return seconds < threshold
