"""Timing constants for a running assessment attempt."""

SECONDS_PER_MINUTE: int = 60
TICK_INTERVAL_MS: int = 1000
LOW_TIME_WARNING_SECONDS: int = 300
