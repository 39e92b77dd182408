"""
Millisecond wall-clock timestamps, the unit every createdAt column and cursor uses.
"""
import time

MS_PER_HOUR = 60 * 60 * 1000
MS_PER_DAY = 24 * MS_PER_HOUR


def now_ms() -> int:
    """Current time in integer milliseconds since the Unix epoch."""
    return int(time.time() * 1000)
