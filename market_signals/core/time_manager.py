"""
TimeManager - lightweight time utilities for consistent timing across modules.
"""

import time
from typing import Callable

Clock = Callable[[], float]


def now() -> float:
    """Return system time in seconds."""
    return time.time()


def time_bucket(timestamp: float, bucket_seconds: float) -> int:
    """Index of the fixed-size time bucket containing ``timestamp``."""
    if bucket_seconds <= 0:
        raise ValueError("bucket_seconds must be positive")
    return int(timestamp // bucket_seconds)


def is_fresh(snapshot_ts: float, current_time: float, window_seconds: float) -> bool:
    """Check if snapshot is fresh within a time window (inclusive)."""
    return (current_time - snapshot_ts) <= window_seconds
