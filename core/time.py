# PATH: core/time.py
"""
Time utilities for ARBWATCH.

Clock helpers used for record timestamps and RPC latency tracking.
"""

import time
from datetime import datetime, timezone
from typing import Callable

# Any zero-arg callable returning an aware datetime
Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Get current Unix timestamp in milliseconds."""
    return int(time.time() * 1000)


def is_aware(dt: datetime) -> bool:
    """True if datetime carries a usable UTC offset."""
    return dt.tzinfo is not None and dt.tzinfo.utcoffset(dt) is not None
