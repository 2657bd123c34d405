"""
Clock utilities for cache expiry and collection windows.

This module centralizes wall-clock access so that TTL and timeout logic can be
driven deterministically in tests by injecting a different clock.
"""

import itertools
from datetime import datetime, timezone
from typing import Optional, Protocol


class Clock(Protocol):
    """Anything that can report the current UTC time."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the real wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


_transaction_sequence = itertools.count(1)


def get_clock(clock: Optional[Clock] = None) -> Clock:
    """
    Return the given clock, falling back to the system clock.

    Args:
        clock: Optional injected clock

    Returns:
        A clock instance
    """
    if clock is not None:
        return clock
    return SystemClock()


def elapsed_seconds(since: datetime, now: datetime) -> float:
    """
    Calculate elapsed seconds between two timestamps.

    Args:
        since: Earlier timestamp
        now: Later timestamp

    Returns:
        Elapsed time in seconds (negative if since is in the future)
    """
    return (now - since).total_seconds()


def generate_transaction_id(now: datetime) -> str:
    """
    Build a transaction id from the given time and a process-wide sequence.

    The millisecond timestamp keeps ids time-ordered; the sequence keeps two
    attempts within the same millisecond distinct.
    """
    millis = int(now.timestamp() * 1000)
    return f"TXN{millis}-{next(_transaction_sequence):04d}"


def format_timestamp(ts: datetime) -> str:
    """Format a timestamp for receipts and statements."""
    return ts.strftime("%Y-%m-%d %H:%M:%S")
