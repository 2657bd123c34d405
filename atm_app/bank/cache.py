"""
Single-entry balance cache for the account service proxy.

Holds the balance of the last queried account for a fixed TTL. Expiry is
computed from an injected clock so tests can move time explicitly.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..utils.time import Clock, elapsed_seconds, get_clock


@dataclass(frozen=True)
class CacheEntry:
    """Last known balance for one account."""
    account_number: str
    balance: float
    fetched_at: datetime

    def is_valid(self, now: datetime, ttl_seconds: float) -> bool:
        return elapsed_seconds(self.fetched_at, now) < ttl_seconds


class BalanceCache:
    """Time-bounded cache of the last queried account balance."""

    def __init__(self, ttl_seconds: float = 60.0, clock: Optional[Clock] = None):
        self.ttl_seconds = ttl_seconds
        self.clock = get_clock(clock)
        self._entry: Optional[CacheEntry] = None

    @property
    def entry(self) -> Optional[CacheEntry]:
        return self._entry

    def get(self, account_number: str) -> Optional[float]:
        """Cached balance for the account, or None on miss or expiry."""
        entry = self._entry
        if entry is None or entry.account_number != account_number:
            return None
        if not entry.is_valid(self.clock.now(), self.ttl_seconds):
            self._entry = None
            return None
        return entry.balance

    def put(self, account_number: str, balance: float) -> None:
        self._entry = CacheEntry(
            account_number=account_number,
            balance=balance,
            fetched_at=self.clock.now()
        )

    def invalidate(self) -> None:
        self._entry = None
