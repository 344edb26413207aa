"""SharedCache — latest balance per kind plus readiness.

One writer per kind (its RefreshScheduler), any number of readers
(SupplyCalculator). Entries are immutable; a store swaps the whole entry
under the lock, so value/last_updated/has_value are always read together.
The lock is never held across I/O.
"""

import threading
from datetime import datetime

from src.ss_balance.domain.models import CacheEntry, CacheSnapshot
from src.ss_common.datetime_utils import utc_now
from src.ss_common.enums import BalanceKind


class SharedCache:
    def __init__(self) -> None:
        self._entries: dict[BalanceKind, CacheEntry] = {k: CacheEntry(kind=k) for k in BalanceKind}
        self._lock = threading.Lock()

    def store(self, kind: BalanceKind, value: int, at: datetime | None = None) -> CacheEntry:
        """Record a successful fetch. has_value becomes (and stays) True."""
        if value < 0:
            raise ValueError(f"Balance must be non-negative, got {value}")
        entry = CacheEntry(kind=kind, value=value, last_updated=at or utc_now(), has_value=True)
        with self._lock:
            self._entries[kind] = entry
        return entry

    def get(self, kind: BalanceKind) -> CacheEntry:
        with self._lock:
            return self._entries[kind]

    def snapshot(self) -> CacheSnapshot:
        with self._lock:
            return CacheSnapshot(entries=dict(self._entries))

    @property
    def is_ready(self) -> bool:
        return self.snapshot().is_ready
