from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional

from forex_bureau.models.rates import RateTable

"""Short-lived rate table cache keyed by base currency.

Entries expire after the configured TTL (settings.rates_cache_ttl_seconds).
Reads and writes are plain dict operations on the event loop thread; two
concurrent refills for one base simply overwrite each other (last writer
wins), so no locking is needed. A TTL of 0 disables caching.
"""


@dataclass
class _CacheEntry:
    table: RateTable
    fetched_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RateTableCache:
    def __init__(self, ttl_seconds: int, clock: Callable[[], datetime] = _utcnow):
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl.total_seconds() > 0

    def _is_entry_valid(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.fetched_at < self._ttl

    def get(self, base: str) -> Optional[RateTable]:
        entry = self._entries.get(base.upper())
        if entry and self._is_entry_valid(entry):
            return entry.table
        return None

    def put(self, table: RateTable) -> None:
        if not self.enabled:
            return
        self._entries[table.base] = _CacheEntry(table=table, fetched_at=self._clock())

    def purge_expired(self) -> int:
        expired = [k for k, v in self._entries.items() if not self._is_entry_valid(v)]
        for k in expired:
            self._entries.pop(k, None)
        return len(expired)
