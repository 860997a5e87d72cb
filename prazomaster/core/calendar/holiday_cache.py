"""Time-bounded cache of per-(year, state) holiday snapshots.

Responsibilities:
  - Hold immutable holiday snapshots for a bounded time window and size.
  - Expose explicit invalidation hooks for holiday-table edits.
Must not:
  - Call the holiday store; population happens outside this class.

Invariants:
  - Entries are replaced whole, never mutated in place.
  - The lock only guards dictionary operations; no I/O happens under it.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

import numpy as np

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_MAX_ENTRIES = 256

CacheKey = tuple[int, Optional[str]]


@dataclass(frozen=True)
class HolidaySnapshot:
    year: int
    state_code: Optional[str]
    holidays: frozenset[date]
    busdaycal: np.busdaycalendar

    @classmethod
    def build(cls, year: int, state_code: Optional[str], holidays: set[date]) -> "HolidaySnapshot":
        in_year = frozenset(d for d in holidays if d.year == year)
        days = np.array(sorted(in_year), dtype="datetime64[D]")
        return cls(
            year=year,
            state_code=state_code,
            holidays=in_year,
            busdaycal=np.busdaycalendar(weekmask="1111100", holidays=days),
        )

    def is_working_day(self, day: date) -> bool:
        return bool(np.is_busday(np.datetime64(day, "D"), busdaycal=self.busdaycal))


@dataclass(frozen=True)
class _CacheEntry:
    snapshot: HolidaySnapshot
    expires_at: float


class HolidayCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[CacheKey, _CacheEntry] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> Optional[HolidaySnapshot]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if entry.expires_at <= now:
                del self._entries[key]
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.snapshot

    def put(self, key: CacheKey, snapshot: HolidaySnapshot) -> None:
        entry = _CacheEntry(snapshot=snapshot, expires_at=self._clock() + self._ttl)
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, year: Optional[int] = None, state_code: Optional[str] = None) -> int:
        """Drop entries matching the given year and/or state; returns how many were dropped.

        With neither argument every entry is dropped.
        """
        with self._lock:
            doomed = [
                key
                for key in self._entries
                if (year is None or key[0] == year)
                and (state_code is None or key[1] == state_code)
            ]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[CacheKey]:
        with self._lock:
            return list(self._entries.keys())
