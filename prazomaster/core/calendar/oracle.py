"""Calendar oracle: business-day answers for a jurisdiction and state.

Responsibilities:
  - Decide whether a date is a business day (weekday, not a national/state
    holiday, not inside an applicable recess window).
  - Resolve holidays per (year, state) through the HolidayStore port and cache them.
  - Read court suspension periods through the optional SuspensionStore port.
  - Enforce the caller-supplied fetch timeout.
Must not:
  - Fail open: an unreachable or slow store raises DataUnavailable.
  - Hold the cache lock while fetching from the store.

Invariants:
  - Answers depend only on the holiday snapshot and recess configuration.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from datetime import date, timedelta
from typing import Callable, Optional

import numpy as np

from ..domain.enums import HolidayType, Jurisdiction
from ..domain.errors import DataUnavailable
from ..domain.models import CourtSuspension
from ..ports.holiday_store_port import HolidayStore
from ..ports.suspension_store_port import SuspensionStore
from .holiday_cache import HolidayCache, HolidaySnapshot
from .recess import RecessConfig, RecessWindow, load_recess_config

_DEBUG_FN: Callable[[str], None] | None = None


def set_oracle_debug(fn: Callable[[str], None] | None) -> None:
    global _DEBUG_FN
    _DEBUG_FN = fn


def _debug(msg: str) -> None:
    if _DEBUG_FN is not None:
        _DEBUG_FN(msg)


# Upper bound on days scanned when looking for the next business day.
MAX_SCAN_DAYS = 400


class CalendarOracle:
    def __init__(
        self,
        holiday_store: HolidayStore,
        recess_config: RecessConfig | None = None,
        cache: HolidayCache | None = None,
        fetch_timeout: float | None = None,
        executor: ThreadPoolExecutor | None = None,
        suspension_store: SuspensionStore | None = None,
    ) -> None:
        self._store = holiday_store
        self._suspension_store = suspension_store
        self._recess = recess_config if recess_config is not None else load_recess_config()
        self._cache = cache if cache is not None else HolidayCache()
        self._fetch_timeout = fetch_timeout
        self._executor = executor
        if fetch_timeout is not None and executor is None:
            self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="holiday-fetch")

    @property
    def cache(self) -> HolidayCache:
        return self._cache

    @property
    def recess_config(self) -> RecessConfig:
        return self._recess

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)

    def snapshot(self, year: int, state_code: Optional[str] = None) -> HolidaySnapshot:
        key = (year, state_code)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        _debug(f"holiday cache miss year={year} state={state_code}")
        holidays = self._fetch(year, state_code)
        snapshot = HolidaySnapshot.build(year, state_code, holidays)
        self._cache.put(key, snapshot)
        return snapshot

    def _fetch(self, year: int, state_code: Optional[str]) -> set[date]:
        types = frozenset({HolidayType.NATIONAL, HolidayType.STATE}) if state_code else frozenset(
            {HolidayType.NATIONAL}
        )
        start, end = date(year, 1, 1), date(year, 12, 31)
        return set(
            self._call_store(
                f"Holiday store (year={year}, state={state_code})",
                self._store.fetch_holidays,
                start,
                end,
                state_code,
                types,
            )
        )

    def _call_store(self, label: str, fn: Callable, *args):
        try:
            if self._executor is None:
                return fn(*args)
            future = self._executor.submit(fn, *args)
            return future.result(timeout=self._fetch_timeout)
        except FutureTimeoutError as exc:
            raise DataUnavailable(f"{label} timed out after {self._fetch_timeout}s") from exc
        except DataUnavailable:
            raise
        except Exception as exc:
            raise DataUnavailable(f"{label} unavailable: {exc}") from exc

    def suspensions_between(
        self, start: date, end: date, court_code: Optional[str] = None
    ) -> tuple[CourtSuspension, ...]:
        """Court suspensions overlapping [start, end], ordered by start; empty without a store."""
        if self._suspension_store is None:
            return ()
        found = self._call_store(
            f"Suspension store (court={court_code})",
            self._suspension_store.fetch_suspensions,
            start,
            end,
            court_code,
        )
        _debug(f"suspensions start={start} end={end} court={court_code} found={len(found)}")
        return tuple(sorted(found, key=lambda s: (s.start, s.end)))

    def is_holiday(self, day: date, state_code: Optional[str] = None) -> bool:
        return day in self.snapshot(day.year, state_code).holidays

    def is_working_day(self, day: date, state_code: Optional[str] = None) -> bool:
        """Weekday that is not a holiday; recess windows are not considered."""
        return self.snapshot(day.year, state_code).is_working_day(day)

    def recess_window_at(
        self, day: date, jurisdiction: Optional[Jurisdiction]
    ) -> Optional[tuple[RecessWindow, date, date]]:
        return self._recess.window_at(day, jurisdiction)

    def in_recess(self, day: date, jurisdiction: Optional[Jurisdiction]) -> bool:
        return self._recess.in_recess(day, jurisdiction)

    def is_business_day(
        self,
        day: date,
        state_code: Optional[str] = None,
        jurisdiction: Optional[Jurisdiction] = None,
    ) -> bool:
        if not self.is_working_day(day, state_code):
            return False
        return not self.in_recess(day, jurisdiction)

    def next_business_day(
        self,
        day: date,
        state_code: Optional[str] = None,
        jurisdiction: Optional[Jurisdiction] = None,
    ) -> date:
        """First business day strictly after `day`."""
        cursor = day
        for _ in range(MAX_SCAN_DAYS):
            cursor += timedelta(days=1)
            if self.is_business_day(cursor, state_code, jurisdiction):
                return cursor
        raise DataUnavailable(f"No business day found within {MAX_SCAN_DAYS} days after {day}")

    def roll_forward(
        self,
        day: date,
        state_code: Optional[str] = None,
        jurisdiction: Optional[Jurisdiction] = None,
    ) -> date:
        if self.is_business_day(day, state_code, jurisdiction):
            return day
        return self.next_business_day(day, state_code, jurisdiction)

    def previous_business_day(
        self,
        day: date,
        state_code: Optional[str] = None,
        jurisdiction: Optional[Jurisdiction] = None,
    ) -> date:
        cursor = day
        for _ in range(MAX_SCAN_DAYS):
            cursor -= timedelta(days=1)
            if self.is_business_day(cursor, state_code, jurisdiction):
                return cursor
        raise DataUnavailable(f"No business day found within {MAX_SCAN_DAYS} days before {day}")

    def count_business_days_between(
        self,
        start: date,
        end: date,
        state_code: Optional[str] = None,
        jurisdiction: Optional[Jurisdiction] = None,
    ) -> int:
        """Business days in (start, end]; negative when end precedes start."""
        if end == start:
            return 0
        if end < start:
            return -self.count_business_days_between(end, start, state_code, jurisdiction)

        excluded: set[date] = set()
        for year in range(start.year, end.year + 1):
            excluded.update(self.snapshot(year, state_code).holidays)
            for window in self._recess.windows_for(jurisdiction):
                excluded.update(window.days_in_year(year))
        calendar = np.busdaycalendar(
            weekmask="1111100",
            holidays=np.array(sorted(excluded), dtype="datetime64[D]"),
        )
        first = np.datetime64(start + timedelta(days=1), "D")
        stop = np.datetime64(end + timedelta(days=1), "D")
        return int(np.busday_count(first, stop, busdaycal=calendar))
