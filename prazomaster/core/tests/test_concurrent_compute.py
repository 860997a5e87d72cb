"""Concurrent computations sharing one oracle and holiday cache."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.catalog.catalog import default_catalog
from prazomaster.core.domain.enums import HolidayType, Jurisdiction, PartyRole, TriggerEventType
from prazomaster.core.domain.models import ComputationRequest, TriggerEvent
from prazomaster.core.engine.calculator import DeadlineCalculator


class CountingHolidayStore:
    def __init__(self, national=(), state=None) -> None:
        self.national = set(national)
        self.state = state or {}
        self._lock = threading.Lock()
        self.calls: list[tuple[int, str | None]] = []

    def fetch_holidays(self, start, end, state_code, holiday_types):
        with self._lock:
            self.calls.append((start.year, state_code))
        days = set()
        if HolidayType.NATIONAL in holiday_types:
            days.update(self.national)
        if HolidayType.STATE in holiday_types and state_code:
            days.update(self.state.get(state_code, ()))
        return {d for d in days if start <= d <= end}


class GatedHolidayStore:
    """Blocks fetches for one state until released; everything else answers at once."""

    def __init__(self, gated_state: str) -> None:
        self.gated_state = gated_state
        self.entered = threading.Event()
        self.release = threading.Event()

    def fetch_holidays(self, start, end, state_code, holiday_types):
        if state_code == self.gated_state:
            self.entered.set()
            self.release.wait(5.0)
        return set()


def _request(deadline_type: str, occurred_on: date, **kwargs) -> ComputationRequest:
    event_type = kwargs.pop("event_type", TriggerEventType.OTHER)
    return ComputationRequest(
        trigger=TriggerEvent(event_type=event_type, occurred_on=occurred_on),
        deadline_type=deadline_type,
        jurisdiction=Jurisdiction.STATE,
        **kwargs,
    )


def _calculator(store) -> DeadlineCalculator:
    return DeadlineCalculator(CalendarOracle(store), default_catalog())


def test_parallel_computes_match_serial_results() -> None:
    holidays = {date(2026, 4, 3), date(2026, 4, 21), date(2026, 12, 25)}
    state = {"SP": {date(2026, 7, 9)}}
    requests = [
        _request("CPC-002", date(2026, 3, 6), event_type=TriggerEventType.DJE_AVAILABILITY),
        _request("CPC-001", date(2026, 3, 30), party_roles={PartyRole.PUBLIC_TREASURY}),
        _request("RJ-002", date(2026, 6, 24), state_code="SP"),
        _request("CTN-001", date(2026, 11, 30)),
    ]
    expected = [_calculator(CountingHolidayStore(holidays, state)).compute(r) for r in requests]

    store = CountingHolidayStore(holidays, state)
    shared = _calculator(store)
    jobs = [requests[i % len(requests)] for i in range(64)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(shared.compute, jobs))

    for i, result in enumerate(results):
        assert result == expected[i % len(requests)]
    # Racing misses may fetch a key twice, but every key is eventually cached.
    assert set(shared.oracle.cache.keys()) == set(store.calls)


def test_slow_fetch_does_not_block_cached_key() -> None:
    store = GatedHolidayStore("SP")
    calculator = _calculator(store)
    calculator.oracle.snapshot(2026, None)

    with ThreadPoolExecutor(max_workers=4) as pool:
        slow = pool.submit(calculator.compute, _request("CPC-001", date(2026, 3, 2), state_code="SP"))
        assert store.entered.wait(2.0)

        fast = [
            pool.submit(calculator.compute, _request("CPC-001", date(2026, 3, 2)))
            for _ in range(3)
        ]
        try:
            due_dates = [f.result(timeout=2.0).due_date for f in fast]
            assert not slow.done()
        finally:
            store.release.set()

        assert due_dates == [date(2026, 3, 23)] * 3
        assert slow.result(timeout=5.0).due_date == date(2026, 3, 23)
