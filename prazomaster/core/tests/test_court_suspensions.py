"""Court suspension periods: merging, counting, court filtering and store failures."""

from __future__ import annotations

from datetime import date

import pytest

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.catalog.catalog import default_catalog
from prazomaster.core.domain.enums import Jurisdiction, RuleId, TriggerEventType
from prazomaster.core.domain.errors import DataUnavailable
from prazomaster.core.domain.models import (
    ComputationRequest,
    CourtSuspension,
    SystemOutage,
    TriggerEvent,
)
from prazomaster.core.engine.calculator import DeadlineCalculator
from prazomaster.core.engine.verify import check_result
from prazomaster.core.pipeline.rules_suspension import merge_suspensions


class EmptyHolidayStore:
    def fetch_holidays(self, start, end, state_code, holiday_types):
        return set()


class MemorySuspensionStore:
    def __init__(self, suspensions=()) -> None:
        self.suspensions = list(suspensions)
        self.calls: list[tuple[date, date, str | None]] = []

    def fetch_suspensions(self, start, end, court_code):
        self.calls.append((start, end, court_code))
        return [
            s
            for s in self.suspensions
            if s.start <= end and s.end >= start and s.court_code in (None, court_code)
        ]


class BrokenSuspensionStore:
    def fetch_suspensions(self, start, end, court_code):
        raise OSError("suspension table missing")


def _calculator(suspension_store) -> DeadlineCalculator:
    oracle = CalendarOracle(EmptyHolidayStore(), suspension_store=suspension_store)
    return DeadlineCalculator(oracle, default_catalog())


def _request(occurred_on: date = date(2026, 3, 2), **kwargs) -> ComputationRequest:
    return ComputationRequest(
        trigger=TriggerEvent(event_type=TriggerEventType.OTHER, occurred_on=occurred_on),
        deadline_type=kwargs.pop("deadline_type", "CPC-001"),
        jurisdiction=Jurisdiction.STATE,
        **kwargs,
    )


ORDINANCE = CourtSuspension(
    start=date(2026, 3, 9),
    end=date(2026, 3, 13),
    name="Correicao ordinaria",
    legal_basis="Portaria 12/2026",
)


def test_merge_joins_overlapping_and_adjacent_periods() -> None:
    merged = merge_suspensions(
        [
            CourtSuspension(date(2026, 3, 20), date(2026, 3, 20), "C"),
            CourtSuspension(date(2026, 3, 12), date(2026, 3, 13), "B", legal_basis="P 1"),
            CourtSuspension(date(2026, 3, 9), date(2026, 3, 11), "A"),
            CourtSuspension(date(2026, 3, 10), date(2026, 3, 10), "A"),
        ]
    )

    assert [(s.start, s.end) for s in merged] == [
        (date(2026, 3, 9), date(2026, 3, 13)),
        (date(2026, 3, 20), date(2026, 3, 20)),
    ]
    assert merged[0].name == "A; B (P 1)"
    assert merge_suspensions([]) == ()


def test_suspension_pushes_due_date_and_is_audited() -> None:
    store = MemorySuspensionStore([ORDINANCE])
    calculator = _calculator(store)
    request = _request()

    result = calculator.compute(request)

    # 15 business days from 2026-03-02 end on 03-23; the suspended week adds five.
    assert result.due_date == date(2026, 3, 30)
    entry = next(e for e in result.applied_rules if e.rule_id == RuleId.COURT_SUSPENSION)
    assert entry.date_before == date(2026, 3, 23)
    assert entry.date_after == date(2026, 3, 30)
    assert entry.legal_basis == "CPC Art. 221"
    assert "Portaria 12/2026" in entry.description
    assert store.calls[0][0] == date(2026, 3, 2)
    assert check_result(result, request, calculator.resolve_entry("CPC-001"), calculator) == []


def test_court_specific_suspension_only_reaches_that_court() -> None:
    local = CourtSuspension(date(2026, 3, 9), date(2026, 3, 13), "Mudanca de sede", court_code="TJSP")
    calculator = _calculator(MemorySuspensionStore([local]))

    sp = calculator.compute(_request(court_code="TJSP"))
    rj = calculator.compute(_request(court_code="TJRJ"))
    unspecified = calculator.compute(_request())

    assert sp.due_date == date(2026, 3, 30)
    assert rj.due_date == date(2026, 3, 23)
    assert unspecified.due_date == date(2026, 3, 23)
    assert RuleId.COURT_SUSPENSION not in rj.rule_ids()


def test_due_date_never_lands_inside_suspension() -> None:
    # 15 calendar days from 2026-06-24 end on 07-09; days 07-08..07-10 do not count.
    closure = CourtSuspension(date(2026, 7, 8), date(2026, 7, 10), "Inventario anual")
    calculator = _calculator(MemorySuspensionStore([closure]))
    request = _request(date(2026, 6, 24), deadline_type="RJ-002")

    result = calculator.compute(request)

    assert not closure.covers(result.due_date)
    assert result.due_date == date(2026, 7, 13)
    assert check_result(result, request, calculator.resolve_entry("RJ-002"), calculator) == []


def test_suspensions_and_outages_share_the_skip_set() -> None:
    calculator = _calculator(MemorySuspensionStore([ORDINANCE]))
    request = _request(
        electronic=True,
        outages=(SystemOutage(start=date(2026, 3, 16), end=date(2026, 3, 17), source="PJe"),),
    )

    result = calculator.compute(request)
    by_rule = {e.rule_id: e for e in result.applied_rules}

    assert result.due_date == date(2026, 4, 1)
    assert by_rule[RuleId.SYSTEM_OUTAGE_EXTENSION].date_before == date(2026, 3, 30)
    assert by_rule[RuleId.COURT_SUSPENSION].date_before == date(2026, 3, 25)


def test_without_suspension_store_nothing_is_skipped() -> None:
    result = _calculator(None).compute(_request())

    assert result.due_date == date(2026, 3, 23)
    assert RuleId.COURT_SUSPENSION not in result.rule_ids()


def test_suspension_store_failure_is_data_unavailable() -> None:
    calculator = _calculator(BrokenSuspensionStore())

    with pytest.raises(DataUnavailable, match="suspension table missing"):
        calculator.compute(_request())
