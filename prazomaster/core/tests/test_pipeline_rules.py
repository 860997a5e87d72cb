"""Tests for rule selection, precedence and the optional special rules."""

from __future__ import annotations

import dataclasses
from datetime import date

import pytest

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.catalog.catalog import RuleCatalog, load_catalog_file
from prazomaster.core.domain.enums import (
    CountingMode,
    Jurisdiction,
    PartyRole,
    RuleId,
    SpecialRule,
    TriggerEventType,
    WarningCode,
    warning_code_of,
)
from prazomaster.core.domain.errors import (
    ComputationError,
    DataUnavailable,
    InvalidRequest,
    UnknownDeadlineType,
)
from prazomaster.core.domain.models import (
    ComputationRequest,
    InterruptingMotion,
    RuleCatalogEntry,
    SystemOutage,
    TriggerEvent,
)
from prazomaster.core.engine.calculator import DeadlineCalculator
from prazomaster.core.engine.verify import check_result, verify_computation
from prazomaster.core.pipeline.pipeline import (
    CANONICAL_RULE_ORDER,
    RulePipeline,
    build_default_steps,
)

DOUBLING_BOTH = (SpecialRule.DOUBLING_ELIGIBLE, SpecialRule.CO_LITIGANT_DOUBLING)

AMBIGUOUS = RuleCatalogEntry(
    deadline_type="TEST-AMB",
    name="Exclusive doubling, no precedence",
    base_duration=10,
    counting_mode=CountingMode.BUSINESS_DAYS,
    special_rules=DOUBLING_BOTH,
    co_litigant_multiplier=3,
    exclusive_rules=frozenset({RuleId.PRIVILEGED_DOUBLING, RuleId.CO_LITIGANT_DOUBLING}),
)
ORDERED = dataclasses.replace(
    AMBIGUOUS,
    deadline_type="TEST-ORD",
    precedence=(RuleId.CO_LITIGANT_DOUBLING, RuleId.PRIVILEGED_DOUBLING),
)
COMPOUNDING = RuleCatalogEntry(
    deadline_type="TEST-CMP",
    name="Compounding doubling",
    base_duration=10,
    counting_mode=CountingMode.BUSINESS_DAYS,
    special_rules=DOUBLING_BOTH,
    allow_compounding=True,
)


class EmptyHolidayStore:
    def __init__(self) -> None:
        self.calls = 0

    def fetch_holidays(self, start, end, state_code, holiday_types):
        self.calls += 1
        return set()


class FailingCatalog:
    def get_entry(self, deadline_type):
        raise OSError("catalog offline")

    def list_entries(self, category=None):
        raise OSError("catalog offline")


def make_calculator(store=None) -> DeadlineCalculator:
    catalog = RuleCatalog(load_catalog_file())
    for entry in (AMBIGUOUS, ORDERED, COMPOUNDING):
        catalog.register(entry)
    return DeadlineCalculator(CalendarOracle(store or EmptyHolidayStore()), catalog)


def make_request(deadline_type: str, occurred_on: date = date(2026, 3, 2), **kwargs) -> ComputationRequest:
    return ComputationRequest(
        trigger=TriggerEvent(event_type=TriggerEventType.OTHER, occurred_on=occurred_on),
        deadline_type=deadline_type,
        jurisdiction=kwargs.pop("jurisdiction", Jurisdiction.STATE),
        **kwargs,
    )


def _codes(result) -> list[WarningCode]:
    return [warning_code_of(w) for w in result.warnings]


def test_canonical_order_is_fixed() -> None:
    pipeline = RulePipeline()

    assert pipeline.rule_order == CANONICAL_RULE_ORDER
    assert CANONICAL_RULE_ORDER[0] == RuleId.START_DATE_RESOLUTION
    assert CANONICAL_RULE_ORDER[-2:] == (RuleId.SYSTEM_OUTAGE_EXTENSION, RuleId.COURT_SUSPENSION)
    assert len(set(CANONICAL_RULE_ORDER)) == len(RuleId)

    steps = build_default_steps()
    with pytest.raises(ValueError):
        RulePipeline(steps + steps[:1])


def test_ambiguous_exclusive_rules_earliest_wins_with_warning() -> None:
    result = make_calculator().compute(
        make_request(
            "TEST-AMB",
            party_roles={PartyRole.PUBLIC_PROSECUTOR, PartyRole.CO_LITIGANTS_DISTINCT_COUNSEL},
        )
    )

    assert WarningCode.AMBIGUOUS_SPECIAL_RULE in _codes(result)
    assert RuleId.PRIVILEGED_DOUBLING in result.rule_ids()
    assert RuleId.CO_LITIGANT_DOUBLING not in result.rule_ids()
    assert result.effective_duration == 20


def test_catalog_precedence_resolves_exclusive_rules() -> None:
    result = make_calculator().compute(
        make_request(
            "TEST-ORD",
            party_roles={PartyRole.PUBLIC_PROSECUTOR, PartyRole.CO_LITIGANTS_DISTINCT_COUNSEL},
        )
    )

    assert WarningCode.AMBIGUOUS_SPECIAL_RULE not in _codes(result)
    assert RuleId.PRIVILEGED_DOUBLING not in result.rule_ids()
    assert result.rule_ids().count(RuleId.CO_LITIGANT_DOUBLING) == 1
    assert result.effective_duration == 30


def test_compounding_only_when_catalog_allows_it() -> None:
    result = make_calculator().compute(
        make_request(
            "TEST-CMP",
            party_roles={PartyRole.PUBLIC_TREASURY, PartyRole.CO_LITIGANTS_DISTINCT_COUNSEL},
        )
    )

    assert result.effective_duration == 40
    assert WarningCode.DOUBLING_NOT_COMPOUNDED not in _codes(result)


def test_co_litigant_doubling_not_applied_to_electronic_records() -> None:
    result = make_calculator().compute(
        make_request(
            "CPC-001",
            party_roles={PartyRole.CO_LITIGANTS_DISTINCT_COUNSEL},
            electronic=True,
        )
    )

    assert result.effective_duration == 15
    assert WarningCode.CO_LITIGANT_ELECTRONIC_PROCESS in _codes(result)
    assert RuleId.CO_LITIGANT_DOUBLING not in result.rule_ids()


def test_privileged_party_on_non_doubling_type_warns() -> None:
    result = make_calculator().compute(
        make_request("CPC-027", party_roles={PartyRole.PUBLIC_TREASURY})
    )

    assert result.effective_duration == 30
    assert WarningCode.DOUBLING_NOT_ELIGIBLE in _codes(result)


def test_motion_restarts_full_count_after_resolution() -> None:
    motion = InterruptingMotion(filed_on=date(2026, 3, 10), resolved_on=date(2026, 3, 20))

    plain = make_calculator().compute(make_request("CPC-010"))
    result = make_calculator().compute(make_request("CPC-010", interrupting_motion=motion))

    assert plain.due_date == date(2026, 3, 23)
    assert result.due_date == date(2026, 4, 10)
    audit = [a for a in result.applied_rules if a.rule_id == RuleId.MOTION_INTERRUPTION]
    assert len(audit) == 1
    assert audit[0].date_before == date(2026, 3, 23)
    assert audit[0].date_after == date(2026, 4, 10)
    assert "6 day(s)" in audit[0].description


def test_motion_outside_window_or_type_is_ignored() -> None:
    late = InterruptingMotion(filed_on=date(2026, 4, 1), resolved_on=date(2026, 4, 8))
    result = make_calculator().compute(make_request("CPC-010", interrupting_motion=late))
    assert result.due_date == date(2026, 3, 23)
    assert WarningCode.MOTION_OUTSIDE_WINDOW in _codes(result)

    early = InterruptingMotion(filed_on=date(2026, 3, 10), resolved_on=date(2026, 3, 20))
    other = make_calculator().compute(make_request("CPC-001", interrupting_motion=early))
    assert other.due_date == date(2026, 3, 23)
    assert WarningCode.MOTION_NOT_APPLICABLE in _codes(other)


def test_outage_days_extend_electronic_processes_only() -> None:
    outage = SystemOutage(start=date(2026, 3, 4), end=date(2026, 3, 5), source="PJe")

    electronic = make_calculator().compute(
        make_request("CPC-001", electronic=True, outages=(outage,))
    )
    paper = make_calculator().compute(make_request("CPC-001", outages=(outage,)))

    assert electronic.due_date == date(2026, 3, 25)
    audit = [a for a in electronic.applied_rules if a.rule_id == RuleId.SYSTEM_OUTAGE_EXTENSION]
    assert len(audit) == 1
    assert (audit[0].date_before, audit[0].date_after) == (date(2026, 3, 23), date(2026, 3, 25))
    assert paper.due_date == date(2026, 3, 23)
    assert WarningCode.OUTAGE_IGNORED_NON_ELECTRONIC in _codes(paper)


def test_counting_mode_override_rules() -> None:
    calculator = make_calculator()

    with pytest.raises(InvalidRequest):
        calculator.compute(make_request("RJ-001", counting_mode=CountingMode.BUSINESS_DAYS))

    result = calculator.compute(make_request("CTN-001", counting_mode=CountingMode.BUSINESS_DAYS))
    assert result.counting_mode == CountingMode.BUSINESS_DAYS
    assert WarningCode.COUNTING_MODE_OVERRIDDEN in _codes(result)


def test_unresolvable_duration_needs_override() -> None:
    calculator = make_calculator()

    with pytest.raises(InvalidRequest):
        calculator.compute(make_request("ESP-006"))

    result = calculator.compute(make_request("ESP-006", duration_override=5))
    assert result.effective_duration == 5
    assert result.due_date == date(2026, 3, 9)
    assert WarningCode.DURATION_OVERRIDDEN in _codes(result)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"state_code": "XX"},
        {"duration_override": 0},
        {"interrupting_motion": InterruptingMotion(date(2026, 3, 10), date(2026, 3, 9))},
        {"outages": (SystemOutage(date(2026, 3, 5), date(2026, 3, 4)),)},
    ],
)
def test_invalid_requests_are_rejected(kwargs) -> None:
    with pytest.raises(InvalidRequest):
        make_calculator().compute(make_request("CPC-001", **kwargs))


def test_unknown_type_and_catalog_failure() -> None:
    with pytest.raises(UnknownDeadlineType):
        make_calculator().compute(make_request("NOPE-1"))

    calculator = DeadlineCalculator(CalendarOracle(EmptyHolidayStore()), FailingCatalog())
    with pytest.raises(DataUnavailable):
        calculator.compute(make_request("CPC-001"))


def test_fatal_deadline_warning_and_remaining_days() -> None:
    result = make_calculator().compute(make_request("CPC-001", today=date(2026, 3, 16)))

    assert WarningCode.FATAL_DEADLINE in _codes(result)
    assert result.due_date == date(2026, 3, 23)
    assert result.business_days_remaining == 5
    assert result.internal_due_date == date(2026, 3, 19)


def test_batch_shares_holiday_cache_and_isolates_errors() -> None:
    store = EmptyHolidayStore()
    calculator = make_calculator(store)

    outcomes = calculator.compute_batch(
        [
            make_request("CPC-001"),
            make_request("NOPE-1"),
            make_request("CPC-002", occurred_on=date(2026, 5, 4)),
            make_request("ESP-006"),
        ]
    )

    assert [o.ok for o in outcomes] == [True, False, True, False]
    assert isinstance(outcomes[1].error, UnknownDeadlineType)
    assert isinstance(outcomes[3].error, InvalidRequest)
    assert isinstance(outcomes[3].error, ComputationError)
    assert store.calls == 1
    assert calculator.oracle.cache.hits > 0


def test_verify_detects_tampered_results() -> None:
    calculator = make_calculator()
    request = make_request("CPC-001")
    result = calculator.compute(request)
    entry = calculator.resolve_entry("CPC-001")

    assert check_result(result, request, entry, calculator) == []
    assert verify_computation(calculator, request, result) == []

    tampered = dataclasses.replace(result, due_date=date(2026, 3, 22), internal_due_date=date(2026, 3, 24))
    issues = verify_computation(calculator, request, tampered)
    assert any("not a business day" in i for i in issues)
    assert any("internal due date" in i for i in issues)
    assert any("recomputed due date" in i for i in issues)
