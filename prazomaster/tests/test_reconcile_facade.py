"""Tests for app wiring and batch reconciliation."""

from __future__ import annotations

from datetime import date

import pytest

from prazomaster.app_api.dto import ReconciliationItem
from prazomaster.app_api.facade import INVALID_ITEM, classify_due
from prazomaster.app_api.factories import build_prazo_app
from prazomaster.core.domain.enums import Jurisdiction, TriggerEventType
from prazomaster.core.domain.models import ComputationRequest, TriggerEvent


class EmptyHolidayStore:
    def __init__(self) -> None:
        self.calls = 0

    def fetch_holidays(self, start, end, state_code, holiday_types):
        self.calls += 1
        return set()


def _item(item_id: str, deadline_type: str, occurred_on: date) -> ReconciliationItem:
    return ReconciliationItem(
        item_id=item_id,
        request=ComputationRequest(
            trigger=TriggerEvent(TriggerEventType.OTHER, occurred_on),
            deadline_type=deadline_type,
            jurisdiction=Jurisdiction.STATE,
        ),
    )


def test_classify_due() -> None:
    today = date(2026, 3, 23)
    assert classify_due(date(2026, 3, 20), today) == "OVERDUE"
    assert classify_due(today, today) == "DUE_TODAY"
    assert classify_due(date(2026, 3, 24), today) == "PENDING"


def test_reconcile_statuses_and_errors() -> None:
    store = EmptyHolidayStore()
    app = build_prazo_app(holiday_store=store)

    rows = app.reconcile(
        [
            _item(" due-today ", "CPC-001", date(2026, 3, 2)),
            _item("overdue", "CPC-001", date(2026, 2, 2)),
            _item("pending", "CPC-001", date(2026, 3, 16)),
            _item("broken", "NOPE-1", date(2026, 3, 2)),
        ],
        today=date(2026, 3, 23),
    )

    assert [(r.item_id, r.status) for r in rows] == [
        ("due-today", "DUE_TODAY"),
        ("overdue", "OVERDUE"),
        ("pending", "PENDING"),
        ("broken", "ERROR"),
    ]
    assert rows[0].business_days_remaining == 0
    assert rows[1].due_date == date(2026, 2, 23)
    assert rows[2].due_date == date(2026, 4, 6)
    assert rows[2].business_days_remaining == 10
    assert rows[3].error_kind == "UNKNOWN_DEADLINE_TYPE"
    assert rows[3].result is None
    assert store.calls == 1


def test_reconcile_reports_blank_item_id_and_keeps_going() -> None:
    app = build_prazo_app(holiday_store=EmptyHolidayStore())

    rows = app.reconcile(
        [
            _item("  ", "CPC-001", date(2026, 3, 2)),
            _item("next", "CPC-001", date(2026, 3, 2)),
        ],
        today=date(2026, 3, 2),
    )

    assert [r.status for r in rows] == ["ERROR", "PENDING"]
    assert rows[0].error_kind == INVALID_ITEM
    assert "item_id" in rows[0].error_message
    assert rows[1].item_id == "next"
    assert rows[1].due_date == date(2026, 3, 23)


def test_build_app_configuration_errors() -> None:
    with pytest.raises(ValueError):
        build_prazo_app()
    with pytest.raises(ValueError):
        build_prazo_app(holiday_store=EmptyHolidayStore(), catalog_from_db=True)
    with pytest.raises(ValueError):
        build_prazo_app(holiday_store=EmptyHolidayStore(), cache_size=10)

    app = build_prazo_app(holiday_store=EmptyHolidayStore(), ttl_seconds=60, max_entries=4)
    assert len(app.list_entries("APPEAL")) > 0
