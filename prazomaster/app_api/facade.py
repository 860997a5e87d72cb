from __future__ import annotations

import dataclasses
from datetime import date
from typing import Iterable

from prazomaster.core.domain.models import ComputationRequest, ComputationResult, RuleCatalogEntry
from prazomaster.core.engine.calculator import DeadlineCalculator
from prazomaster.core.ports.catalog_store_port import CatalogStore
from .dto import ReconciliationItem, ReconciliationRow, ReconciliationStatus

# error_kind for items rejected before computation.
INVALID_ITEM = "INVALID_ITEM"


def classify_due(due_date: date, today: date) -> ReconciliationStatus:
    if due_date < today:
        return "OVERDUE"
    if due_date == today:
        return "DUE_TODAY"
    return "PENDING"


class PrazoApplication:
    def __init__(self, calculator: DeadlineCalculator, catalog: CatalogStore | None = None) -> None:
        self._calculator = calculator
        self._catalog = catalog

    @property
    def calculator(self) -> DeadlineCalculator:
        return self._calculator

    def compute(self, request: ComputationRequest) -> ComputationResult:
        return self._calculator.compute(request)

    def list_entries(self, category: str | None = None) -> list[RuleCatalogEntry]:
        if self._catalog is None:
            return []
        return self._catalog.list_entries(category)

    def reconcile(self, items: Iterable[ReconciliationItem], today: date) -> list[ReconciliationRow]:
        """Compute every item as of `today`; failures become ERROR rows, in input order."""
        rows: list[ReconciliationRow | None] = []
        pending: list[tuple[int, ReconciliationItem]] = []
        for item in items:
            try:
                item.validate()
            except ValueError as exc:
                rows.append(
                    ReconciliationRow(
                        item_id=item.item_id or "",
                        status="ERROR",
                        error_kind=INVALID_ITEM,
                        error_message=str(exc),
                    )
                )
                continue
            pending.append((len(rows), item))
            rows.append(None)

        requests = [dataclasses.replace(item.request, today=today) for _, item in pending]
        outcomes = self._calculator.compute_batch(requests)

        for (index, item), outcome in zip(pending, outcomes):
            if outcome.error is not None:
                rows[index] = ReconciliationRow(
                    item_id=item.item_id,
                    status="ERROR",
                    error_kind=outcome.error.kind,
                    error_message=str(outcome.error),
                )
                continue
            result = outcome.result
            rows[index] = ReconciliationRow(
                item_id=item.item_id,
                status=classify_due(result.due_date, today),
                due_date=result.due_date,
                internal_due_date=result.internal_due_date,
                business_days_remaining=result.business_days_remaining,
                warnings=result.warnings,
                result=result,
            )
        return [row for row in rows if row is not None]
