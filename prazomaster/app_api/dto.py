"""DTO definitions for app-level data exchange.

Responsibilities:
  - Define stable, typed structures for reconciliation inputs/outputs.
Must not:
  - Implement deadline logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Optional

from prazomaster.core.domain.models import ComputationRequest, ComputationResult

ReconciliationStatus = Literal["PENDING", "DUE_TODAY", "OVERDUE", "ERROR"]


@dataclass(frozen=True)
class ReconciliationItem:
    item_id: str
    request: ComputationRequest

    def validate(self) -> None:
        if not self.item_id or not self.item_id.strip():
            raise ValueError("item_id must be non-empty")
        object.__setattr__(self, "item_id", self.item_id.strip())
        if not isinstance(self.request, ComputationRequest):
            raise ValueError("request must be a ComputationRequest")


@dataclass(frozen=True)
class ReconciliationRow:
    item_id: str
    status: ReconciliationStatus
    due_date: Optional[date] = None
    internal_due_date: Optional[date] = None
    business_days_remaining: Optional[int] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None
    warnings: tuple[str, ...] = field(default_factory=tuple)
    result: Optional[ComputationResult] = None
