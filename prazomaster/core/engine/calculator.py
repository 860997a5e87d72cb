"""Deadline calculator: orchestrates catalog, pipeline and oracle for one request.

Responsibilities:
  - Validate the request and resolve its catalog entry.
  - Build a fresh ComputationContext, load court suspensions and run the rule pipeline.
  - Assemble the immutable ComputationResult with its audit trail.

Inputs/Outputs:
  - Inputs: ComputationRequest.
  - Outputs: ComputationResult, or a typed ComputationError raised to the caller.

Invariants:
  - No writes; the only side effects are calendar/catalog reads.
  - Contexts are never shared between computations.
  - Past due dates are returned unchanged; flagging overdue items is the caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Iterable, Optional

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import WarningCode
from prazomaster.core.domain.errors import (
    ComputationError,
    DataUnavailable,
    InvalidRequest,
    UnknownDeadlineType,
)
from prazomaster.core.domain.models import (
    ComputationContext,
    ComputationRequest,
    ComputationResult,
    RuleCatalogEntry,
)
from prazomaster.core.pipeline.counting import WALK_SLACK_DAYS
from prazomaster.core.pipeline.pipeline import RulePipeline
from prazomaster.core.ports.catalog_store_port import CatalogStore

# Business days between the internal safety date and the due date.
INTERNAL_MARGIN_BUSINESS_DAYS = 2

_DEBUG_FN: Callable[[str], None] | None = None


def set_calculator_debug(fn: Callable[[str], None] | None) -> None:
    global _DEBUG_FN
    _DEBUG_FN = fn


@dataclass(frozen=True)
class BatchOutcome:
    request: ComputationRequest
    result: Optional[ComputationResult] = None
    error: Optional[ComputationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DeadlineCalculator:
    def __init__(
        self,
        oracle: CalendarOracle,
        catalog: CatalogStore,
        pipeline: RulePipeline | None = None,
        internal_margin: int = INTERNAL_MARGIN_BUSINESS_DAYS,
    ) -> None:
        self._oracle = oracle
        self._catalog = catalog
        self._pipeline = pipeline if pipeline is not None else RulePipeline()
        self._internal_margin = internal_margin

    @property
    def oracle(self) -> CalendarOracle:
        return self._oracle

    @property
    def pipeline(self) -> RulePipeline:
        return self._pipeline

    def resolve_entry(self, deadline_type: str) -> RuleCatalogEntry:
        try:
            entry = self._catalog.get_entry(deadline_type)
        except ComputationError:
            raise
        except Exception as exc:
            raise DataUnavailable(f"Catalog store unavailable: {exc}") from exc
        if entry is None:
            raise UnknownDeadlineType(deadline_type)
        return entry

    def build_context(self, request: ComputationRequest, entry: RuleCatalogEntry) -> ComputationContext:
        mode = request.counting_mode if request.counting_mode is not None else entry.counting_mode
        if mode != entry.counting_mode and entry.counting_mode_locked:
            raise InvalidRequest(
                f"Counting mode {mode.value} is incompatible with {entry.deadline_type} "
                f"({entry.counting_mode.value} only)"
            )
        duration = (
            request.duration_override
            if request.duration_override is not None
            else entry.base_duration
        )
        if duration < 1:
            raise InvalidRequest(
                f"Duration for {entry.deadline_type} is not resolvable; provide duration_override"
            )
        ctx = ComputationContext(
            trigger_date=request.trigger.occurred_on,
            duration=duration,
            base_duration=duration,
            counting_mode=mode,
            state_code=request.state_code,
            recess_jurisdiction=request.jurisdiction,
        )
        if entry.is_fatal:
            ctx.warn(
                WarningCode.FATAL_DEADLINE,
                f"{entry.deadline_type} ({entry.legal_basis or entry.name}) is peremptory",
            )
        return ctx

    def load_suspensions(
        self, ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
    ) -> None:
        # Widest span any walk for this request could cover.
        anchor = ctx.trigger_date
        if request.interrupting_motion is not None:
            anchor = max(anchor, request.interrupting_motion.resolved_on)
        multiplier = entry.privileged_multiplier * entry.co_litigant_multiplier
        horizon = ctx.duration * multiplier * 7 + WALK_SLACK_DAYS
        ctx.suspensions = self._oracle.suspensions_between(
            ctx.trigger_date, anchor + timedelta(days=horizon), request.court_code
        )

    def compute(self, request: ComputationRequest) -> ComputationResult:
        request.validate()
        entry = self.resolve_entry(request.deadline_type)
        ctx = self.build_context(request, entry)
        self.load_suspensions(ctx, request, entry)
        ctx = self._pipeline.run(ctx, request, entry, self._oracle)
        result = self._assemble(ctx, request, entry)
        if _DEBUG_FN is not None:
            _DEBUG_FN(
                f"computed deadline_type={entry.deadline_type} start={result.start_date} "
                f"due={result.due_date} rules={len(result.applied_rules)} warnings={len(result.warnings)}"
            )
        return result

    def compute_batch(self, requests: Iterable[ComputationRequest]) -> list[BatchOutcome]:
        outcomes: list[BatchOutcome] = []
        for request in requests:
            try:
                outcomes.append(BatchOutcome(request=request, result=self.compute(request)))
            except ComputationError as exc:
                outcomes.append(BatchOutcome(request=request, error=exc))
        return outcomes

    def _assemble(
        self,
        ctx: ComputationContext,
        request: ComputationRequest,
        entry: RuleCatalogEntry,
    ) -> ComputationResult:
        if ctx.start_date is None or ctx.working_date is None:
            raise ComputationError(f"Pipeline did not produce a due date for {entry.deadline_type}")
        start, due = ctx.start_date, ctx.working_date

        internal = due
        for _ in range(self._internal_margin):
            internal = self._oracle.previous_business_day(
                internal, ctx.state_code, ctx.recess_jurisdiction
            )
        internal = max(internal, start)

        remaining = None
        if request.today is not None:
            remaining = self._oracle.count_business_days_between(
                request.today, due, ctx.state_code, ctx.recess_jurisdiction
            )

        return ComputationResult(
            deadline_type=entry.deadline_type,
            start_date=start,
            due_date=due,
            business_days_counted=ctx.business_days_counted,
            calendar_days_counted=(due - start).days,
            applied_rules=tuple(ctx.applied),
            warnings=tuple(ctx.warnings),
            effective_duration=ctx.duration,
            counting_mode=ctx.counting_mode,
            internal_due_date=internal,
            business_days_remaining=remaining,
        )
