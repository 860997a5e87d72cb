"""Court suspension periods (ordinances, tribunal closures) excluded from the count.

Invariants:
  - Overlapping or adjacent periods are merged before counting.
  - Suspended days are neither counted nor accepted as the due date.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Iterable

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import RuleId
from prazomaster.core.domain.models import (
    ComputationContext,
    ComputationRequest,
    CourtSuspension,
    RuleCatalogEntry,
)
from .counting import projected_due
from .types import RuleStep


def merge_suspensions(periods: Iterable[CourtSuspension]) -> tuple[CourtSuspension, ...]:
    merged: list[CourtSuspension] = []
    for period in sorted(periods, key=lambda p: (p.start, p.end)):
        if merged and period.start <= merged[-1].end + timedelta(days=1):
            last = merged[-1]
            names = last.label if period.label in last.label else f"{last.label}; {period.label}"
            merged[-1] = CourtSuspension(
                start=last.start,
                end=max(last.end, period.end),
                name=names,
                court_code=last.court_code if last.court_code == period.court_code else None,
            )
            continue
        merged.append(period)
    return tuple(merged)


def suspension_applies(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> bool:
    return bool(ctx.suspensions)


def prepare_suspensions(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    ctx.suspensions = merge_suspensions(ctx.suspensions)
    return ctx


def settle_suspensions(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    if ctx.working_date is None or ctx.start_date is None:
        return ctx
    baseline = projected_due(ctx, oracle, honor_suspensions=False)
    if baseline == ctx.working_date:
        return ctx
    hit = [s for s in ctx.suspensions if s.end > ctx.start_date and s.start <= ctx.working_date]
    periods = ", ".join(f"{s.start}..{s.end} {s.label}" for s in hit)
    ctx.record(
        RuleId.COURT_SUSPENSION,
        f"Court suspension {periods} excluded from the count; due date {baseline} pushed to {ctx.working_date}",
        date_before=baseline,
        date_after=ctx.working_date,
        days_added=(ctx.working_date - baseline).days,
    )
    return ctx


COURT_SUSPENSION = RuleStep(
    rule_id=RuleId.COURT_SUSPENSION,
    applies=suspension_applies,
    prepare=prepare_suspensions,
    settle=settle_suspensions,
)
