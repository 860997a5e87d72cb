from __future__ import annotations

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import RuleId, WarningCode
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry
from .counting import projected_due
from .types import RuleStep


def outage_applies(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> bool:
    return request.electronic and bool(request.outages)


def outage_skipped(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> None:
    if request.outages and not request.electronic:
        ctx.warn(
            WarningCode.OUTAGE_IGNORED_NON_ELECTRONIC,
            f"{len(request.outages)} outage period(s) ignored: process is not electronic",
        )


def prepare_outages(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    ctx.outages = tuple(sorted(request.outages, key=lambda o: (o.start, o.end)))
    return ctx


def settle_outages(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    if ctx.working_date is None or ctx.start_date is None:
        return ctx
    baseline = projected_due(ctx, oracle, honor_outages=False)
    if baseline == ctx.working_date:
        return ctx
    hit = [
        o
        for o in ctx.outages
        if o.end > ctx.start_date and o.start <= ctx.working_date
    ]
    periods = ", ".join(
        f"{o.start}..{o.end}" + (f" ({o.source})" if o.source else "") for o in hit
    )
    ctx.record(
        RuleId.SYSTEM_OUTAGE_EXTENSION,
        f"System outage {periods} excluded from the count; due date {baseline} pushed to {ctx.working_date}",
        date_before=baseline,
        date_after=ctx.working_date,
        days_added=(ctx.working_date - baseline).days,
    )
    return ctx


SYSTEM_OUTAGE_EXTENSION = RuleStep(
    rule_id=RuleId.SYSTEM_OUTAGE_EXTENSION,
    applies=outage_applies,
    prepare=prepare_outages,
    settle=settle_outages,
    on_skip=outage_skipped,
)
