from __future__ import annotations

from datetime import timedelta

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import CountingMode, RuleId, SpecialRule
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry
from .counting import projected_due
from .types import RuleStep


def recess_applies(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> bool:
    return (
        entry.has_rule(SpecialRule.RECESS_SENSITIVE)
        and ctx.counting_mode == CountingMode.BUSINESS_DAYS
        and ctx.recess_jurisdiction is not None
    )


def prepare_recess(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    ctx.skip_recess = True
    return ctx


def crossed_windows(ctx: ComputationContext, oracle: CalendarOracle) -> list[str]:
    if ctx.start_date is None or ctx.working_date is None:
        return []
    labels: list[str] = []
    span = (ctx.working_date - ctx.start_date).days
    for window in oracle.recess_config.windows_for(ctx.recess_jurisdiction):
        if any(window.contains(ctx.start_date + timedelta(days=i)) for i in range(1, span + 1)):
            labels.append(window.label)
    return labels


def settle_recess(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    if ctx.working_date is None:
        return ctx
    naive = projected_due(ctx, oracle, honor_recess=False)
    if naive == ctx.working_date:
        return ctx

    labels = crossed_windows(ctx, oracle)
    label = ", ".join(labels) if labels else "recess"
    ctx.record(
        RuleId.RECESS_SUSPENSION,
        f"Count suspended during {label}; due date {naive} without recess moved to {ctx.working_date}",
        date_before=naive,
        date_after=ctx.working_date,
        days_added=(ctx.working_date - naive).days,
    )
    return ctx


RECESS_SUSPENSION = RuleStep(
    rule_id=RuleId.RECESS_SUSPENSION,
    applies=recess_applies,
    prepare=prepare_recess,
    settle=settle_recess,
)
