from __future__ import annotations

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import CountingMode, RuleId, WarningCode
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry
from .counting import closed_periods, first_filing_day, walk_context
from .types import RuleStep

_UNIT_LABELS = {
    CountingMode.BUSINESS_DAYS: "business days",
    CountingMode.CALENDAR_DAYS: "calendar days",
}


def prepare_counting_unit(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    notes = []
    if ctx.counting_mode != entry.counting_mode:
        ctx.warn(
            WarningCode.COUNTING_MODE_OVERRIDDEN,
            f"Counting in {ctx.counting_mode.value} instead of catalog {entry.counting_mode.value}",
        )
        notes.append(f"mode overridden from {entry.counting_mode.value}")
    if ctx.base_duration != entry.base_duration:
        ctx.warn(
            WarningCode.DURATION_OVERRIDDEN,
            f"Duration {ctx.base_duration} instead of catalog {entry.base_duration}",
        )
        notes.append(f"duration overridden from {entry.base_duration}")
    suffix = f" ({'; '.join(notes)})" if notes else ""
    ctx.record(
        RuleId.COUNTING_UNIT,
        f"Counting in {_UNIT_LABELS[ctx.counting_mode]}{suffix}",
    )
    return ctx


def count_days(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    outcome = walk_context(ctx, oracle)
    ctx.working_date = outcome.end_date
    ctx.business_days_counted = outcome.counted_business_days
    ctx.calendar_days_counted = (outcome.end_date - ctx.start_date).days
    ctx.record(
        RuleId.COUNTING_UNIT,
        f"Counted {outcome.counted_units} {_UNIT_LABELS[ctx.counting_mode]} "
        f"after {ctx.start_date}; last counted day {outcome.end_date}",
        date_before=ctx.start_date,
        date_after=outcome.end_date,
        days_added=ctx.calendar_days_counted,
    )
    return ctx


def settle_extension(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    if ctx.working_date is None:
        return ctx
    before = ctx.working_date
    after = first_filing_day(
        before,
        oracle,
        state_code=ctx.state_code,
        recess_jurisdiction=ctx.recess_jurisdiction,
        outages=closed_periods(ctx),
    )
    if after != before:
        reason = "falls in recess" if oracle.in_recess(before, ctx.recess_jurisdiction) else "is not a business day"
        ctx.working_date = after
        ctx.record(
            RuleId.NON_BUSINESS_DAY_EXTENSION,
            f"{before} {reason}; due date moved to {after}",
            date_before=before,
            date_after=after,
            days_added=(after - before).days,
        )
    return ctx


COUNTING_UNIT = RuleStep(
    rule_id=RuleId.COUNTING_UNIT,
    prepare=prepare_counting_unit,
    count=count_days,
)

NON_BUSINESS_DAY_EXTENSION = RuleStep(
    rule_id=RuleId.NON_BUSINESS_DAY_EXTENSION,
    settle=settle_extension,
)
