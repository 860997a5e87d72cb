from __future__ import annotations

from datetime import date

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import CountingMode, RuleId, SpecialRule, WarningCode
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry
from .counting import closed_periods, first_filing_day, walk_context
from .types import RuleStep


def interruption_applies(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> bool:
    return request.interrupting_motion is not None and entry.has_rule(SpecialRule.INTERRUPTIBLE)


def interruption_skipped(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> None:
    if request.interrupting_motion is not None:
        ctx.warn(
            WarningCode.MOTION_NOT_APPLICABLE,
            f"{entry.deadline_type} is not interrupted by motions; motion filed "
            f"{request.interrupting_motion.filed_on} ignored",
        )


def prepare_interruption(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    ctx.interruption = request.interrupting_motion
    return ctx


def _days_consumed(ctx: ComputationContext, oracle: CalendarOracle, until: date) -> int:
    if ctx.counting_mode == CountingMode.BUSINESS_DAYS:
        return oracle.count_business_days_between(
            ctx.start_date,
            until,
            ctx.state_code,
            ctx.recess_jurisdiction if ctx.skip_recess else None,
        )
    return (until - ctx.start_date).days


def restart_count(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    motion = ctx.interruption
    if motion is None or ctx.start_date is None or ctx.working_date is None:
        return ctx
    window_end = first_filing_day(
        ctx.working_date,
        oracle,
        state_code=ctx.state_code,
        recess_jurisdiction=ctx.recess_jurisdiction,
        outages=closed_periods(ctx),
    )
    if not (ctx.start_date < motion.filed_on <= window_end):
        ctx.warn(
            WarningCode.MOTION_OUTSIDE_WINDOW,
            f"Motion filed {motion.filed_on} outside running window "
            f"{ctx.first_countable_day}..{window_end}; count not restarted",
        )
        return ctx

    discarded = _days_consumed(ctx, oracle, motion.filed_on)
    previous_start = ctx.start_date
    previous_end = ctx.working_date
    ctx.start_date = motion.resolved_on
    outcome = walk_context(ctx, oracle)
    ctx.working_date = outcome.end_date
    ctx.business_days_counted = outcome.counted_business_days
    ctx.calendar_days_counted = (outcome.end_date - ctx.start_date).days
    label = f" ({motion.description})" if motion.description else ""
    ctx.record(
        RuleId.MOTION_INTERRUPTION,
        f"Motion{label} filed {motion.filed_on}, resolved {motion.resolved_on}: "
        f"{discarded} day(s) counted since {previous_start} discarded; "
        f"full count restarted after {motion.resolved_on}, last counted day {outcome.end_date}",
        date_before=previous_end,
        date_after=outcome.end_date,
        days_added=(outcome.end_date - previous_end).days,
    )
    return ctx


MOTION_INTERRUPTION = RuleStep(
    rule_id=RuleId.MOTION_INTERRUPTION,
    applies=interruption_applies,
    prepare=prepare_interruption,
    count=restart_count,
    on_skip=interruption_skipped,
)
