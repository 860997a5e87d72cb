from __future__ import annotations

from datetime import date, timedelta

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import TRIGGER_START_METHODS, RuleId, StartMethod
from prazomaster.core.domain.errors import ComputationError
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry
from .types import RuleStep

# Business days after sending until an electronic service counts as read.
ELECTRONIC_READING_BUSINESS_DAYS = 3


def effective_start_method(request: ComputationRequest, entry: RuleCatalogEntry) -> StartMethod:
    if entry.start_method == StartMethod.BY_TRIGGER_EVENT:
        return TRIGGER_START_METHODS[request.trigger.event_type]
    return entry.start_method


def resolve_start_date(
    method: StartMethod,
    trigger_date: date,
    ctx: ComputationContext,
    oracle: CalendarOracle,
) -> date:
    if method == StartMethod.NEXT_BUSINESS_DAY:
        return oracle.next_business_day(trigger_date, ctx.state_code, ctx.recess_jurisdiction)
    if method == StartMethod.ELECTRONIC_READING:
        cursor = trigger_date
        for _ in range(ELECTRONIC_READING_BUSINESS_DAYS):
            cursor = oracle.next_business_day(cursor, ctx.state_code, ctx.recess_jurisdiction)
        return cursor
    return trigger_date


def prepare_start_date(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    method = effective_start_method(request, entry)
    start = resolve_start_date(method, ctx.trigger_date, ctx, oracle)
    ctx.start_date = start
    ctx.working_date = start
    ctx.record(
        RuleId.START_DATE_RESOLUTION,
        f"{request.trigger.event_type.value} on {ctx.trigger_date} resolved by {method.value} "
        f"to start date {start}",
        date_before=ctx.trigger_date,
        date_after=start,
        days_added=(start - ctx.trigger_date).days,
    )
    return ctx


def prepare_day_exclusion(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    if ctx.start_date is None:
        raise ComputationError("Start date must be resolved before day exclusion")
    first = ctx.start_date + timedelta(days=1)
    ctx.record(
        RuleId.DAY_EXCLUSION,
        f"Start day {ctx.start_date} excluded; counting begins {first}; final day included",
        date_before=ctx.start_date,
        date_after=first,
    )
    return ctx


START_DATE_RESOLUTION = RuleStep(
    rule_id=RuleId.START_DATE_RESOLUTION,
    prepare=prepare_start_date,
)

DAY_EXCLUSION = RuleStep(
    rule_id=RuleId.DAY_EXCLUSION,
    prepare=prepare_day_exclusion,
)
