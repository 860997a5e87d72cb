"""Day-walking helpers shared by the counting rules.

Responsibilities:
  - Walk forward from an excluded start day, counting units until the duration is met.
  - Roll a date forward to the next day on which a filing can be made.
Must not:
  - Record audit entries; rules own their audit trail.

Invariants:
  - The start day is never counted; the last counted day is the end date.
  - Walks are bounded; exceeding the bound raises ComputationError.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence, Union

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import CountingMode, Jurisdiction
from prazomaster.core.domain.errors import ComputationError
from prazomaster.core.domain.models import ComputationContext, CourtSuspension, SystemOutage

ClosedPeriod = Union[SystemOutage, CourtSuspension]

# Slack on top of 7 calendar days per unit: room for a recess window plus holidays.
WALK_SLACK_DAYS = 400


@dataclass(frozen=True)
class WalkOutcome:
    end_date: date
    counted_units: int
    counted_business_days: int
    skipped_recess_days: int
    skipped_outage_days: int


def _in_outage(day: date, outages: Sequence[ClosedPeriod]) -> bool:
    return any(outage.covers(day) for outage in outages)


def walk(
    start: date,
    units: int,
    mode: CountingMode,
    oracle: CalendarOracle,
    state_code: Optional[str] = None,
    recess_jurisdiction: Optional[Jurisdiction] = None,
    outages: Sequence[ClosedPeriod] = (),
) -> WalkOutcome:
    """Count `units` days after `start`.

    Days inside a recess window of `recess_jurisdiction`, an outage or a court
    suspension are skipped without counting. BUSINESS_DAYS counts only working days.
    """
    if units < 1:
        raise ComputationError(f"Cannot count {units} units")
    max_steps = units * 7 + WALK_SLACK_DAYS
    cursor = start
    counted = 0
    business = 0
    skipped_recess = 0
    skipped_outage = 0
    steps = 0
    while counted < units:
        steps += 1
        if steps > max_steps:
            raise ComputationError(
                f"Counting from {start} did not finish within {max_steps} days ({counted}/{units} counted)"
            )
        cursor += timedelta(days=1)
        if outages and _in_outage(cursor, outages):
            skipped_outage += 1
            continue
        if recess_jurisdiction is not None and oracle.in_recess(cursor, recess_jurisdiction):
            skipped_recess += 1
            continue
        working = oracle.is_working_day(cursor, state_code)
        if mode == CountingMode.BUSINESS_DAYS and not working:
            continue
        counted += 1
        if working:
            business += 1
    return WalkOutcome(
        end_date=cursor,
        counted_units=counted,
        counted_business_days=business,
        skipped_recess_days=skipped_recess,
        skipped_outage_days=skipped_outage,
    )


def first_filing_day(
    day: date,
    oracle: CalendarOracle,
    state_code: Optional[str] = None,
    recess_jurisdiction: Optional[Jurisdiction] = None,
    outages: Sequence[ClosedPeriod] = (),
) -> date:
    """`day` itself when filing is possible on it, else the next such day."""
    cursor = day
    for _ in range(WALK_SLACK_DAYS):
        if oracle.is_business_day(cursor, state_code, recess_jurisdiction) and not _in_outage(
            cursor, outages
        ):
            return cursor
        cursor += timedelta(days=1)
    raise ComputationError(f"No filing day found within {WALK_SLACK_DAYS} days of {day}")


def closed_periods(
    ctx: ComputationContext, honor_outages: bool = True, honor_suspensions: bool = True
) -> tuple[ClosedPeriod, ...]:
    periods: tuple[ClosedPeriod, ...] = ()
    if honor_outages:
        periods += ctx.outages
    if honor_suspensions:
        periods += ctx.suspensions
    return periods


def walk_context(
    ctx: ComputationContext,
    oracle: CalendarOracle,
    start: Optional[date] = None,
    honor_recess: bool = True,
    honor_outages: bool = True,
    honor_suspensions: bool = True,
) -> WalkOutcome:
    """Walk using the context's unit, duration and skip configuration."""
    anchor = start if start is not None else ctx.start_date
    if anchor is None:
        raise ComputationError("Start date must be resolved before counting")
    return walk(
        anchor,
        ctx.duration,
        ctx.counting_mode,
        oracle,
        state_code=ctx.state_code,
        recess_jurisdiction=ctx.recess_jurisdiction if (honor_recess and ctx.skip_recess) else None,
        outages=closed_periods(ctx, honor_outages, honor_suspensions),
    )


def projected_due(
    ctx: ComputationContext,
    oracle: CalendarOracle,
    start: Optional[date] = None,
    honor_recess: bool = True,
    honor_outages: bool = True,
    honor_suspensions: bool = True,
) -> date:
    """Due date the context would produce, extension included."""
    outcome = walk_context(ctx, oracle, start, honor_recess, honor_outages, honor_suspensions)
    return first_filing_day(
        outcome.end_date,
        oracle,
        state_code=ctx.state_code,
        recess_jurisdiction=ctx.recess_jurisdiction if honor_recess else None,
        outages=closed_periods(ctx, honor_outages, honor_suspensions),
    )
