"""Consistency checks for computed deadlines.

Responsibilities:
  - Re-check a ComputationResult against the engine's invariants.
  - Recompute the request and compare, for audits of stored results.
Must not:
  - Modify results; issues are reported, never fixed.
"""

from __future__ import annotations

from collections import Counter

from prazomaster.core.domain.enums import RuleId, StartMethod
from prazomaster.core.domain.models import ComputationRequest, ComputationResult, RuleCatalogEntry
from prazomaster.core.pipeline.rules_start import effective_start_method
from .calculator import DeadlineCalculator

_ONCE_ONLY = (RuleId.START_DATE_RESOLUTION, RuleId.PRIVILEGED_DOUBLING, RuleId.CO_LITIGANT_DOUBLING)


def check_result(
    result: ComputationResult,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    calculator: DeadlineCalculator,
) -> list[str]:
    issues: list[str] = []
    oracle = calculator.oracle

    if result.due_date < result.start_date:
        issues.append(f"due date {result.due_date} precedes start date {result.start_date}")

    trigger_date = request.trigger.occurred_on
    if effective_start_method(request, entry) != StartMethod.TRIGGER_DAY:
        if result.start_date <= trigger_date:
            issues.append(f"start date {result.start_date} not after trigger {trigger_date}")
    elif result.start_date < trigger_date:
        issues.append(f"start date {result.start_date} precedes trigger {trigger_date}")

    if not oracle.is_business_day(result.due_date, request.state_code, request.jurisdiction):
        issues.append(f"due date {result.due_date} is not a business day")
    closed = oracle.suspensions_between(result.due_date, result.due_date, request.court_code)
    if closed:
        issues.append(f"due date {result.due_date} falls in court suspension {closed[0].label}")

    counts = Counter(entry_.rule_id for entry_ in result.applied_rules)
    for rule_id in _ONCE_ONLY:
        if counts[rule_id] > 1:
            issues.append(f"{rule_id.value} recorded {counts[rule_id]} times")

    base = request.duration_override if request.duration_override is not None else entry.base_duration
    ceiling = base * max(entry.privileged_multiplier, entry.co_litigant_multiplier)
    if entry.allow_compounding:
        ceiling = base * entry.privileged_multiplier * entry.co_litigant_multiplier
    if result.effective_duration > ceiling:
        issues.append(f"effective duration {result.effective_duration} exceeds ceiling {ceiling}")

    if result.internal_due_date > result.due_date:
        issues.append(f"internal due date {result.internal_due_date} after due date {result.due_date}")
    return issues


def verify_computation(
    calculator: DeadlineCalculator,
    request: ComputationRequest,
    result: ComputationResult,
) -> list[str]:
    """Recompute `request` and compare; returns a list of human-readable issues."""
    entry = calculator.resolve_entry(request.deadline_type)
    issues = check_result(result, request, entry, calculator)
    fresh = calculator.compute(request)
    if fresh.due_date != result.due_date:
        issues.append(f"recomputed due date {fresh.due_date} differs from {result.due_date}")
    if fresh.start_date != result.start_date:
        issues.append(f"recomputed start date {fresh.start_date} differs from {result.start_date}")
    if fresh.rule_ids() != result.rule_ids():
        issues.append("recomputed audit trail differs")
    return issues
