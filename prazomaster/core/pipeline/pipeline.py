"""Ordered rule pipeline turning a resolved context into a due date.

Responsibilities:
  - Hold the canonical legal-precedence order as explicit data.
  - Select rules whose preconditions match and resolve exclusive-precedence conflicts.
  - Run the prepare, count and settle passes in canonical order.
Must not:
  - Reorder rules at runtime; order changes are edits to CANONICAL_RULE_ORDER.

Invariants:
  - Each pass visits rules in canonical order.
  - Duration changes (doubling) happen in the prepare pass, before any counting.
"""

from __future__ import annotations

from typing import Callable, Sequence

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import RuleId, WarningCode
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry
from .rules_counting import COUNTING_UNIT, NON_BUSINESS_DAY_EXTENSION
from .rules_doubling import CO_LITIGANT_DOUBLING, PRIVILEGED_DOUBLING
from .rules_interruption import MOTION_INTERRUPTION
from .rules_outage import SYSTEM_OUTAGE_EXTENSION
from .rules_recess import RECESS_SUSPENSION
from .rules_start import DAY_EXCLUSION, START_DATE_RESOLUTION
from .rules_suspension import COURT_SUSPENSION
from .types import RuleStep

# Legal precedence; ties broken by statute number, lowest first.
CANONICAL_RULE_ORDER: tuple[RuleId, ...] = (
    RuleId.START_DATE_RESOLUTION,
    RuleId.DAY_EXCLUSION,
    RuleId.COUNTING_UNIT,
    RuleId.NON_BUSINESS_DAY_EXTENSION,
    RuleId.RECESS_SUSPENSION,
    RuleId.PRIVILEGED_DOUBLING,
    RuleId.CO_LITIGANT_DOUBLING,
    RuleId.MOTION_INTERRUPTION,
    RuleId.SYSTEM_OUTAGE_EXTENSION,
    RuleId.COURT_SUSPENSION,
)

_DEFAULT_STEPS: dict[RuleId, RuleStep] = {
    step.rule_id: step
    for step in (
        START_DATE_RESOLUTION,
        DAY_EXCLUSION,
        COUNTING_UNIT,
        NON_BUSINESS_DAY_EXTENSION,
        RECESS_SUSPENSION,
        PRIVILEGED_DOUBLING,
        CO_LITIGANT_DOUBLING,
        MOTION_INTERRUPTION,
        SYSTEM_OUTAGE_EXTENSION,
        COURT_SUSPENSION,
    )
}

_DEBUG_FN: Callable[[str], None] | None = None


def set_pipeline_debug(fn: Callable[[str], None] | None) -> None:
    global _DEBUG_FN
    _DEBUG_FN = fn


def build_default_steps() -> tuple[RuleStep, ...]:
    return tuple(_DEFAULT_STEPS[rule_id] for rule_id in CANONICAL_RULE_ORDER)


def resolve_exclusive(
    steps: Sequence[RuleStep],
    ctx: ComputationContext,
    entry: RuleCatalogEntry,
) -> list[RuleStep]:
    """Keep one winner among matched rules that claim exclusive precedence.

    The catalog's `precedence` decides when it orders every contender; otherwise
    the statutorily earlier rule wins and the ambiguity is recorded as a warning.
    """
    contenders = [s for s in steps if s.rule_id in entry.exclusive_rules]
    if len(contenders) < 2:
        return list(steps)

    ids = [s.rule_id for s in contenders]
    if all(rule_id in entry.precedence for rule_id in ids):
        winner = min(contenders, key=lambda s: entry.precedence.index(s.rule_id))
    else:
        winner = contenders[0]
        ctx.warn(
            WarningCode.AMBIGUOUS_SPECIAL_RULE,
            f"{', '.join(r.value for r in ids)} all claim exclusive precedence for "
            f"{entry.deadline_type}; applied {winner.rule_id.value}",
        )
    losers = {s.rule_id for s in contenders if s is not winner}
    return [s for s in steps if s.rule_id not in losers]


class RulePipeline:
    def __init__(self, steps: Sequence[RuleStep] | None = None) -> None:
        self._steps = tuple(steps) if steps is not None else build_default_steps()
        ids = [s.rule_id for s in self._steps]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate rule ids in pipeline: {[r.value for r in ids]}")

    @property
    def rule_order(self) -> tuple[RuleId, ...]:
        return tuple(s.rule_id for s in self._steps)

    def select(
        self,
        ctx: ComputationContext,
        request: ComputationRequest,
        entry: RuleCatalogEntry,
    ) -> list[RuleStep]:
        matched: list[RuleStep] = []
        for step in self._steps:
            if step.applies(ctx, request, entry):
                matched.append(step)
            elif step.on_skip is not None:
                step.on_skip(ctx, request, entry)
        return resolve_exclusive(matched, ctx, entry)

    def run(
        self,
        ctx: ComputationContext,
        request: ComputationRequest,
        entry: RuleCatalogEntry,
        oracle: CalendarOracle,
    ) -> ComputationContext:
        active = self.select(ctx, request, entry)
        if _DEBUG_FN is not None:
            _DEBUG_FN(
                f"pipeline deadline_type={entry.deadline_type} "
                f"active={[s.rule_id.value for s in active]}"
            )
        for phase in ("prepare", "count", "settle"):
            for step in active:
                hook = getattr(step, phase)
                if hook is not None:
                    ctx = hook(ctx, request, entry, oracle)
        return ctx
