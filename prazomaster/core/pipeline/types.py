from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import RuleId
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry

Precondition = Callable[[ComputationContext, ComputationRequest, RuleCatalogEntry], bool]
StepFn = Callable[
    [ComputationContext, ComputationRequest, RuleCatalogEntry, CalendarOracle], ComputationContext
]
SkipFn = Callable[[ComputationContext, ComputationRequest, RuleCatalogEntry], None]


def always(ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry) -> bool:
    return True


@dataclass(frozen=True)
class RuleStep:
    """One legal rule of the pipeline.

    Hooks run in three passes over the canonical order: `prepare` shapes the
    count (start date, unit, duration, skipped days), `count` walks the days,
    `settle` adjusts or explains the counted due date. `on_skip` may attach a
    warning when the precondition does not match.
    """

    rule_id: RuleId
    applies: Precondition = always
    prepare: Optional[StepFn] = None
    count: Optional[StepFn] = None
    settle: Optional[StepFn] = None
    on_skip: Optional[SkipFn] = None
