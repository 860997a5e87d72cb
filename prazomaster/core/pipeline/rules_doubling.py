"""Doubling rules for privileged parties and co-litigants.

Invariants:
  - Privileged doubling applies at most once, whatever roles are present.
  - Without catalog compounding, the larger single multiplier wins.
"""

from __future__ import annotations

from prazomaster.core.calendar.oracle import CalendarOracle
from prazomaster.core.domain.enums import (
    DOUBLING_ROLE_STATUTES,
    PartyRole,
    RuleId,
    SpecialRule,
    WarningCode,
)
from prazomaster.core.domain.models import ComputationContext, ComputationRequest, RuleCatalogEntry
from .types import RuleStep


def privileged_roles(request: ComputationRequest) -> list[PartyRole]:
    # Dict order is statute order: Art. 180, 183, 186.
    return [role for role in DOUBLING_ROLE_STATUTES if role in request.party_roles]


def privileged_applies(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> bool:
    return entry.has_rule(SpecialRule.DOUBLING_ELIGIBLE) and bool(privileged_roles(request))


def privileged_skipped(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> None:
    roles = privileged_roles(request)
    if roles and not entry.has_rule(SpecialRule.DOUBLING_ELIGIBLE):
        ctx.warn(
            WarningCode.DOUBLING_NOT_ELIGIBLE,
            f"{entry.deadline_type} is not doubled for {', '.join(r.value for r in roles)}",
        )


def prepare_privileged(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    roles = privileged_roles(request)
    lead = roles[0]
    before = ctx.duration
    ctx.duration = before * entry.privileged_multiplier
    ctx.multiplier = entry.privileged_multiplier
    ctx.doubled_by = RuleId.PRIVILEGED_DOUBLING
    others = ""
    if len(roles) > 1:
        others = f"; also present: {', '.join(r.value for r in roles[1:])} (applied once)"
    ctx.record(
        RuleId.PRIVILEGED_DOUBLING,
        f"{lead.value} ({DOUBLING_ROLE_STATUTES[lead]}): duration {before} x{entry.privileged_multiplier} "
        f"= {ctx.duration}{others}",
        days_added=ctx.duration - before,
    )
    return ctx


def co_litigant_applies(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> bool:
    return (
        PartyRole.CO_LITIGANTS_DISTINCT_COUNSEL in request.party_roles
        and entry.has_rule(SpecialRule.CO_LITIGANT_DOUBLING)
        and not request.electronic
    )


def co_litigant_skipped(
    ctx: ComputationContext, request: ComputationRequest, entry: RuleCatalogEntry
) -> None:
    if (
        PartyRole.CO_LITIGANTS_DISTINCT_COUNSEL in request.party_roles
        and entry.has_rule(SpecialRule.CO_LITIGANT_DOUBLING)
        and request.electronic
    ):
        ctx.warn(
            WarningCode.CO_LITIGANT_ELECTRONIC_PROCESS,
            "Co-litigant doubling not applied: electronic records (CPC Art. 229 §2)",
        )


def prepare_co_litigant(
    ctx: ComputationContext,
    request: ComputationRequest,
    entry: RuleCatalogEntry,
    oracle: CalendarOracle,
) -> ComputationContext:
    multiplier = entry.co_litigant_multiplier
    before = ctx.duration

    if ctx.doubled_by is None or entry.allow_compounding:
        ctx.duration = before * multiplier
        ctx.multiplier *= multiplier
        compounded = " (compounded by catalog policy)" if ctx.doubled_by is not None else ""
        ctx.doubled_by = ctx.doubled_by or RuleId.CO_LITIGANT_DOUBLING
        ctx.record(
            RuleId.CO_LITIGANT_DOUBLING,
            f"Co-litigants with distinct counsel: duration {before} x{multiplier} = {ctx.duration}{compounded}",
            days_added=ctx.duration - before,
        )
        return ctx

    if multiplier > ctx.multiplier:
        undoubled = before // ctx.multiplier
        ctx.duration = undoubled * multiplier
        ctx.warn(
            WarningCode.DOUBLING_NOT_COMPOUNDED,
            f"Co-litigant multiplier x{multiplier} replaces x{ctx.multiplier}",
        )
        ctx.multiplier = multiplier
        ctx.doubled_by = RuleId.CO_LITIGANT_DOUBLING
        ctx.record(
            RuleId.CO_LITIGANT_DOUBLING,
            f"Co-litigants with distinct counsel: larger multiplier x{multiplier} kept, "
            f"duration {before} -> {ctx.duration}",
            days_added=ctx.duration - before,
        )
        return ctx

    ctx.warn(
        WarningCode.DOUBLING_NOT_COMPOUNDED,
        f"Co-litigant doubling not compounded with {ctx.doubled_by.value}; duration stays {before}",
    )
    return ctx


PRIVILEGED_DOUBLING = RuleStep(
    rule_id=RuleId.PRIVILEGED_DOUBLING,
    applies=privileged_applies,
    prepare=prepare_privileged,
    on_skip=privileged_skipped,
)

CO_LITIGANT_DOUBLING = RuleStep(
    rule_id=RuleId.CO_LITIGANT_DOUBLING,
    applies=co_litigant_applies,
    prepare=prepare_co_litigant,
    on_skip=co_litigant_skipped,
)
