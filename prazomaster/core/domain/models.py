"""Domain models for deadline requests, catalog entries and audit trails.

Responsibilities:
  - Define immutable carriers for requests, catalog entries, audit entries and results.
  - Define the mutable ComputationContext owned by exactly one computation.

Inputs/Outputs:
  - ComputationRequest is built by callers; ComputationResult is returned to them.

Invariants:
  - Requests, entries, audit entries and results are frozen after construction.
  - A ComputationContext is never shared across computations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Optional

from .enums import (
    BR_STATE_CODES,
    CountingMode,
    DeadlineNature,
    Jurisdiction,
    PartyRole,
    RULE_STATUTES,
    RuleId,
    SpecialRule,
    StartMethod,
    TriggerEventType,
    WarningCode,
    format_warning,
)
from .errors import InvalidRequest


@dataclass(frozen=True)
class TriggerEvent:
    event_type: TriggerEventType
    occurred_on: date


@dataclass(frozen=True)
class InterruptingMotion:
    filed_on: date
    resolved_on: date
    description: str = ""


@dataclass(frozen=True)
class SystemOutage:
    """Inclusive range of days an official electronic filing system was down."""

    start: date
    end: date
    source: str = ""

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def length_days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class CourtSuspension:
    """Inclusive range of days a court suspended deadlines (ordinance, closure).

    `court_code` None means the suspension applies to every court.
    """

    start: date
    end: date
    name: str
    legal_basis: str = ""
    court_code: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def label(self) -> str:
        return f"{self.name} ({self.legal_basis})" if self.legal_basis else self.name


@dataclass(frozen=True)
class ComputationRequest:
    trigger: TriggerEvent
    deadline_type: str
    jurisdiction: Jurisdiction
    counting_mode: Optional[CountingMode] = None
    state_code: Optional[str] = None
    party_roles: frozenset[PartyRole] = frozenset()
    electronic: bool = False
    duration_override: Optional[int] = None
    interrupting_motion: Optional[InterruptingMotion] = None
    outages: tuple[SystemOutage, ...] = ()
    today: Optional[date] = None
    court_code: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "party_roles", frozenset(self.party_roles))
        object.__setattr__(self, "outages", tuple(self.outages))
        if not isinstance(self.jurisdiction, Jurisdiction):
            raise InvalidRequest(f"Unknown jurisdiction: {self.jurisdiction!r}")
        if self.counting_mode is not None and not isinstance(self.counting_mode, CountingMode):
            raise InvalidRequest(f"Unknown counting mode: {self.counting_mode!r}")
        for role in self.party_roles:
            if not isinstance(role, PartyRole):
                raise InvalidRequest(f"Unknown party role: {role!r}")

    def validate(self) -> None:
        if self.trigger is None or not isinstance(self.trigger.occurred_on, date):
            raise InvalidRequest("trigger date must be provided")
        if not self.deadline_type or not self.deadline_type.strip():
            raise InvalidRequest("deadline_type must be non-empty")
        if self.state_code is not None and self.state_code not in BR_STATE_CODES:
            raise InvalidRequest(f"Unknown state code: {self.state_code}")
        if self.duration_override is not None:
            if isinstance(self.duration_override, bool) or not isinstance(self.duration_override, int):
                raise InvalidRequest("duration_override must be an integer")
            if self.duration_override < 1:
                raise InvalidRequest("duration_override must be >= 1")
        motion = self.interrupting_motion
        if motion is not None and motion.resolved_on < motion.filed_on:
            raise InvalidRequest("interrupting motion resolved before it was filed")
        for outage in self.outages:
            if outage.end < outage.start:
                raise InvalidRequest(f"outage ends before it starts: {outage.start}..{outage.end}")
        if self.court_code is not None and not self.court_code.strip():
            raise InvalidRequest("court_code must be non-empty when given")


@dataclass(frozen=True)
class RuleCatalogEntry:
    deadline_type: str
    name: str
    base_duration: int
    counting_mode: CountingMode
    start_method: StartMethod = StartMethod.TRIGGER_DAY
    special_rules: tuple[SpecialRule, ...] = ()
    nature: DeadlineNature = DeadlineNature.DILATORY
    category: str = ""
    legal_basis: str = ""
    counting_mode_locked: bool = False
    allow_compounding: bool = False
    privileged_multiplier: int = 2
    co_litigant_multiplier: int = 2
    exclusive_rules: frozenset[RuleId] = frozenset()
    precedence: tuple[RuleId, ...] = ()

    def has_rule(self, rule: SpecialRule) -> bool:
        return rule in self.special_rules

    @property
    def is_fatal(self) -> bool:
        return self.nature == DeadlineNature.PEREMPTORY


@dataclass(frozen=True)
class AuditEntry:
    rule_id: RuleId
    description: str
    date_before: Optional[date]
    date_after: Optional[date]
    days_added: int = 0
    legal_basis: str = ""

    @property
    def justification(self) -> str:
        if not self.legal_basis:
            return self.description
        return f"{self.legal_basis}: {self.description}"


@dataclass
class ComputationContext:
    trigger_date: date
    duration: int
    counting_mode: CountingMode
    state_code: Optional[str] = None
    # Jurisdiction whose recess windows make a day non-business; None means no recess.
    # Counting skips those days only when skip_recess is set.
    recess_jurisdiction: Optional[Jurisdiction] = None
    start_date: Optional[date] = None
    working_date: Optional[date] = None
    base_duration: int = 0
    multiplier: int = 1
    doubled_by: Optional[RuleId] = None
    skip_recess: bool = False
    outages: tuple[SystemOutage, ...] = ()
    suspensions: tuple[CourtSuspension, ...] = ()
    interruption: Optional[InterruptingMotion] = None
    business_days_counted: int = 0
    calendar_days_counted: int = 0
    applied: list[AuditEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def first_countable_day(self) -> Optional[date]:
        if self.start_date is None:
            return None
        return self.start_date + timedelta(days=1)

    def record(
        self,
        rule_id: RuleId,
        description: str,
        date_before: Optional[date] = None,
        date_after: Optional[date] = None,
        days_added: int = 0,
    ) -> AuditEntry:
        entry = AuditEntry(
            rule_id=rule_id,
            description=description,
            date_before=date_before,
            date_after=date_after,
            days_added=days_added,
            legal_basis=RULE_STATUTES[rule_id],
        )
        self.applied.append(entry)
        return entry

    def warn(self, code: WarningCode, detail: Optional[str] = None) -> None:
        text = format_warning(code, detail)
        if text not in self.warnings:
            self.warnings.append(text)

    def applied_rule_ids(self) -> list[RuleId]:
        return [entry.rule_id for entry in self.applied]


@dataclass(frozen=True)
class ComputationResult:
    deadline_type: str
    start_date: date
    due_date: date
    business_days_counted: int
    calendar_days_counted: int
    applied_rules: tuple[AuditEntry, ...]
    warnings: tuple[str, ...]
    effective_duration: int
    counting_mode: CountingMode
    internal_due_date: date
    business_days_remaining: Optional[int] = None

    def rule_ids(self) -> list[RuleId]:
        return [entry.rule_id for entry in self.applied_rules]
