"""Domain enums for deadline computation and auditing.

Responsibilities:
  - Define the closed vocabularies used by requests, catalog entries and audit trails.
  - Provide stable rule identifiers with the statute each rule applies.

Invariants:
  - Enum values must remain stable for persistence and audits.
  - RuleId and WarningCode metadata must be complete and deterministic.
"""

from __future__ import annotations

from enum import Enum


class CountingMode(Enum):
    BUSINESS_DAYS = "BUSINESS_DAYS"
    CALENDAR_DAYS = "CALENDAR_DAYS"


class PartyRole(Enum):
    ORDINARY = "ORDINARY"
    PUBLIC_TREASURY = "PUBLIC_TREASURY"
    PUBLIC_DEFENDER = "PUBLIC_DEFENDER"
    PUBLIC_PROSECUTOR = "PUBLIC_PROSECUTOR"
    CO_LITIGANTS_DISTINCT_COUNSEL = "CO_LITIGANTS_DISTINCT_COUNSEL"


# Roles entitled to doubled deadlines, keyed to the CPC article granting it.
DOUBLING_ROLE_STATUTES: dict[PartyRole, str] = {
    PartyRole.PUBLIC_PROSECUTOR: "CPC Art. 180",
    PartyRole.PUBLIC_TREASURY: "CPC Art. 183",
    PartyRole.PUBLIC_DEFENDER: "CPC Art. 186",
}


class TriggerEventType(Enum):
    PERSONAL_SERVICE = "PERSONAL_SERVICE"
    MAIL_SERVICE = "MAIL_SERVICE"
    SUMMONS = "SUMMONS"
    HEARING = "HEARING"
    DJE_AVAILABILITY = "DJE_AVAILABILITY"
    DJE_PUBLICATION = "DJE_PUBLICATION"
    ELECTRONIC_SERVICE = "ELECTRONIC_SERVICE"
    RECORDS_WITHDRAWAL = "RECORDS_WITHDRAWAL"
    OTHER = "OTHER"


class StartMethod(Enum):
    TRIGGER_DAY = "TRIGGER_DAY"
    NEXT_BUSINESS_DAY = "NEXT_BUSINESS_DAY"
    ELECTRONIC_READING = "ELECTRONIC_READING"
    BY_TRIGGER_EVENT = "BY_TRIGGER_EVENT"


# Start method used when a catalog entry defers to the trigger event type.
TRIGGER_START_METHODS: dict[TriggerEventType, StartMethod] = {
    TriggerEventType.PERSONAL_SERVICE: StartMethod.TRIGGER_DAY,
    TriggerEventType.MAIL_SERVICE: StartMethod.TRIGGER_DAY,
    TriggerEventType.SUMMONS: StartMethod.TRIGGER_DAY,
    TriggerEventType.HEARING: StartMethod.TRIGGER_DAY,
    TriggerEventType.DJE_AVAILABILITY: StartMethod.NEXT_BUSINESS_DAY,
    TriggerEventType.DJE_PUBLICATION: StartMethod.TRIGGER_DAY,
    TriggerEventType.ELECTRONIC_SERVICE: StartMethod.ELECTRONIC_READING,
    TriggerEventType.RECORDS_WITHDRAWAL: StartMethod.TRIGGER_DAY,
    TriggerEventType.OTHER: StartMethod.TRIGGER_DAY,
}


class SpecialRule(Enum):
    DOUBLING_ELIGIBLE = "DOUBLING_ELIGIBLE"
    CO_LITIGANT_DOUBLING = "CO_LITIGANT_DOUBLING"
    RECESS_SENSITIVE = "RECESS_SENSITIVE"
    INTERRUPTIBLE = "INTERRUPTIBLE"


class DeadlineNature(Enum):
    PEREMPTORY = "PEREMPTORY"
    DILATORY = "DILATORY"
    IMPROPER = "IMPROPER"


class JurisdictionTier(Enum):
    ORDINARY = "ORDINARY"
    SUPERIOR = "SUPERIOR"
    SPECIALIZED = "SPECIALIZED"


class Jurisdiction(Enum):
    STATE = "STATE"
    FEDERAL = "FEDERAL"
    LABOR = "LABOR"
    ELECTORAL = "ELECTORAL"
    MILITARY = "MILITARY"
    STF = "STF"
    STJ = "STJ"
    TST = "TST"
    TSE = "TSE"
    STM = "STM"

    @property
    def tier(self) -> JurisdictionTier:
        return JURISDICTION_TIERS[self]


JURISDICTION_TIERS: dict[Jurisdiction, JurisdictionTier] = {
    Jurisdiction.STATE: JurisdictionTier.ORDINARY,
    Jurisdiction.FEDERAL: JurisdictionTier.ORDINARY,
    Jurisdiction.LABOR: JurisdictionTier.SPECIALIZED,
    Jurisdiction.ELECTORAL: JurisdictionTier.SPECIALIZED,
    Jurisdiction.MILITARY: JurisdictionTier.SPECIALIZED,
    Jurisdiction.STF: JurisdictionTier.SUPERIOR,
    Jurisdiction.STJ: JurisdictionTier.SUPERIOR,
    Jurisdiction.TST: JurisdictionTier.SUPERIOR,
    Jurisdiction.TSE: JurisdictionTier.SPECIALIZED,
    Jurisdiction.STM: JurisdictionTier.SPECIALIZED,
}


class HolidayType(Enum):
    NATIONAL = "NATIONAL"
    STATE = "STATE"


BR_STATE_CODES: frozenset[str] = frozenset(
    {
        "AC", "AL", "AP", "AM", "BA", "CE", "DF", "ES", "GO",
        "MA", "MT", "MS", "MG", "PA", "PB", "PR", "PE", "PI",
        "RJ", "RN", "RS", "RO", "RR", "SC", "SP", "SE", "TO",
    }
)


# Stable identifiers for pipeline rules; value is the persisted code.
class RuleId(Enum):
    START_DATE_RESOLUTION = "START_DATE_RESOLUTION"
    DAY_EXCLUSION = "DAY_EXCLUSION"
    COUNTING_UNIT = "COUNTING_UNIT"
    NON_BUSINESS_DAY_EXTENSION = "NON_BUSINESS_DAY_EXTENSION"
    RECESS_SUSPENSION = "RECESS_SUSPENSION"
    PRIVILEGED_DOUBLING = "PRIVILEGED_DOUBLING"
    CO_LITIGANT_DOUBLING = "CO_LITIGANT_DOUBLING"
    MOTION_INTERRUPTION = "MOTION_INTERRUPTION"
    SYSTEM_OUTAGE_EXTENSION = "SYSTEM_OUTAGE_EXTENSION"
    COURT_SUSPENSION = "COURT_SUSPENSION"


# Legal basis recorded on every audit entry, keyed by rule id.
RULE_STATUTES: dict[RuleId, str] = {
    RuleId.START_DATE_RESOLUTION: "CPC Art. 231",
    RuleId.DAY_EXCLUSION: "CPC Art. 224",
    RuleId.COUNTING_UNIT: "CPC Art. 219",
    RuleId.NON_BUSINESS_DAY_EXTENSION: "CPC Art. 224 §1",
    RuleId.RECESS_SUSPENSION: "CPC Art. 220",
    RuleId.PRIVILEGED_DOUBLING: "CPC Arts. 180, 183, 186",
    RuleId.CO_LITIGANT_DOUBLING: "CPC Art. 229",
    RuleId.MOTION_INTERRUPTION: "CPC Art. 1.026",
    RuleId.SYSTEM_OUTAGE_EXTENSION: "Lei 11.419 Art. 10 §2",
    RuleId.COURT_SUSPENSION: "CPC Art. 221",
}


class WarningCode(Enum):
    AMBIGUOUS_SPECIAL_RULE = "AMBIGUOUS_SPECIAL_RULE"
    DOUBLING_NOT_COMPOUNDED = "DOUBLING_NOT_COMPOUNDED"
    DOUBLING_NOT_ELIGIBLE = "DOUBLING_NOT_ELIGIBLE"
    CO_LITIGANT_ELECTRONIC_PROCESS = "CO_LITIGANT_ELECTRONIC_PROCESS"
    MOTION_OUTSIDE_WINDOW = "MOTION_OUTSIDE_WINDOW"
    MOTION_NOT_APPLICABLE = "MOTION_NOT_APPLICABLE"
    OUTAGE_IGNORED_NON_ELECTRONIC = "OUTAGE_IGNORED_NON_ELECTRONIC"
    COUNTING_MODE_OVERRIDDEN = "COUNTING_MODE_OVERRIDDEN"
    DURATION_OVERRIDDEN = "DURATION_OVERRIDDEN"
    FATAL_DEADLINE = "FATAL_DEADLINE"


WARNING_METADATA: dict[WarningCode, str] = {
    WarningCode.AMBIGUOUS_SPECIAL_RULE: "Two special rules claimed exclusive precedence.",
    WarningCode.DOUBLING_NOT_COMPOUNDED: "Doubling rules do not compound; larger multiplier kept.",
    WarningCode.DOUBLING_NOT_ELIGIBLE: "Privileged party present but deadline type excludes doubling.",
    WarningCode.CO_LITIGANT_ELECTRONIC_PROCESS: "Co-litigant doubling does not apply to electronic records.",
    WarningCode.MOTION_OUTSIDE_WINDOW: "Interrupting motion was not filed within the running window.",
    WarningCode.MOTION_NOT_APPLICABLE: "Deadline type is not interrupted by motions.",
    WarningCode.OUTAGE_IGNORED_NON_ELECTRONIC: "System outages only extend electronic processes.",
    WarningCode.COUNTING_MODE_OVERRIDDEN: "Counting mode differs from the catalog entry.",
    WarningCode.DURATION_OVERRIDDEN: "Duration differs from the catalog entry.",
    WarningCode.FATAL_DEADLINE: "Peremptory deadline; it cannot be extended by agreement.",
}


def format_warning(code: WarningCode, detail: str | None = None) -> str:
    message = detail if detail else WARNING_METADATA[code]
    return f"{code.value}: {message}"


def warning_code_of(text: str) -> WarningCode | None:
    head, sep, _ = text.partition(":")
    if not sep:
        return None
    try:
        return WarningCode(head)
    except ValueError:
        return None


_missing = [rid for rid in RuleId if rid not in RULE_STATUTES]
if _missing:
    raise RuntimeError(f"Missing RULE_STATUTES for: {[m.value for m in _missing]}")

_extra = [k for k in RULE_STATUTES.keys() if k not in set(RuleId)]
if _extra:
    raise RuntimeError(f"Extra RULE_STATUTES keys: {[e.value for e in _extra]}")

_missing_warnings = [wc for wc in WarningCode if wc not in WARNING_METADATA]
if _missing_warnings:
    raise RuntimeError(f"Missing WARNING_METADATA for: {[m.value for m in _missing_warnings]}")

_missing_tiers = [j for j in Jurisdiction if j not in JURISDICTION_TIERS]
if _missing_tiers:
    raise RuntimeError(f"Missing JURISDICTION_TIERS for: {[m.value for m in _missing_tiers]}")
