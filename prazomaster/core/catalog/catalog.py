"""Rule catalog: data-driven deadline type definitions.

Responsibilities:
  - Parse and validate catalog entries from JSON payloads.
  - Provide an in-memory CatalogStore keyed by deadline type.
Must not:
  - Compute dates; entries are read-only input to the engine.

Invariants:
  - Entry parsing is strict: unknown enum values and wrong types raise ValueError.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from prazomaster.core.domain.enums import (
    CountingMode,
    DeadlineNature,
    RuleId,
    SpecialRule,
    StartMethod,
)
from prazomaster.core.domain.errors import UnknownDeadlineType
from prazomaster.core.domain.models import RuleCatalogEntry


def _catalog_path() -> Path:
    return Path(__file__).resolve().parent / "deadline_types.json"


def _require(payload: dict[str, Any], key: str, expected_type: type) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in catalog entry")
    value = payload[key]
    if expected_type is int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Field '{key}' must be int")
        return value
    if not isinstance(value, expected_type):
        raise ValueError(f"Field '{key}' must be {expected_type.__name__}")
    return value


def _optional(payload: dict[str, Any], key: str, expected_type: type, default: Any) -> Any:
    if key not in payload or payload[key] is None:
        return default
    return _require(payload, key, expected_type)


def _enum_value(enum_cls: type, raw: str, key: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError as exc:
        raise ValueError(f"Field '{key}' has unknown value '{raw}'") from exc


def _enum_list(enum_cls: type, payload: dict[str, Any], key: str) -> tuple[Any, ...]:
    raw = _optional(payload, key, list, [])
    values = []
    for item in raw:
        if not isinstance(item, str):
            raise ValueError(f"Field '{key}' must contain strings")
        value = _enum_value(enum_cls, item, key)
        if value not in values:
            values.append(value)
    return tuple(values)


def parse_catalog_entry(payload: dict[str, Any]) -> RuleCatalogEntry:
    if not isinstance(payload, dict):
        raise ValueError("Catalog entry must be a JSON object")

    deadline_type = _require(payload, "deadline_type", str).strip()
    if not deadline_type:
        raise ValueError("Field 'deadline_type' must be non-empty")
    base_duration = _require(payload, "base_duration", int)
    if base_duration < 0:
        raise ValueError("Field 'base_duration' must be >= 0")

    privileged_multiplier = _optional(payload, "privileged_multiplier", int, 2)
    co_litigant_multiplier = _optional(payload, "co_litigant_multiplier", int, 2)
    if privileged_multiplier < 1 or co_litigant_multiplier < 1:
        raise ValueError("Multipliers must be >= 1")

    return RuleCatalogEntry(
        deadline_type=deadline_type,
        name=_require(payload, "name", str),
        base_duration=base_duration,
        counting_mode=_enum_value(CountingMode, _require(payload, "counting_mode", str), "counting_mode"),
        start_method=_enum_value(
            StartMethod, _optional(payload, "start_method", str, "TRIGGER_DAY"), "start_method"
        ),
        special_rules=_enum_list(SpecialRule, payload, "special_rules"),
        nature=_enum_value(DeadlineNature, _optional(payload, "nature", str, "DILATORY"), "nature"),
        category=_optional(payload, "category", str, ""),
        legal_basis=_optional(payload, "legal_basis", str, ""),
        counting_mode_locked=_optional(payload, "counting_mode_locked", bool, False),
        allow_compounding=_optional(payload, "allow_compounding", bool, False),
        privileged_multiplier=privileged_multiplier,
        co_litigant_multiplier=co_litigant_multiplier,
        exclusive_rules=frozenset(_enum_list(RuleId, payload, "exclusive_rules")),
        precedence=_enum_list(RuleId, payload, "precedence"),
    )


def entry_to_payload(entry: RuleCatalogEntry) -> dict[str, Any]:
    return {
        "deadline_type": entry.deadline_type,
        "name": entry.name,
        "base_duration": entry.base_duration,
        "counting_mode": entry.counting_mode.value,
        "start_method": entry.start_method.value,
        "special_rules": [r.value for r in entry.special_rules],
        "nature": entry.nature.value,
        "category": entry.category,
        "legal_basis": entry.legal_basis,
        "counting_mode_locked": entry.counting_mode_locked,
        "allow_compounding": entry.allow_compounding,
        "privileged_multiplier": entry.privileged_multiplier,
        "co_litigant_multiplier": entry.co_litigant_multiplier,
        "exclusive_rules": sorted(r.value for r in entry.exclusive_rules),
        "precedence": [r.value for r in entry.precedence],
    }


def load_catalog_file(path: str | Path | None = None) -> list[RuleCatalogEntry]:
    catalog_path = Path(path) if path is not None else _catalog_path()
    if not catalog_path.exists():
        raise ValueError(f"Catalog file not found: {catalog_path}")
    payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Catalog file must be a JSON object")
    raw_entries = _require(payload, "entries", list)
    return [parse_catalog_entry(raw) for raw in raw_entries]


class RuleCatalog:
    """In-memory CatalogStore."""

    def __init__(self, entries: Iterable[RuleCatalogEntry] = ()) -> None:
        self._entries: dict[str, RuleCatalogEntry] = {}
        for entry in entries:
            self.register(entry)

    def register(self, entry: RuleCatalogEntry, replace: bool = False) -> None:
        if entry.deadline_type in self._entries and not replace:
            raise ValueError(f"Duplicate deadline type: {entry.deadline_type}")
        self._entries[entry.deadline_type] = entry

    def get_entry(self, deadline_type: str) -> Optional[RuleCatalogEntry]:
        return self._entries.get(deadline_type)

    def resolve(self, deadline_type: str) -> RuleCatalogEntry:
        entry = self.get_entry(deadline_type)
        if entry is None:
            raise UnknownDeadlineType(deadline_type)
        return entry

    def list_entries(self, category: Optional[str] = None) -> list[RuleCatalogEntry]:
        entries = sorted(self._entries.values(), key=lambda e: e.deadline_type)
        if category is None:
            return entries
        return [e for e in entries if e.category == category]

    def categories(self) -> list[str]:
        return sorted({e.category for e in self._entries.values() if e.category})

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, deadline_type: object) -> bool:
        return deadline_type in self._entries


def default_catalog() -> RuleCatalog:
    return RuleCatalog(load_catalog_file())


__all__ = [
    "RuleCatalog",
    "default_catalog",
    "entry_to_payload",
    "load_catalog_file",
    "parse_catalog_entry",
]
