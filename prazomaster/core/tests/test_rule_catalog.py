"""Tests for catalog parsing and the in-memory store."""

from __future__ import annotations

import json

import pytest

from prazomaster.core.catalog.catalog import (
    RuleCatalog,
    default_catalog,
    entry_to_payload,
    load_catalog_file,
    parse_catalog_entry,
)
from prazomaster.core.domain.enums import CountingMode, RuleId, SpecialRule, StartMethod
from prazomaster.core.domain.errors import UnknownDeadlineType


def _payload(**overrides):
    payload = {
        "deadline_type": "T-1",
        "name": "Test",
        "base_duration": 15,
        "counting_mode": "BUSINESS_DAYS",
    }
    payload.update(overrides)
    return payload


def test_bundled_catalog_loads() -> None:
    catalog = default_catalog()

    assert len(catalog) >= 20
    entry = catalog.resolve("CPC-001")
    assert entry.base_duration == 15
    assert entry.counting_mode == CountingMode.BUSINESS_DAYS
    assert entry.has_rule(SpecialRule.DOUBLING_ELIGIBLE)
    assert entry.is_fatal
    assert catalog.resolve("RJ-001").counting_mode_locked
    assert "APPEAL" in catalog.categories()
    assert all(e.category == "APPEAL" for e in catalog.list_entries("APPEAL"))


def test_unknown_type_raises() -> None:
    catalog = default_catalog()
    assert catalog.get_entry("NOPE-999") is None
    with pytest.raises(UnknownDeadlineType) as excinfo:
        catalog.resolve("NOPE-999")
    assert excinfo.value.deadline_type == "NOPE-999"
    assert excinfo.value.kind == "UNKNOWN_DEADLINE_TYPE"


def test_parse_defaults_and_round_trip() -> None:
    entry = parse_catalog_entry(
        _payload(
            special_rules=["RECESS_SENSITIVE", "RECESS_SENSITIVE"],
            exclusive_rules=["PRIVILEGED_DOUBLING", "CO_LITIGANT_DOUBLING"],
            precedence=["CO_LITIGANT_DOUBLING", "PRIVILEGED_DOUBLING"],
        )
    )

    assert entry.start_method == StartMethod.TRIGGER_DAY
    assert entry.special_rules == (SpecialRule.RECESS_SENSITIVE,)
    assert entry.precedence == (RuleId.CO_LITIGANT_DOUBLING, RuleId.PRIVILEGED_DOUBLING)
    assert parse_catalog_entry(entry_to_payload(entry)) == entry


@pytest.mark.parametrize(
    "overrides",
    [
        {"deadline_type": " "},
        {"base_duration": -1},
        {"base_duration": True},
        {"counting_mode": "WEEKS"},
        {"special_rules": ["TELEPORT"]},
        {"privileged_multiplier": 0},
        {"counting_mode_locked": "yes"},
    ],
)
def test_parse_rejects_invalid_fields(overrides) -> None:
    with pytest.raises(ValueError):
        parse_catalog_entry(_payload(**overrides))


def test_register_duplicate_and_load_file(tmp_path) -> None:
    catalog = RuleCatalog([parse_catalog_entry(_payload())])
    with pytest.raises(ValueError):
        catalog.register(parse_catalog_entry(_payload()))
    catalog.register(parse_catalog_entry(_payload(base_duration=5)), replace=True)
    assert catalog.resolve("T-1").base_duration == 5

    path = tmp_path / "catalog.json"
    path.write_text(json.dumps({"entries": [_payload(), _payload(deadline_type="T-2")]}), encoding="utf-8")
    assert [e.deadline_type for e in load_catalog_file(path)] == ["T-1", "T-2"]

    path.write_text(json.dumps([_payload()]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_catalog_file(path)
