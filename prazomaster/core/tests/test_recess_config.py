from __future__ import annotations

import json
from datetime import date

import pytest

from prazomaster.core.calendar.recess import load_recess_config, parse_recess_config
from prazomaster.core.domain.enums import Jurisdiction


def test_default_config_tiers() -> None:
    config = load_recess_config()

    assert [w.code for w in config.windows_for(Jurisdiction.STATE)] == ["DEC_JAN"]
    assert [w.code for w in config.windows_for(Jurisdiction.TST)] == ["JULY"]
    assert config.windows_for(Jurisdiction.LABOR) == ()
    assert config.windows_for(Jurisdiction.TSE) == ()
    assert config.windows_for(None) == ()


def test_wrapping_window_contains_both_sides_of_new_year() -> None:
    window = load_recess_config().windows["DEC_JAN"]

    assert window.wraps_year
    assert window.contains(date(2026, 12, 20))
    assert window.contains(date(2027, 1, 20))
    assert not window.contains(date(2026, 12, 19))
    assert not window.contains(date(2027, 1, 21))
    assert window.bounds_for(date(2026, 12, 24)) == (date(2026, 12, 20), date(2027, 1, 20))
    assert len(window.days_in_year(2027)) == 20 + 12


def test_parse_rejects_bad_payloads() -> None:
    good = {
        "windows": {"X": {"label": "x", "start": "07-02", "end": "07-31"}},
        "tiers": {"SUPERIOR": ["X"]},
    }
    assert parse_recess_config(good).windows["X"].end_day == 31

    with pytest.raises(ValueError):
        parse_recess_config({"windows": {}})
    with pytest.raises(ValueError):
        parse_recess_config({**good, "tiers": {"SUPERIOR": ["MISSING"]}})
    with pytest.raises(ValueError):
        parse_recess_config({**good, "tiers": {"NOPE": ["X"]}})
    with pytest.raises(ValueError):
        parse_recess_config(
            {"windows": {"X": {"label": "x", "start": "13-01", "end": "07-31"}}, "tiers": {}}
        )


def test_load_from_file(tmp_path) -> None:
    path = tmp_path / "recess.json"
    path.write_text(
        json.dumps(
            {
                "windows": {"JULY": {"label": "July", "start": "07-01", "end": "07-15"}},
                "tiers": {"ORDINARY": ["JULY"]},
            }
        ),
        encoding="utf-8",
    )
    config = load_recess_config(path)

    assert config.in_recess(date(2026, 7, 10), Jurisdiction.FEDERAL)
    assert not config.in_recess(date(2026, 12, 24), Jurisdiction.FEDERAL)
    with pytest.raises(ValueError):
        load_recess_config(tmp_path / "missing.json")
