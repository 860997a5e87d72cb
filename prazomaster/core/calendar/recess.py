"""Forensic recess windows per jurisdiction tier.

Responsibilities:
  - Load recess window configuration from JSON into frozen dataclasses.
  - Answer whether a date falls inside a recess window for a jurisdiction.
Must not:
  - Read holiday data; holidays are the oracle's concern.

Invariants:
  - Windows are inclusive on both ends and may wrap the year boundary.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Optional

from ..domain.enums import Jurisdiction, JurisdictionTier


@dataclass(frozen=True)
class RecessWindow:
    code: str
    label: str
    start_month: int
    start_day: int
    end_month: int
    end_day: int

    @property
    def wraps_year(self) -> bool:
        return (self.start_month, self.start_day) > (self.end_month, self.end_day)

    def contains(self, day: date) -> bool:
        md = (day.month, day.day)
        start = (self.start_month, self.start_day)
        end = (self.end_month, self.end_day)
        if self.wraps_year:
            return md >= start or md <= end
        return start <= md <= end

    def bounds_for(self, day: date) -> Optional[tuple[date, date]]:
        """Concrete first/last day of the occurrence containing `day`."""
        if not self.contains(day):
            return None
        if not self.wraps_year:
            return (
                date(day.year, self.start_month, self.start_day),
                date(day.year, self.end_month, self.end_day),
            )
        if (day.month, day.day) >= (self.start_month, self.start_day):
            return (
                date(day.year, self.start_month, self.start_day),
                date(day.year + 1, self.end_month, self.end_day),
            )
        return (
            date(day.year - 1, self.start_month, self.start_day),
            date(day.year, self.end_month, self.end_day),
        )

    def days_in_year(self, year: int) -> list[date]:
        if self.wraps_year:
            spans = [
                (date(year, 1, 1), date(year, self.end_month, self.end_day)),
                (date(year, self.start_month, self.start_day), date(year, 12, 31)),
            ]
        else:
            spans = [
                (
                    date(year, self.start_month, self.start_day),
                    date(year, self.end_month, self.end_day),
                )
            ]
        days: list[date] = []
        for first, last in spans:
            cursor = first
            while cursor <= last:
                days.append(cursor)
                cursor += timedelta(days=1)
        return days


@dataclass(frozen=True)
class RecessConfig:
    windows: dict[str, RecessWindow]
    tiers: dict[JurisdictionTier, tuple[RecessWindow, ...]]

    def windows_for(self, jurisdiction: Optional[Jurisdiction]) -> tuple[RecessWindow, ...]:
        if jurisdiction is None:
            return ()
        return self.tiers.get(jurisdiction.tier, ())

    def window_at(
        self, day: date, jurisdiction: Optional[Jurisdiction]
    ) -> Optional[tuple[RecessWindow, date, date]]:
        for window in self.windows_for(jurisdiction):
            bounds = window.bounds_for(day)
            if bounds is not None:
                return window, bounds[0], bounds[1]
        return None

    def in_recess(self, day: date, jurisdiction: Optional[Jurisdiction]) -> bool:
        return self.window_at(day, jurisdiction) is not None


def _config_path() -> Path:
    return Path(__file__).resolve().parent / "recess_windows.json"


def _require(payload: dict[str, Any], key: str, expected_type: type) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in recess config")
    value = payload[key]
    if not isinstance(value, expected_type):
        raise ValueError(f"Field '{key}' must be {expected_type.__name__}")
    return value


def _parse_month_day(raw: str, field_name: str) -> tuple[int, int]:
    parts = raw.split("-")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Field '{field_name}' must be MM-DD, got '{raw}'")
    month, day = int(parts[0]), int(parts[1])
    try:
        # 2000 is a leap year, so 02-29 is accepted.
        date(2000, month, day)
    except ValueError as exc:
        raise ValueError(f"Field '{field_name}' is not a valid day: '{raw}'") from exc
    return month, day


def parse_recess_config(payload: dict[str, Any]) -> RecessConfig:
    raw_windows = _require(payload, "windows", dict)
    windows: dict[str, RecessWindow] = {}
    for code, raw in raw_windows.items():
        if not isinstance(raw, dict):
            raise ValueError(f"Window '{code}' must be a JSON object")
        start_month, start_day = _parse_month_day(_require(raw, "start", str), f"{code}.start")
        end_month, end_day = _parse_month_day(_require(raw, "end", str), f"{code}.end")
        windows[code] = RecessWindow(
            code=code,
            label=_require(raw, "label", str),
            start_month=start_month,
            start_day=start_day,
            end_month=end_month,
            end_day=end_day,
        )

    raw_tiers = _require(payload, "tiers", dict)
    tiers: dict[JurisdictionTier, tuple[RecessWindow, ...]] = {}
    for tier_name, codes in raw_tiers.items():
        try:
            tier = JurisdictionTier(tier_name)
        except ValueError as exc:
            raise ValueError(f"Unknown jurisdiction tier: {tier_name}") from exc
        if not isinstance(codes, list):
            raise ValueError(f"Tier '{tier_name}' must list window codes")
        unknown = [c for c in codes if c not in windows]
        if unknown:
            raise ValueError(f"Tier '{tier_name}' references unknown windows: {unknown}")
        tiers[tier] = tuple(windows[c] for c in codes)

    return RecessConfig(windows=windows, tiers=tiers)


def load_recess_config(path: str | Path | None = None) -> RecessConfig:
    config_path = Path(path) if path is not None else _config_path()
    if not config_path.exists():
        raise ValueError(f"Recess config not found: {config_path}")
    payload = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("Recess config must be a JSON object")
    return parse_recess_config(payload)
