"""Brazilian holiday generator for seeding the holiday table.

Responsibilities:
  - Produce national fixed and Easter-based movable holidays per year.
  - Produce a small table of state holidays keyed by UF code.
Must not:
  - Touch the oracle cache; callers invalidate after reseeding.
"""

from __future__ import annotations

import sqlite3
from datetime import date, timedelta
from typing import Iterable, Optional

from dateutil.easter import easter

from prazomaster.core.domain.enums import BR_STATE_CODES, HolidayType
from prazomaster.infra.sqlite.repos.holiday_repo import HolidayRepo

HolidayRow = tuple[date, str, HolidayType, Optional[str]]

NATIONAL_FIXED: tuple[tuple[int, int, str], ...] = (
    (1, 1, "Confraternizacao Universal"),
    (4, 21, "Tiradentes"),
    (5, 1, "Dia do Trabalho"),
    (9, 7, "Independencia do Brasil"),
    (10, 12, "Nossa Senhora Aparecida"),
    (11, 2, "Finados"),
    (11, 15, "Proclamacao da Republica"),
    (12, 25, "Natal"),
)

# Offsets from Easter Sunday.
NATIONAL_MOVABLE: tuple[tuple[int, str], ...] = (
    (-48, "Carnaval (segunda-feira)"),
    (-47, "Carnaval (terca-feira)"),
    (-2, "Sexta-feira Santa"),
    (60, "Corpus Christi"),
)

# Lei 14.759/2023.
BLACK_CONSCIOUSNESS_FROM_YEAR = 2024

STATE_HOLIDAYS: dict[str, tuple[tuple[int, int, str], ...]] = {
    "SP": ((1, 25, "Aniversario de Sao Paulo"), (7, 9, "Revolucao Constitucionalista")),
    "PR": ((12, 19, "Emancipacao Politica do Parana"),),
    "MA": ((7, 28, "Adesao do Maranhao a Independencia"),),
    "TO": ((9, 8, "Nossa Senhora da Natividade"), (10, 5, "Criacao do Estado do Tocantins")),
}


def national_holidays(year: int) -> list[HolidayRow]:
    rows: list[HolidayRow] = [
        (date(year, month, day), name, HolidayType.NATIONAL, None)
        for month, day, name in NATIONAL_FIXED
    ]
    if year >= BLACK_CONSCIOUSNESS_FROM_YEAR:
        rows.append((date(year, 11, 20), "Consciencia Negra", HolidayType.NATIONAL, None))
    easter_sunday = easter(year)
    for offset, name in NATIONAL_MOVABLE:
        rows.append((easter_sunday + timedelta(days=offset), name, HolidayType.NATIONAL, None))
    return sorted(rows, key=lambda r: r[0])


def state_holidays(year: int, state_code: str) -> list[HolidayRow]:
    if state_code not in BR_STATE_CODES:
        raise ValueError(f"Unknown state code: {state_code}")
    return [
        (date(year, month, day), name, HolidayType.STATE, state_code)
        for month, day, name in STATE_HOLIDAYS.get(state_code, ())
    ]


def holiday_rows(years: Iterable[int], states: Iterable[str] = ()) -> list[HolidayRow]:
    state_list = list(states)
    rows: list[HolidayRow] = []
    for year in years:
        rows.extend(national_holidays(year))
        for state_code in state_list:
            rows.extend(state_holidays(year, state_code))
    return rows


def seed_holidays(
    conn: sqlite3.Connection,
    years: Iterable[int],
    states: Iterable[str] = (),
) -> int:
    """Upsert generated holidays; returns the number of rows written."""
    return HolidayRepo(conn).upsert_many(holiday_rows(years, states))
