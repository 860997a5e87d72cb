"""SQLite repository and HolidayStore adapter for the holiday table."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Iterable, Optional

from prazomaster.core.domain.enums import HolidayType
from prazomaster.infra.sqlite.db_readonly import get_readonly_connection


class HolidayRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert_holiday(
        self,
        holiday_date: date,
        name: str,
        holiday_type: HolidayType,
        state_code: Optional[str] = None,
    ) -> None:
        if holiday_type == HolidayType.STATE and not state_code:
            raise ValueError("state_code is required for STATE holidays")
        self._conn.execute(
            """
            INSERT INTO holiday (holiday_date, name, holiday_type, state_code)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(holiday_date, holiday_type, state_code) DO UPDATE SET
              name = excluded.name
            """,
            (
                holiday_date.isoformat(),
                name,
                holiday_type.value,
                state_code if holiday_type == HolidayType.STATE else "",
            ),
        )

    def upsert_many(
        self, rows: Iterable[tuple[date, str, HolidayType, Optional[str]]]
    ) -> int:
        count = 0
        for holiday_date, name, holiday_type, state_code in rows:
            self.upsert_holiday(holiday_date, name, holiday_type, state_code)
            count += 1
        self._conn.commit()
        return count

    def delete_holiday(
        self, holiday_date: date, holiday_type: HolidayType, state_code: Optional[str] = None
    ) -> None:
        self._conn.execute(
            """
            DELETE FROM holiday
            WHERE holiday_date = ? AND holiday_type = ? AND state_code = ?
            """,
            (
                holiday_date.isoformat(),
                holiday_type.value,
                state_code if holiday_type == HolidayType.STATE else "",
            ),
        )
        self._conn.commit()

    def fetch_holidays(
        self,
        start: date,
        end: date,
        state_code: Optional[str],
        holiday_types: frozenset[HolidayType],
    ) -> set[date]:
        return _query_holidays(self._conn, start, end, state_code, holiday_types)

    def list_holidays(self, year: int, state_code: Optional[str] = None) -> list[tuple[date, str, str]]:
        rows = self._conn.execute(
            """
            SELECT holiday_date, name, holiday_type
            FROM holiday
            WHERE holiday_date BETWEEN ? AND ?
              AND (holiday_type = 'NATIONAL' OR state_code = ?)
            ORDER BY holiday_date, holiday_type
            """,
            (f"{year:04d}-01-01", f"{year:04d}-12-31", state_code or ""),
        ).fetchall()
        return [(date.fromisoformat(r[0]), r[1], r[2]) for r in rows]


def _query_holidays(
    conn: sqlite3.Connection,
    start: date,
    end: date,
    state_code: Optional[str],
    holiday_types: frozenset[HolidayType],
) -> set[date]:
    clauses: list[str] = []
    params: list[object] = [start.isoformat(), end.isoformat()]
    if HolidayType.NATIONAL in holiday_types:
        clauses.append("holiday_type = 'NATIONAL'")
    if HolidayType.STATE in holiday_types and state_code:
        clauses.append("(holiday_type = 'STATE' AND state_code = ?)")
        params.append(state_code)
    if not clauses:
        return set()
    rows = conn.execute(
        f"""
        SELECT DISTINCT holiday_date
        FROM holiday
        WHERE holiday_date BETWEEN ? AND ?
          AND ({" OR ".join(clauses)})
        """,
        params,
    ).fetchall()
    return {date.fromisoformat(r[0]) for r in rows}


class SqliteHolidayStore:
    """HolidayStore over a SQLite file; one read-only connection per fetch.

    Per-fetch connections keep the store usable from the oracle's fetch threads.
    """

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout

    def fetch_holidays(
        self,
        start: date,
        end: date,
        state_code: Optional[str],
        holiday_types: frozenset[HolidayType],
    ) -> set[date]:
        conn = get_readonly_connection(self._db_path, timeout=self._timeout)
        try:
            return _query_holidays(conn, start, end, state_code, holiday_types)
        finally:
            conn.close()
