"""SQLite repository and SuspensionStore adapter for the court_suspension table."""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Iterable, Optional

from prazomaster.core.domain.models import CourtSuspension
from prazomaster.infra.sqlite.db_readonly import get_readonly_connection


class SuspensionRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert_suspension(self, suspension: CourtSuspension, suspends_deadlines: bool = True) -> None:
        if suspension.end < suspension.start:
            raise ValueError(f"suspension ends before it starts: {suspension.start}..{suspension.end}")
        if not suspension.name.strip():
            raise ValueError("suspension name must be non-empty")
        self._conn.execute(
            """
            INSERT INTO court_suspension (
              start_date, end_date, name, legal_basis, court_code, suspends_deadlines
            )
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(start_date, court_code, name) DO UPDATE SET
              end_date = excluded.end_date,
              legal_basis = excluded.legal_basis,
              suspends_deadlines = excluded.suspends_deadlines
            """,
            (
                suspension.start.isoformat(),
                suspension.end.isoformat(),
                suspension.name,
                suspension.legal_basis,
                suspension.court_code or "",
                1 if suspends_deadlines else 0,
            ),
        )

    def upsert_many(self, suspensions: Iterable[CourtSuspension]) -> int:
        count = 0
        for suspension in suspensions:
            self.upsert_suspension(suspension)
            count += 1
        self._conn.commit()
        return count

    def fetch_suspensions(
        self, start: date, end: date, court_code: Optional[str]
    ) -> list[CourtSuspension]:
        return _query_suspensions(self._conn, start, end, court_code)


def _query_suspensions(
    conn: sqlite3.Connection, start: date, end: date, court_code: Optional[str]
) -> list[CourtSuspension]:
    rows = conn.execute(
        """
        SELECT start_date, end_date, name, legal_basis, court_code
        FROM court_suspension
        WHERE suspends_deadlines = 1
          AND start_date <= ?
          AND end_date >= ?
          AND court_code IN ('', ?)
        ORDER BY start_date, end_date, name
        """,
        (end.isoformat(), start.isoformat(), court_code or ""),
    ).fetchall()
    return [
        CourtSuspension(
            start=date.fromisoformat(r[0]),
            end=date.fromisoformat(r[1]),
            name=r[2],
            legal_basis=r[3],
            court_code=r[4] or None,
        )
        for r in rows
    ]


class SqliteSuspensionStore:
    """SuspensionStore over a SQLite file; one read-only connection per fetch."""

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout

    def fetch_suspensions(
        self, start: date, end: date, court_code: Optional[str]
    ) -> list[CourtSuspension]:
        conn = get_readonly_connection(self._db_path, timeout=self._timeout)
        try:
            return _query_suspensions(conn, start, end, court_code)
        finally:
            conn.close()
