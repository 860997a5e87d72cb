"""SQLite repository for deadline_type catalog rows.

Responsibilities:
  - Upsert catalog entries deterministically (JSON columns for rule lists).
  - Serve entries back as a CatalogStore.
Must not:
  - Compute dates or interpret special rules; persistence only.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Any, Iterable, Optional

from prazomaster.core.catalog.catalog import entry_to_payload, parse_catalog_entry
from prazomaster.core.domain.models import RuleCatalogEntry
from prazomaster.infra.sqlite.db_readonly import get_readonly_connection

_COLUMNS = (
    "deadline_type, name, base_duration, counting_mode, start_method, special_rules_json, "
    "nature, category, legal_basis, counting_mode_locked, allow_compounding, "
    "privileged_multiplier, co_litigant_multiplier, exclusive_rules_json, precedence_json"
)


def _row_to_entry(row: Any) -> RuleCatalogEntry:
    payload = {
        "deadline_type": row[0],
        "name": row[1],
        "base_duration": int(row[2]),
        "counting_mode": row[3],
        "start_method": row[4],
        "special_rules": json.loads(row[5]),
        "nature": row[6],
        "category": row[7],
        "legal_basis": row[8],
        "counting_mode_locked": bool(row[9]),
        "allow_compounding": bool(row[10]),
        "privileged_multiplier": int(row[11]),
        "co_litigant_multiplier": int(row[12]),
        "exclusive_rules": json.loads(row[13]),
        "precedence": json.loads(row[14]),
    }
    return parse_catalog_entry(payload)


def _select_entry(conn: sqlite3.Connection, deadline_type: str) -> Optional[RuleCatalogEntry]:
    row = conn.execute(
        f"SELECT {_COLUMNS} FROM deadline_type WHERE deadline_type = ?",
        (deadline_type,),
    ).fetchone()
    return None if row is None else _row_to_entry(row)


def _select_entries(conn: sqlite3.Connection, category: Optional[str]) -> list[RuleCatalogEntry]:
    if category is None:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM deadline_type ORDER BY deadline_type"
        ).fetchall()
    else:
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM deadline_type WHERE category = ? ORDER BY deadline_type",
            (category,),
        ).fetchall()
    return [_row_to_entry(row) for row in rows]


class CatalogRepo:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def upsert_entry(self, entry: RuleCatalogEntry) -> None:
        payload = entry_to_payload(entry)
        self._conn.execute(
            f"""
            INSERT INTO deadline_type ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(deadline_type) DO UPDATE SET
              name = excluded.name,
              base_duration = excluded.base_duration,
              counting_mode = excluded.counting_mode,
              start_method = excluded.start_method,
              special_rules_json = excluded.special_rules_json,
              nature = excluded.nature,
              category = excluded.category,
              legal_basis = excluded.legal_basis,
              counting_mode_locked = excluded.counting_mode_locked,
              allow_compounding = excluded.allow_compounding,
              privileged_multiplier = excluded.privileged_multiplier,
              co_litigant_multiplier = excluded.co_litigant_multiplier,
              exclusive_rules_json = excluded.exclusive_rules_json,
              precedence_json = excluded.precedence_json,
              updated_at = datetime('now')
            """,
            (
                payload["deadline_type"],
                payload["name"],
                payload["base_duration"],
                payload["counting_mode"],
                payload["start_method"],
                json.dumps(payload["special_rules"]),
                payload["nature"],
                payload["category"],
                payload["legal_basis"],
                1 if payload["counting_mode_locked"] else 0,
                1 if payload["allow_compounding"] else 0,
                payload["privileged_multiplier"],
                payload["co_litigant_multiplier"],
                json.dumps(payload["exclusive_rules"]),
                json.dumps(payload["precedence"]),
            ),
        )

    def upsert_entries(self, entries: Iterable[RuleCatalogEntry]) -> int:
        count = 0
        for entry in entries:
            self.upsert_entry(entry)
            count += 1
        self._conn.commit()
        return count

    def get_entry(self, deadline_type: str) -> Optional[RuleCatalogEntry]:
        return _select_entry(self._conn, deadline_type)

    def list_entries(self, category: Optional[str] = None) -> list[RuleCatalogEntry]:
        return _select_entries(self._conn, category)


class SqliteCatalogStore:
    """Read-only CatalogStore over a SQLite file."""

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout

    def get_entry(self, deadline_type: str) -> Optional[RuleCatalogEntry]:
        conn = get_readonly_connection(self._db_path, timeout=self._timeout)
        try:
            return _select_entry(conn, deadline_type)
        finally:
            conn.close()

    def list_entries(self, category: Optional[str] = None) -> list[RuleCatalogEntry]:
        conn = get_readonly_connection(self._db_path, timeout=self._timeout)
        try:
            return _select_entries(conn, category)
        finally:
            conn.close()
