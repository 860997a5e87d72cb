"""SQLite schema migration helpers for holiday and catalog tables.

Responsibilities:
  - Create/upgrade schema deterministically.
Must not:
  - Embed business logic; migrations only.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def migrations_dir() -> Path:
    return Path(__file__).resolve().parent / "migrations"


def apply_migrations(conn: sqlite3.Connection) -> list[str]:
    applied: list[str] = []
    for migration in sorted(migrations_dir().glob("*.sql")):
        conn.executescript(migration.read_text(encoding="utf-8"))
        applied.append(migration.name)
    conn.commit()
    return applied
