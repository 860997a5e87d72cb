"""SQLite connection helpers for read-only access."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from urllib.parse import quote


def get_readonly_connection(db_path: str, timeout: float = 5.0) -> sqlite3.Connection:
    uri = f"file:{quote(str(Path(db_path).resolve()), safe='/')}?mode=ro"
    conn = sqlite3.connect(uri, uri=True, timeout=timeout)
    conn.row_factory = sqlite3.Row
    return conn
