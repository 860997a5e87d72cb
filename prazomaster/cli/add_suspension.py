"""Register a court suspension period (ordinance, tribunal closure) in SQLite.

Purpose:
  - Upsert one period during which deadlines do not run, for all courts or one court.
Example:
  - PYTHONPATH=. python3 prazomaster/cli/add_suspension.py --db prazo.db \
      --start 2026-05-04 --end 2026-05-08 --name "Migracao PJe" \
      --legal-basis "Portaria 123/2026" --court TJSP
"""

from __future__ import annotations

import argparse

from prazomaster.cli._debug_utils import _dbg, _fail, _parse_date
from prazomaster.core.domain.models import CourtSuspension
from prazomaster.infra.sqlite.db import get_connection
from prazomaster.infra.sqlite.migrator import apply_migrations
from prazomaster.infra.sqlite.repos.suspension_repo import SuspensionRepo


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Add a court suspension period")
    parser.add_argument("--db", required=True, help="Path to SQLite database")
    parser.add_argument("--start", required=True, help="First suspended day YYYY-MM-DD")
    parser.add_argument("--end", required=True, help="Last suspended day YYYY-MM-DD")
    parser.add_argument("--name", required=True, help="Short description of the suspension")
    parser.add_argument("--legal-basis", default="", help="Ordinance or statute, e.g. Portaria 123/2026")
    parser.add_argument("--court", help="Court code; omit for a suspension that applies to all courts")
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    start = _parse_date(args.start, "--start")
    end = _parse_date(args.end, "--end")
    if end < start:
        _fail("--end must be >= --start")
    if not args.name.strip():
        _fail("--name must be non-empty")

    suspension = CourtSuspension(
        start=start,
        end=end,
        name=args.name.strip(),
        legal_basis=args.legal_basis.strip(),
        court_code=args.court.upper() if args.court else None,
    )
    conn = get_connection(args.db)
    try:
        applied = apply_migrations(conn)
        _dbg(args, f"migrations={applied}")
        count = SuspensionRepo(conn).upsert_many([suspension])
    finally:
        conn.close()

    print("SUMMARY status=OK")
    print(f"SUMMARY suspensions={count}")
    print(f"SUMMARY period={start.isoformat()}..{end.isoformat()}")
    print(f"SUMMARY court={suspension.court_code or 'ALL'}")


if __name__ == "__main__":
    main()
