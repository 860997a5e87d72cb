"""Create or upgrade the SQLite schema and seed holidays and the catalog.

Purpose:
  - Apply migrations, upsert national (and optional state) holidays for a year
    range, and copy the catalog JSON into the deadline_type table.
Example:
  - PYTHONPATH=. python3 prazomaster/cli/seed_calendar.py --db prazo.db \
      --year-from 2025 --year-to 2028 --states SP,PR
"""

from __future__ import annotations

import argparse

from prazomaster.cli._debug_utils import _dbg, _fail, _split_csv
from prazomaster.core.catalog.catalog import load_catalog_file
from prazomaster.core.domain.enums import BR_STATE_CODES
from prazomaster.infra.seed.brazil_holidays import seed_holidays
from prazomaster.infra.sqlite.db import get_connection
from prazomaster.infra.sqlite.migrator import apply_migrations
from prazomaster.infra.sqlite.repos.catalog_repo import CatalogRepo


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed holidays and catalog into SQLite")
    parser.add_argument("--db", required=True, help="Path to SQLite database")
    parser.add_argument("--year-from", type=int, required=True)
    parser.add_argument("--year-to", type=int, required=True)
    parser.add_argument("--states", help="Comma-separated UF codes for state holidays")
    parser.add_argument("--catalog-file", help="Catalog JSON (defaults to the bundled file)")
    parser.add_argument("--skip-catalog", action="store_true")
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if args.year_to < args.year_from:
        _fail("--year-to must be >= --year-from")
    states = [s.upper() for s in _split_csv(args.states)]
    unknown = [s for s in states if s not in BR_STATE_CODES]
    if unknown:
        _fail(f"unknown state codes {','.join(unknown)}")

    conn = get_connection(args.db)
    try:
        applied = apply_migrations(conn)
        _dbg(args, f"migrations={applied}")
        years = range(args.year_from, args.year_to + 1)
        holiday_count = seed_holidays(conn, years, states)
        catalog_count = 0
        if not args.skip_catalog:
            catalog_count = CatalogRepo(conn).upsert_entries(load_catalog_file(args.catalog_file))
    finally:
        conn.close()

    print("SUMMARY status=OK")
    print(f"SUMMARY migrations={len(applied)}")
    print(f"SUMMARY holidays={holiday_count}")
    print(f"SUMMARY catalog_entries={catalog_count}")


if __name__ == "__main__":
    main()
