"""List deadline types from the bundled catalog or a SQLite database.

Example:
  - PYTHONPATH=. python3 prazomaster/cli/list_catalog.py --category PARTY
"""

from __future__ import annotations

import argparse

from prazomaster.cli._debug_utils import _dbg, _format_rows
from prazomaster.core.catalog.catalog import default_catalog, load_catalog_file, RuleCatalog
from prazomaster.core.domain.models import RuleCatalogEntry
from prazomaster.core.ports.catalog_store_port import CatalogStore
from prazomaster.infra.sqlite.repos.catalog_repo import SqliteCatalogStore

HEADERS = ("TYPE", "DAYS", "MODE", "START", "NATURE", "RULES", "LEGAL_BASIS")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List deadline catalog entries")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--db", help="Read entries from this SQLite database")
    source.add_argument("--catalog-file", help="Read entries from a catalog JSON file")
    parser.add_argument("--category", help="Only entries in this category")
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def build_store(args: argparse.Namespace) -> CatalogStore:
    if args.db:
        return SqliteCatalogStore(args.db)
    if args.catalog_file:
        return RuleCatalog(load_catalog_file(args.catalog_file))
    return default_catalog()


def entry_row(entry: RuleCatalogEntry) -> tuple[str, ...]:
    mode = entry.counting_mode.value
    if entry.counting_mode_locked:
        mode += "*"
    return (
        entry.deadline_type,
        str(entry.base_duration),
        mode,
        entry.start_method.value,
        entry.nature.value,
        ",".join(r.value for r in entry.special_rules) or "-",
        entry.legal_basis or "-",
    )


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    store = build_store(args)
    _dbg(args, f"store={type(store).__name__} category={args.category}")
    entries = store.list_entries(args.category)
    for line in _format_rows(HEADERS, [entry_row(e) for e in entries]):
        print(line)
    print(f"COUNT={len(entries)}")


if __name__ == "__main__":
    main()
