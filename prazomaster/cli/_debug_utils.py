from __future__ import annotations

import argparse
from datetime import date
from typing import Sequence


def _debug_enabled(args: argparse.Namespace) -> bool:
    return bool(getattr(args, "debug", False))


def _dbg(args: argparse.Namespace, msg: str) -> None:
    if _debug_enabled(args):
        print(f"[debug] {msg}")


def _parse_date(raw: str, flag: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise SystemExit(f"ERROR: {flag} must be YYYY-MM-DD, got {raw!r}") from exc


def _split_csv(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _fail(message: str, kind: str = "USAGE") -> None:
    print(f"SUMMARY status=ERROR kind={kind} message={message}")
    raise SystemExit(2)


def _format_rows(headers: Sequence[str], rows: Sequence[Sequence[object]]) -> list[str]:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))
    lines = ["  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))]
    for row in rows:
        lines.append("  ".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row)))
    return lines
