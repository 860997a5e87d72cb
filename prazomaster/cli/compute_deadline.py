"""Compute one procedural deadline and print its audit trail.

Purpose:
  - Resolve the due date for a deadline type from a trigger event.
Inputs:
  - CLI args for deadline type, trigger, jurisdiction/state, party roles and options.
Outputs:
  - SUMMARY key=value lines, the applied-rule audit trail and warnings on stdout.
Example:
  - PYTHONPATH=. python3 prazomaster/cli/compute_deadline.py --db prazo.db \
      --type CPC-001 --trigger-date 2026-03-06 --trigger-event DJE_AVAILABILITY --state SP
Debug:
  - --debug prints cache and pipeline diagnostics.
"""

from __future__ import annotations

import argparse

from prazomaster.app_api.factories import build_prazo_app
from prazomaster.cli._debug_utils import _dbg, _debug_enabled, _fail, _parse_date, _split_csv
from prazomaster.core.calendar.oracle import set_oracle_debug
from prazomaster.core.domain.enums import (
    CountingMode,
    Jurisdiction,
    PartyRole,
    TriggerEventType,
)
from prazomaster.core.domain.errors import ComputationError
from prazomaster.core.domain.models import (
    ComputationRequest,
    ComputationResult,
    InterruptingMotion,
    SystemOutage,
    TriggerEvent,
)
from prazomaster.core.engine.calculator import set_calculator_debug
from prazomaster.core.pipeline.pipeline import set_pipeline_debug


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Compute a Brazilian procedural deadline")
    parser.add_argument("--db", required=True, help="Path to SQLite database with holidays")
    parser.add_argument("--type", required=True, dest="deadline_type", help="Catalog deadline type")
    parser.add_argument("--trigger-date", required=True, help="Trigger event date YYYY-MM-DD")
    parser.add_argument(
        "--trigger-event",
        default=TriggerEventType.OTHER.value,
        choices=[t.value for t in TriggerEventType],
    )
    parser.add_argument(
        "--jurisdiction",
        default=Jurisdiction.STATE.value,
        choices=[j.value for j in Jurisdiction],
    )
    parser.add_argument("--state", help="UF state code, e.g. SP")
    parser.add_argument("--court", help="Court code for court-specific suspensions, e.g. TJSP")
    parser.add_argument("--roles", help="Comma-separated party roles (PUBLIC_TREASURY,PUBLIC_DEFENDER,...)")
    parser.add_argument("--electronic", action="store_true", help="Electronic process")
    parser.add_argument("--days", type=int, help="Override the catalog duration")
    parser.add_argument("--mode", choices=[m.value for m in CountingMode])
    parser.add_argument("--today", help="Reference date for business_days_remaining")
    parser.add_argument("--motion-filed", help="Interrupting motion filing date")
    parser.add_argument("--motion-resolved", help="Interrupting motion resolution date")
    parser.add_argument(
        "--outage",
        action="append",
        default=[],
        help="System outage range START:END (repeatable)",
    )
    parser.add_argument("--catalog-from-db", action="store_true", help="Read catalog from the DB")
    parser.add_argument("--fetch-timeout", type=float, default=None)
    parser.add_argument("--debug", action="store_true")
    return parser.parse_args(argv)


def _parse_outage(raw: str) -> SystemOutage:
    start_raw, sep, end_raw = raw.partition(":")
    if not sep:
        raise SystemExit(f"ERROR: --outage must be START:END, got {raw!r}")
    return SystemOutage(
        start=_parse_date(start_raw, "--outage"),
        end=_parse_date(end_raw, "--outage"),
        source="cli",
    )


def build_request(args: argparse.Namespace) -> ComputationRequest:
    roles = []
    for raw in _split_csv(args.roles):
        try:
            roles.append(PartyRole(raw.upper()))
        except ValueError:
            _fail(f"unknown party role {raw}")

    motion = None
    if args.motion_filed or args.motion_resolved:
        if not (args.motion_filed and args.motion_resolved):
            _fail("--motion-filed and --motion-resolved must be given together")
        motion = InterruptingMotion(
            filed_on=_parse_date(args.motion_filed, "--motion-filed"),
            resolved_on=_parse_date(args.motion_resolved, "--motion-resolved"),
        )

    return ComputationRequest(
        trigger=TriggerEvent(
            event_type=TriggerEventType(args.trigger_event),
            occurred_on=_parse_date(args.trigger_date, "--trigger-date"),
        ),
        deadline_type=args.deadline_type,
        jurisdiction=Jurisdiction(args.jurisdiction),
        counting_mode=CountingMode(args.mode) if args.mode else None,
        state_code=args.state.upper() if args.state else None,
        court_code=args.court.upper() if args.court else None,
        party_roles=frozenset(roles),
        electronic=args.electronic,
        duration_override=args.days,
        interrupting_motion=motion,
        outages=tuple(_parse_outage(raw) for raw in args.outage),
        today=_parse_date(args.today, "--today") if args.today else None,
    )


def render_result(result: ComputationResult) -> list[str]:
    lines = [
        "SUMMARY status=OK",
        f"SUMMARY deadline_type={result.deadline_type}",
        f"SUMMARY counting_mode={result.counting_mode.value}",
        f"SUMMARY effective_duration={result.effective_duration}",
        f"SUMMARY start_date={result.start_date.isoformat()}",
        f"SUMMARY due_date={result.due_date.isoformat()}",
        f"SUMMARY internal_due_date={result.internal_due_date.isoformat()}",
        f"SUMMARY business_days_counted={result.business_days_counted}",
        f"SUMMARY calendar_days_counted={result.calendar_days_counted}",
    ]
    if result.business_days_remaining is not None:
        lines.append(f"SUMMARY business_days_remaining={result.business_days_remaining}")
    lines.append(f"SUMMARY warnings={len(result.warnings)}")
    for index, entry in enumerate(result.applied_rules, start=1):
        before = entry.date_before.isoformat() if entry.date_before else "-"
        after = entry.date_after.isoformat() if entry.date_after else "-"
        lines.append(
            f"AUDIT {index} rule={entry.rule_id.value} before={before} after={after} "
            f"days_added={entry.days_added} {entry.justification}"
        )
    for warning in result.warnings:
        lines.append(f"WARNING {warning}")
    return lines


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    if _debug_enabled(args):
        set_oracle_debug(lambda msg: _dbg(args, msg))
        set_pipeline_debug(lambda msg: _dbg(args, msg))
        set_calculator_debug(lambda msg: _dbg(args, msg))

    request = build_request(args)
    _dbg(args, f"request={request}")
    app = build_prazo_app(
        db_path=args.db,
        fetch_timeout=args.fetch_timeout,
        catalog_from_db=args.catalog_from_db,
    )
    try:
        result = app.compute(request)
    except ComputationError as exc:
        print(f"ERROR kind={exc.kind} message={exc}")
        raise SystemExit(2)
    finally:
        app.calculator.oracle.close()

    for line in render_result(result):
        print(line)
    cache = app.calculator.oracle.cache
    _dbg(args, f"holiday cache hits={cache.hits} misses={cache.misses} size={len(cache)}")


if __name__ == "__main__":
    main()
