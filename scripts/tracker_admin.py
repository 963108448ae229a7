#!/usr/bin/env python3
"""
Maintenance commands for the local tracker dataset.

  python scripts/tracker_admin.py export --out life-tracker-export.json
  python scripts/tracker_admin.py import life-tracker-export.json
  python scripts/tracker_admin.py log
  python scripts/tracker_admin.py facets cast
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

_REPO_ROOT = Path(__file__).resolve().parents[1]
_BACKEND_ROOT = _REPO_ROOT / "backend"
if str(_BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(_BACKEND_ROOT))

from infrastructure.bootstrap import build_tracker_session  # noqa: E402
from life_tracker.movies.errors import ImportFormatError  # noqa: E402
from life_tracker.movies.session import TrackerSession  # noqa: E402


def _cmd_export(session: TrackerSession, args: argparse.Namespace) -> int:
    text = session.export_json()
    if args.out == "-":
        print(text)
        return 0
    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    print(f"exported {len(session.dataset.to_watch)} movies to {out}")
    return 0


def _cmd_import(session: TrackerSession, args: argparse.Namespace) -> int:
    path = Path(args.file)
    try:
        dataset = session.import_json(path.read_bytes())
    except FileNotFoundError:
        print(f"error: {path} does not exist", file=sys.stderr)
        return 1
    except ImportFormatError as exc:
        print(f"error: failed to import {path}: {exc}", file=sys.stderr)
        return 1
    print(f"imported {len(dataset.to_watch)} movies, {len(dataset.watched)} watched, {len(dataset.logs)} log events")
    return 0


def _cmd_log(session: TrackerSession, args: argparse.Namespace) -> int:
    for group in session.logs_by_day():
        print(group.label)
        for event in group.events:
            print(f"  {event.log_type.value:<8} {event.name}  (to watch: {event.movies_count})")
    return 0


def _cmd_facets(session: TrackerSession, args: argparse.Namespace) -> int:
    try:
        values = session.facets(args.field)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    for value in values:
        print(value)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Life tracker dataset maintenance")
    parser.add_argument("--data-dir", default=None, help="Override TRACKER_DATA_DIR.")
    sub = parser.add_subparsers(dest="command", required=True)

    p_export = sub.add_parser("export", help="Write the full dataset as pretty JSON.")
    p_export.add_argument("--out", default="-", help="Output file ('-' for stdout).")
    p_export.set_defaults(func=_cmd_export)

    p_import = sub.add_parser("import", help="Replace the dataset with an export file.")
    p_import.add_argument("file")
    p_import.set_defaults(func=_cmd_import)

    p_log = sub.add_parser("log", help="Print the activity log grouped by day.")
    p_log.set_defaults(func=_cmd_log)

    p_facets = sub.add_parser("facets", help="List distinct values of language/platform/cast.")
    p_facets.add_argument("field")
    p_facets.set_defaults(func=_cmd_facets)
    return parser


def main(argv: list[str], *, session: Optional[TrackerSession] = None) -> int:
    args = build_parser().parse_args(argv)
    if session is None:
        data_dir = Path(args.data_dir).expanduser() if args.data_dir else None
        session = build_tracker_session(data_dir=data_dir)
    return int(args.func(session, args))


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
