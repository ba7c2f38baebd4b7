#!/usr/bin/env python3
"""
Weekly agenda across several todo.txt files.

Usage:
    python3 scripts/weekly_agenda.py <files.txt> [--now YYYY-MM-DD[THH:MM[:SS]]]
        [--days N] [--hide-empty-past-due] [--json] [--verbose]

<files.txt> lists one todo file per line; a leading '~' means the home
directory. Tasks carry 'due:YYYY-MM-DD' and an optional standalone 'x'.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

_SCRIPT_DIR = Path(__file__).parent.resolve()
if str(_SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(_SCRIPT_DIR))
if str(_SCRIPT_DIR / "lib") not in sys.path:
    sys.path.insert(0, str(_SCRIPT_DIR / "lib"))

from agenda_common import AGENDA_DAYS, load_all_tasks, read_control_file
from todo_agenda.builder import agenda_to_dict, build_agenda, render_agenda

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stdout)
    logging.getLogger().setLevel(level)


def _parse_now(raw: str) -> datetime:
    now = datetime.fromisoformat(raw)
    if now.tzinfo is not None:
        raise ValueError("timezone offsets are not supported")
    return now


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render a past-due and 7-day agenda from todo.txt files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("control_file", nargs="?", help="File listing todo.txt paths, one per line")
    parser.add_argument("--now", help="Agenda start instant (YYYY-MM-DD[THH:MM[:SS]]), default: current time")
    parser.add_argument("--days", type=int, help=f"Number of daily sections (default: {AGENDA_DAYS})")
    parser.add_argument("--hide-empty-past-due", action="store_true",
                        help="Omit the [PAST DUE] heading when nothing is past due")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of text")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if not args.control_file:
        parser.print_usage(sys.stderr)
        sys.exit(1)

    if args.now:
        try:
            now = _parse_now(args.now)
        except ValueError:
            logger.error(f"Invalid --now value: {args.now!r}")
            sys.exit(1)
    else:
        now = datetime.now()

    days = AGENDA_DAYS if args.days is None else args.days
    if days < 1:
        logger.error(f"Invalid --days value: {days} (expected a positive integer)")
        sys.exit(1)

    try:
        todo_files = read_control_file(args.control_file)
    except OSError as e:
        logger.error(f"Failed to open file {args.control_file}: {e}")
        sys.exit(1)

    tasks = load_all_tasks(todo_files)
    agenda = build_agenda(tasks, now, days)

    if args.json:
        print(json.dumps(agenda_to_dict(agenda), indent=2))
    else:
        print(render_agenda(agenda, hide_empty_past_due=args.hide_empty_past_due), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
