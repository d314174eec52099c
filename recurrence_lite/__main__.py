"""Command-line entry for recurrence_lite.

Builds a rule and range from arguments, then prints the description, a
summary and the occurrence dates (optionally with a month grid).
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from typing import NoReturn, Optional

from dateutil import parser as date_parser

from . import _init_logging
from .calendar.lite_calendar_grid import build_grid, is_in_sequence, is_within_month, month_title
from .calendar.lite_description import WEEKDAY_NAMES
from .calendar.lite_models import DateRange, MonthlyPattern, RecurrenceRule, RecurrenceType
from .core.config_loader import Config, apply_env_overrides, load_config
from .core.lite_logging import configure_lite_logging
from .domain.exceptions import RecurrenceInputError, RecurrenceLiteError
from .domain.preview_session import PreviewSession

EXIT_OK = 0
EXIT_USAGE = 2

_WEEKDAY_LOOKUP = {name.lower(): index for index, name in enumerate(WEEKDAY_NAMES)}


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for recurrence_lite CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="recurrence_lite",
        description="Recurrence Lite - expand and describe recurring date rules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m recurrence_lite --type daily --interval 2 --start 2024-01-01 --end 2024-01-10
  python -m recurrence_lite --type weekly --weekdays mon,fri --start 2024-01-01 --grid
  python -m recurrence_lite --type monthly --pattern dayOfWeek --week-of-month -1 \\
      --day-of-week fri --start 2024-01-01 --all
        """,
    )

    parser.add_argument(
        "--type",
        choices=[t.value for t in RecurrenceType],
        default=RecurrenceType.DAILY.value,
        help="Recurrence frequency (default: daily)",
    )
    parser.add_argument("--interval", type=int, default=1, help="Step size (default: 1)")
    parser.add_argument(
        "--weekdays",
        metavar="DAYS",
        help="Comma-separated weekdays for weekly rules, names (mon,fri) or indices (0=Sun)",
    )
    parser.add_argument(
        "--pattern",
        choices=[p.value for p in MonthlyPattern],
        default=MonthlyPattern.DAY_OF_MONTH.value,
        help="Monthly pattern (default: dayOfMonth)",
    )
    parser.add_argument("--day-of-month", type=int, default=1, help="Day 1-31 for dayOfMonth")
    parser.add_argument(
        "--week-of-month", type=int, default=1, help="1-4, or -1 for last (dayOfWeek pattern)"
    )
    parser.add_argument(
        "--day-of-week", default="mon", help="Weekday name or index for dayOfWeek (default: mon)"
    )
    parser.add_argument("--start", metavar="DATE", help="Start date, ISO 8601 (default: today)")
    parser.add_argument("--end", metavar="DATE", help="Inclusive end date, ISO 8601")
    parser.add_argument(
        "--all", action="store_true", help="Print every occurrence instead of the preview"
    )
    parser.add_argument(
        "--grid", action="store_true", help="Print a month grid for the start month"
    )
    parser.add_argument("--config", metavar="PATH", help="YAML/JSON configuration file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    return parser


def parse_weekday(value: str) -> int:
    """Parse 'mon', 'Monday' or '1' into a Sunday-based weekday index."""
    text = value.strip().lower()
    if text.lstrip("-").isdigit():
        index = int(text)
        if 0 <= index <= 6:
            return index
        raise RecurrenceInputError(f"Weekday index out of range 0-6: {value!r}")
    index = _WEEKDAY_LOOKUP.get(text[:3])
    if index is None or not text.isalpha():
        raise RecurrenceInputError(f"Unknown weekday: {value!r}")
    return index


def parse_weekdays(value: Optional[str]) -> list[int]:
    if not value:
        return []
    return [parse_weekday(part) for part in value.split(",") if part.strip()]


def parse_date(value: str) -> date:
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError) as exc:
        raise RecurrenceInputError(f"Invalid date {value!r}; expected ISO 8601") from exc


def build_rule(args: argparse.Namespace) -> RecurrenceRule:
    return RecurrenceRule(
        type=RecurrenceType(args.type),
        interval=args.interval,
        week_days=parse_weekdays(args.weekdays),
        monthly_pattern=MonthlyPattern(args.pattern),
        day_of_month=args.day_of_month,
        week_of_month=args.week_of_month,
        day_of_week=parse_weekday(args.day_of_week),
    )


def build_range(args: argparse.Namespace) -> Optional[DateRange]:
    """Range from --start/--end; None lets the session default to today."""
    if args.start is None and args.end is None:
        return None
    if args.start is None:
        raise RecurrenceInputError("--end requires --start")
    end = parse_date(args.end) if args.end else None
    return DateRange(start_date=parse_date(args.start), end_date=end)


def render_grid(reference_month: date, occurrences: list[date]) -> str:
    """Plain-text month grid; occurrences are marked with '*'."""
    lines = [month_title(reference_month).center(28).rstrip()]
    lines.append(" ".join(f"{name[:2]:>3}" for name in WEEKDAY_NAMES))
    week: list[str] = []
    for day in build_grid(reference_month):
        if not is_within_month(day, reference_month):
            cell = "  ."
        elif is_in_sequence(day, occurrences):
            cell = f"{day.day:>2}*"
        else:
            cell = f"{day.day:>3}"
        week.append(cell)
        if len(week) == 7:
            lines.append(" ".join(week))
            week = []
    return "\n".join(lines)


def run(args: argparse.Namespace) -> int:
    """Execute the CLI for parsed args and return the exit status."""
    config = apply_env_overrides(load_config(args.config) if args.config else Config())
    _init_logging("DEBUG" if args.debug else config.log_level)
    configure_lite_logging(debug_mode=args.debug or config.log_level == "DEBUG")
    if not args.debug and config.log_level != "INFO":
        logging.getLogger().setLevel(config.log_level)

    session = PreviewSession(rule=build_rule(args), date_range=build_range(args), config=config)
    summary = session.summary()

    print(session.description)
    next_text = summary.next_occurrence.isoformat() if summary.next_occurrence else "none"
    status = f"Occurrences: {summary.count} (next: {next_text})"
    if summary.truncated:
        status += f" [truncated at {config.max_iterations} iterations]"
    print(status)

    shown = session.dates if args.all else session.preview_dates
    for day in shown:
        print(f"  {day.isoformat()} {WEEKDAY_NAMES[day.isoweekday() % 7]}")
    if not args.all and summary.count > len(shown):
        print(f"  ... {summary.count - len(shown)} more")

    if args.grid:
        print()
        print(render_grid(session.date_range.start_date, session.dates))

    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the recurrence_lite CLI."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        sys.exit(run(args))
    except RecurrenceLiteError as exc:
        print(f"recurrence_lite: error: {exc}", file=sys.stderr)
        sys.exit(EXIT_USAGE)


if __name__ == "__main__":
    main()
