"""Month grid and date membership helpers for calendar display surfaces."""

from collections.abc import Iterable
from datetime import date

from .lite_datetime_utils import (
    DateLike,
    add_days,
    add_months,
    first_of_month,
    start_of_week,
    to_calendar_date,
    today,
)
from .lite_description import MONTH_NAMES

GRID_WEEKS = 6
GRID_SIZE = GRID_WEEKS * 7


def build_grid(reference_month: DateLike) -> list[date]:
    """Return the 42 days (6 weeks) shown for reference_month.

    The grid starts on the Sunday on or before the 1st of the month, so it
    usually includes trailing days of the previous month and leading days of
    the next one.
    """
    grid_start = start_of_week(first_of_month(reference_month))
    return [add_days(grid_start, offset) for offset in range(GRID_SIZE)]


def is_same_calendar_day(a: DateLike, b: DateLike) -> bool:
    return to_calendar_date(a) == to_calendar_date(b)


def is_in_sequence(day: DateLike, sequence: Iterable[DateLike]) -> bool:
    """True if day matches any entry of sequence (linear scan)."""
    target = to_calendar_date(day)
    return any(to_calendar_date(item) == target for item in sequence)


def is_within_month(day: DateLike, reference_month: DateLike) -> bool:
    return day.year == reference_month.year and day.month == reference_month.month


def is_today(day: DateLike) -> bool:
    return to_calendar_date(day) == today()


def next_month(reference_month: DateLike) -> date:
    """First day of the month after reference_month."""
    return add_months(first_of_month(reference_month), 1)


def previous_month(reference_month: DateLike) -> date:
    """First day of the month before reference_month."""
    return add_months(first_of_month(reference_month), -1)


def month_title(reference_month: DateLike) -> str:
    """Grid heading such as 'January 2024'."""
    return f"{MONTH_NAMES[reference_month.month - 1]} {reference_month.year}"
