"""Calendar-date arithmetic helpers for Recurrence Lite.

All helpers operate on naive calendar dates. Anything carrying a time of day
is truncated to midnight first, so callers can pass either ``date`` or
``datetime`` values.
"""

import calendar
import logging
import os
from datetime import date, datetime, timedelta
from typing import Union

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

TEST_DATE_ENV = "RECURRENCE_TEST_DATE"


def to_calendar_date(value: Union[DateLike, str]) -> date:
    """Truncate a date, datetime or ISO 8601 string to a plain calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return date_parser.isoparse(value.strip()).date()
    return value


def today() -> date:
    """Return today's date.

    Can be overridden for testing via the RECURRENCE_TEST_DATE environment
    variable (any ISO 8601 date or datetime, e.g. "2024-01-15").
    """
    test_date = os.environ.get(TEST_DATE_ENV)
    if test_date:
        try:
            return date_parser.isoparse(test_date).date()
        except (ValueError, OverflowError) as e:
            logger.warning("Failed to parse %s=%r: %s", TEST_DATE_ENV, test_date, e)
    return date.today()


def sunday_based_weekday(value: DateLike) -> int:
    """Weekday index with Sunday=0 .. Saturday=6."""
    return value.isoweekday() % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_of_month(value: DateLike) -> date:
    return date(value.year, value.month, 1)


def last_of_month(value: DateLike) -> date:
    return date(value.year, value.month, days_in_month(value.year, value.month))


def add_days(value: DateLike, days: int) -> date:
    return to_calendar_date(value) + timedelta(days=days)


def add_months(value: DateLike, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length.

    Jan 31 + 1 month is Feb 29 in a leap year, Feb 28 otherwise.
    """
    return to_calendar_date(value) + relativedelta(months=months)


def add_years(value: DateLike, years: int) -> date:
    """Add calendar years; Feb 29 lands on Feb 28 in a non-leap target year."""
    return to_calendar_date(value) + relativedelta(years=years)


def start_of_week(value: DateLike) -> date:
    """Sunday on or before the given date."""
    return add_days(value, -sunday_based_weekday(value))
