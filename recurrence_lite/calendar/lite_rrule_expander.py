"""Recurrence expansion logic for Recurrence Lite.

Turns a RecurrenceRule plus a DateRange into the ordered list of occurrence
dates. Everything here is a pure function of its inputs: no clock reads,
no shared state, no I/O beyond debug logging.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from .lite_datetime_utils import (
    add_days,
    add_months,
    add_years,
    days_in_month,
    first_of_month,
    last_of_month,
    sunday_based_weekday,
)
from .lite_models import (
    LAST_WEEK_OF_MONTH,
    DateRange,
    ExpansionResult,
    MonthlyPattern,
    RecurrenceRule,
    RecurrenceType,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000
DEFAULT_HORIZON_YEARS = 2


@dataclass
class ExpanderConfig:
    """Configuration for recurrence expansion.

    max_iterations bounds the stepping loop regardless of the date limit.
    default_horizon_years is used when a range has no end date.
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    default_horizon_years: int = DEFAULT_HORIZON_YEARS

    @classmethod
    def from_settings(cls, settings: Any) -> "ExpanderConfig":
        """Extract expansion settings from a config object, falling back to defaults.

        Args:
            settings: Object with optional max_iterations / default_horizon_years

        Returns:
            ExpanderConfig with values from settings or defaults
        """
        if settings is None:
            return cls()
        return cls(
            max_iterations=getattr(settings, "max_iterations", DEFAULT_MAX_ITERATIONS),
            default_horizon_years=getattr(
                settings, "default_horizon_years", DEFAULT_HORIZON_YEARS
            ),
        )


def should_include(day: date, rule: RecurrenceRule, start_date: date) -> bool:
    """Decide whether a visited cursor position is an occurrence.

    The start date always anchors the series. Only weekly rules with a
    weekday selection filter; every other pattern is fully encoded in the
    stepping rule.
    """
    if day == start_date:
        return True

    if rule.type == RecurrenceType.WEEKLY and rule.week_days:
        return sunday_based_weekday(day) in rule.selected_week_days

    return True


def next_weekly_occurrence(cursor: date, week_days: list[int], interval: int) -> date:
    """Next selected weekday after cursor.

    Later selected days in the same week are reached without applying the
    interval; the interval only applies when wrapping to a following week.

    Args:
        cursor: Current position
        week_days: Selected weekday indices, sorted ascending
        interval: Week step applied across week boundaries
    """
    current = sunday_based_weekday(cursor)

    for day in week_days:
        if day > current:
            return add_days(cursor, day - current)

    days_to_add = (7 - current) + week_days[0] + (interval - 1) * 7
    return add_days(cursor, days_to_add)


def nth_weekday_of_month(month: date, week_of_month: int, day_of_week: int) -> date:
    """Date of the Nth (or last, for -1 and below) given weekday in month.

    Ordinals are not clamped: a fifth occurrence that does not exist lands in
    the first days of the following month.
    """
    if week_of_month <= LAST_WEEK_OF_MONTH:
        last_day = last_of_month(month)
        days_from_end = (sunday_based_weekday(last_day) - day_of_week) % 7
        return add_days(last_day, -days_from_end)

    first_day = first_of_month(month)
    days_from_start = (day_of_week - sunday_based_weekday(first_day)) % 7
    return add_days(first_day, days_from_start + (week_of_month - 1) * 7)


def next_monthly_occurrence(cursor: date, rule: RecurrenceRule) -> date:
    """Step a monthly rule forward by its interval and pin the pattern day."""
    interval = rule.effective_interval
    next_month = add_months(cursor, interval)

    if rule.monthly_pattern == MonthlyPattern.DAY_OF_MONTH:
        day_of_month = rule.effective_day_of_month
        if day_of_month is None:
            return next_month
        target_day = min(day_of_month, days_in_month(next_month.year, next_month.month))
        return next_month.replace(day=target_day)

    if not rule.week_of_month or rule.day_of_week is None:
        return next_month
    return nth_weekday_of_month(next_month, rule.week_of_month, rule.day_of_week % 7)


def next_cursor(cursor: date, rule: RecurrenceRule) -> date:
    """Advance cursor to the next candidate date for rule.type."""
    interval = rule.effective_interval

    if rule.type == RecurrenceType.DAILY:
        return add_days(cursor, interval)

    if rule.type == RecurrenceType.WEEKLY:
        week_days = rule.selected_week_days
        if week_days:
            return next_weekly_occurrence(cursor, week_days, interval)
        return add_days(cursor, 7 * interval)

    if rule.type == RecurrenceType.MONTHLY:
        return next_monthly_occurrence(cursor, rule)

    return add_years(cursor, interval)


class RecurrenceExpander:
    """Expands recurrence rules into occurrence dates.

    Holds only immutable configuration, so one instance can be shared freely.
    """

    def __init__(self, settings: Optional[Any] = None):
        """Initialize the expander.

        Args:
            settings: Optional object carrying max_iterations / default_horizon_years
        """
        config = ExpanderConfig.from_settings(settings)
        self.max_iterations = max(1, int(config.max_iterations))
        self.horizon_years = max(1, int(config.default_horizon_years))

    def effective_limit(self, date_range: DateRange) -> date:
        """Last admissible occurrence date for date_range.

        An explicit end date is inclusive. Without one the horizon day itself
        (start plus horizon_years) is excluded, so a yearly rule starting
        Jan 1 yields exactly horizon_years dates. A horizon past year 9999
        is capped at date.max.
        """
        if date_range.end_date is not None:
            return date_range.end_date
        try:
            return add_days(add_years(date_range.start_date, self.horizon_years), -1)
        except (ValueError, OverflowError):
            return date.max

    def expand_with_diagnostics(self, rule: RecurrenceRule, date_range: DateRange) -> ExpansionResult:
        """Expand rule over date_range and report how the loop ended.

        Args:
            rule: Recurrence configuration
            date_range: Bounds; end_date is inclusive, a missing end date means
                start_date plus the default horizon (exclusive)

        Returns:
            ExpansionResult with the ordered dates, the number of loop
            iterations and whether the iteration cap cut the result short
        """
        start = date_range.start_date
        limit = self.effective_limit(date_range)

        dates: list[date] = []
        cursor: Optional[date] = start
        iterations = 0

        while cursor is not None and cursor <= limit and iterations < self.max_iterations:
            iterations += 1

            if should_include(cursor, rule, start):
                dates.append(cursor)

            try:
                cursor = next_cursor(cursor, rule)
            except (ValueError, OverflowError):
                # Next step lies past date.max, so the series is exhausted
                cursor = None

        truncated = cursor is not None and cursor <= limit
        if truncated:
            logger.warning(
                "Recurrence expansion hit iteration cap (%d) before %s; returning %d dates",
                self.max_iterations,
                limit,
                len(dates),
            )

        logger.debug(
            "Expanded %s rule (interval=%r) from %s: %d dates in %d iterations",
            rule.type.value,
            rule.interval,
            start,
            len(dates),
            iterations,
        )

        return ExpansionResult(dates=dates, iterations=iterations, truncated=truncated, limit=limit)

    def expand(self, rule: RecurrenceRule, date_range: DateRange) -> list[date]:
        """Expand rule over date_range into an ascending list of dates."""
        return list(self.expand_with_diagnostics(rule, date_range).dates)


_default_expander = RecurrenceExpander()


def expand(rule: RecurrenceRule, date_range: DateRange) -> list[date]:
    """Expand rule over date_range using the default limits.

    A result cut short by the iteration cap is returned as-is; use
    expand_with_diagnostics() to tell it apart from a complete one.
    """
    return _default_expander.expand(rule, date_range)


def expand_with_diagnostics(rule: RecurrenceRule, date_range: DateRange) -> ExpansionResult:
    """Like expand(), but also reports iterations and truncation."""
    return _default_expander.expand_with_diagnostics(rule, date_range)
