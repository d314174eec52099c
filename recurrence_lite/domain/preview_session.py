"""Per-consumer preview state over the pure recurrence engine.

A PreviewSession is owned by one presentation surface (form, CLI, test).
It keeps the current rule and range as immutable snapshots, recomputes the
full occurrence sequence on every change and pushes the new sequence to its
observers. There is no module-level singleton: two sessions never share
state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import Any, Optional

from recurrence_lite.calendar.lite_datetime_utils import DateLike, to_calendar_date, today
from recurrence_lite.calendar.lite_description import describe
from recurrence_lite.calendar.lite_models import (
    DateRange,
    MonthlyPattern,
    OccurrenceSummary,
    RecurrenceRule,
    RecurrenceType,
)
from recurrence_lite.calendar.lite_rrule_expander import RecurrenceExpander

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_SIZE = 10

OccurrenceObserver = Callable[[list[date]], None]


def default_rule() -> RecurrenceRule:
    """Daily, every day, dayOfMonth=1, first Monday for the weekday pattern."""
    return RecurrenceRule()


def default_range() -> DateRange:
    """Starts today, open ended."""
    return DateRange(start_date=today())


class PreviewSession:
    """Holds a rule and range and keeps their expansion current.

    Observers are called synchronously, in subscription order, after every
    recomputation, even when the new sequence equals the previous one.
    """

    def __init__(
        self,
        rule: Optional[RecurrenceRule] = None,
        date_range: Optional[DateRange] = None,
        on_change: Optional[OccurrenceObserver] = None,
        config: Optional[Any] = None,
    ):
        """Initialize the session.

        Args:
            rule: Starting rule (defaults to daily)
            date_range: Starting range (defaults to today, no end date)
            on_change: Optional observer subscribed immediately
            config: Optional settings object (max_iterations,
                default_horizon_years, preview_size)
        """
        self._expander = RecurrenceExpander(config)
        self._preview_size = max(0, int(getattr(config, "preview_size", DEFAULT_PREVIEW_SIZE)))
        self._rule = rule if rule is not None else default_rule()
        self._range = date_range if date_range is not None else default_range()
        self._dates: list[date] = []
        self._truncated = False
        self._observers: list[OccurrenceObserver] = []

        if on_change is not None:
            self.subscribe(on_change)

        self.recalculate()

    # Read-only views

    @property
    def rule(self) -> RecurrenceRule:
        return self._rule

    @property
    def date_range(self) -> DateRange:
        return self._range

    @property
    def dates(self) -> list[date]:
        """Copy of the full occurrence sequence."""
        return list(self._dates)

    @property
    def preview_dates(self) -> list[date]:
        """First preview_size occurrences, for compact display."""
        return self._dates[: self._preview_size]

    @property
    def truncated(self) -> bool:
        return self._truncated

    @property
    def description(self) -> str:
        return describe(self._rule, self._range)

    def summary(self, reference_day: Optional[DateLike] = None) -> OccurrenceSummary:
        """Count and next occurrence on or after reference_day (default today)."""
        reference = to_calendar_date(reference_day) if reference_day is not None else today()
        upcoming = next((day for day in self._dates if day >= reference), None)
        return OccurrenceSummary(
            count=len(self._dates), next_occurrence=upcoming, truncated=self._truncated
        )

    # Observers

    def subscribe(self, observer: OccurrenceObserver) -> Callable[[], None]:
        """Register observer; returns a callable that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(list(self._dates))
            except Exception:
                logger.exception("Occurrence observer %r failed", observer)

    # Recalculation

    def recalculate(self) -> list[date]:
        """Recompute the sequence from the current snapshots and notify observers."""
        result = self._expander.expand_with_diagnostics(self._rule, self._range)
        self._dates = list(result.dates)
        self._truncated = result.truncated
        logger.debug(
            "Recalculated %d occurrences for %s (truncated=%s)",
            len(self._dates),
            self._rule.type.value,
            self._truncated,
        )
        self._notify()
        return self.dates

    def update_rule(self, rule: RecurrenceRule) -> list[date]:
        self._rule = rule
        return self.recalculate()

    def update_range(self, date_range: DateRange) -> list[date]:
        self._range = date_range
        return self.recalculate()

    def _update_rule_fields(self, **changes: Any) -> list[date]:
        return self.update_rule(self._rule.model_copy(update=changes))

    # Field setters; each replaces one field and leaves the others untouched

    def set_recurrence_type(self, recurrence_type: RecurrenceType) -> list[date]:
        return self._update_rule_fields(type=RecurrenceType(recurrence_type))

    def set_interval(self, interval: Optional[int]) -> list[date]:
        return self._update_rule_fields(interval=interval)

    def set_week_days(self, week_days: list[int]) -> list[date]:
        return self._update_rule_fields(week_days=tuple(week_days or ()))

    def set_monthly_pattern(self, pattern: MonthlyPattern) -> list[date]:
        return self._update_rule_fields(monthly_pattern=MonthlyPattern(pattern))

    def set_day_of_month(self, day: Optional[int]) -> list[date]:
        return self._update_rule_fields(day_of_month=day)

    def set_week_of_month(self, week: Optional[int]) -> list[date]:
        return self._update_rule_fields(week_of_month=week)

    def set_day_of_week(self, day: Optional[int]) -> list[date]:
        return self._update_rule_fields(day_of_week=day)

    def set_start_date(self, start_date: DateLike) -> list[date]:
        return self.update_range(
            DateRange(start_date=start_date, end_date=self._range.end_date)
        )

    def set_end_date(self, end_date: Optional[DateLike]) -> list[date]:
        return self.update_range(
            DateRange(start_date=self._range.start_date, end_date=end_date)
        )

    def reset(self) -> None:
        """Restore the default rule and range and drop computed dates.

        Observers are not notified; the next change recomputes.
        """
        self._rule = default_rule()
        self._range = default_range()
        self._dates = []
        self._truncated = False
