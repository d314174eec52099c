"""
Unit tests for recurrence_lite.calendar.lite_rrule_expander.

Covers:
- expand() for every recurrence type and monthly pattern
- stepping helpers (weekly wrap, nth/last weekday of month)
- horizon, iteration cap and truncation diagnostics
- ordering/bounding/anchor properties across a table of rules
"""
from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from recurrence_lite.calendar.lite_models import (
    DateRange,
    MonthlyPattern,
    RecurrenceRule,
    RecurrenceType,
    WeekDay,
)
from recurrence_lite.calendar.lite_rrule_expander import (
    ExpanderConfig,
    RecurrenceExpander,
    expand,
    expand_with_diagnostics,
    next_cursor,
    next_weekly_occurrence,
    nth_weekday_of_month,
    should_include,
)

pytestmark = pytest.mark.unit


def _range(start: date, end: date = None) -> DateRange:
    return DateRange(start_date=start, end_date=end)


class TestDailyAndYearly:
    """Daily and yearly stepping."""

    def test_daily_interval_two(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.DAILY, interval=2)
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 1, 10)))
        assert dates == [date(2024, 1, d) for d in (1, 3, 5, 7, 9)]

    def test_end_date_is_inclusive(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.DAILY)
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 1, 5)))
        assert len(dates) == 5
        assert dates[-1] == date(2024, 1, 5)

    def test_yearly_with_end_date(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.YEARLY, interval=1)
        dates = expand(rule, _range(date(2024, 1, 15), date(2026, 12, 31)))
        assert dates == [date(2024, 1, 15), date(2025, 1, 15), date(2026, 1, 15)]

    def test_yearly_without_end_date_uses_two_year_horizon(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.YEARLY, interval=1)
        dates = expand(rule, _range(date(2024, 1, 1)))
        assert dates == [date(2024, 1, 1), date(2025, 1, 1)]

    def test_yearly_leap_day_clamps_to_feb_28(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.YEARLY)
        dates = expand(rule, _range(date(2024, 2, 29), date(2028, 12, 31)))
        assert dates == [
            date(2024, 2, 29),
            date(2025, 2, 28),
            date(2026, 2, 28),
            date(2027, 2, 28),
            date(2028, 2, 28),
        ]

    def test_daily_without_end_date_stays_under_cap(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.DAILY)
        result = expand_with_diagnostics(rule, _range(date(2024, 1, 1)))
        assert len(result.dates) <= 1000
        # 2024-01-01 .. 2025-12-31
        assert len(result.dates) == 731
        assert result.truncated is False
        assert result.limit == date(2025, 12, 31)


class TestWeekly:
    """Weekly stepping with and without a weekday selection."""

    def test_monday_friday_selection(self, weekly_mon_fri_rule: RecurrenceRule) -> None:
        dates = expand(weekly_mon_fri_rule, _range(date(2024, 1, 1), date(2024, 1, 15)))
        assert dates == [date(2024, 1, d) for d in (1, 5, 8, 12, 15)]
        assert all(d.isoweekday() % 7 in (1, 5) for d in dates)

    def test_interval_applies_only_across_week_boundaries(self) -> None:
        rule = RecurrenceRule(
            type=RecurrenceType.WEEKLY,
            interval=2,
            week_days=[WeekDay.MONDAY, WeekDay.WEDNESDAY],
        )
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 1, 31)))
        assert dates == [date(2024, 1, d) for d in (1, 3, 15, 17, 29, 31)]

    def test_start_on_unselected_day_is_still_anchored(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.WEEKLY, week_days=[WeekDay.MONDAY])
        dates = expand(rule, _range(date(2024, 1, 3), date(2024, 1, 31)))
        assert dates == [date(2024, 1, d) for d in (3, 8, 15, 22, 29)]

    def test_no_selection_steps_whole_weeks(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.WEEKLY, interval=2)
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 2, 1)))
        assert dates == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]

    def test_unsorted_selection_is_sorted(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.WEEKLY, week_days=[5, 1, 5])
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 1, 12)))
        assert dates == [date(2024, 1, d) for d in (1, 5, 8, 12)]

    @pytest.mark.parametrize(
        "cursor,week_days,interval,expected",
        [
            # Monday -> Friday, same week
            (date(2024, 1, 1), [1, 5], 1, date(2024, 1, 5)),
            # Friday -> next Monday
            (date(2024, 1, 5), [1, 5], 1, date(2024, 1, 8)),
            # Friday -> Monday two weeks ahead
            (date(2024, 1, 5), [1, 5], 2, date(2024, 1, 15)),
            # Saturday -> Sunday of next week
            (date(2024, 1, 6), [0], 1, date(2024, 1, 7)),
        ],
    )
    def test_next_weekly_occurrence(
        self, cursor: date, week_days: list, interval: int, expected: date
    ) -> None:
        assert next_weekly_occurrence(cursor, week_days, interval) == expected


class TestMonthlyDayOfMonth:
    """Monthly rules pinned to a day number."""

    def test_fifteenth_of_each_month(self) -> None:
        rule = RecurrenceRule(
            type=RecurrenceType.MONTHLY,
            monthly_pattern=MonthlyPattern.DAY_OF_MONTH,
            day_of_month=15,
        )
        dates = expand(rule, _range(date(2024, 1, 15), date(2024, 4, 30)))
        assert dates == [date(2024, m, 15) for m in (1, 2, 3, 4)]

    def test_day_31_clamps_to_month_length(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.MONTHLY, day_of_month=31)
        dates = expand(rule, _range(date(2024, 1, 31), date(2024, 5, 31)))
        assert dates == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
            date(2024, 5, 31),
        ]

    @pytest.mark.parametrize("day_of_month,expected_day", [(0, 1), (-5, 1), (45, 31)])
    def test_out_of_range_day_is_clamped(self, day_of_month: int, expected_day: int) -> None:
        rule = RecurrenceRule(type=RecurrenceType.MONTHLY, day_of_month=day_of_month)
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 3, 31)))
        assert dates[0] == date(2024, 1, 1)
        assert dates[1] == date(2024, 2, min(expected_day, 29))
        assert dates[2] == date(2024, 3, expected_day)
        # Stored value is left untouched
        assert rule.day_of_month == day_of_month

    def test_interval_two_months(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.MONTHLY, interval=2, day_of_month=10)
        dates = expand(rule, _range(date(2024, 1, 10), date(2024, 12, 31)))
        assert dates == [date(2024, m, 10) for m in (1, 3, 5, 7, 9, 11)]


class TestMonthlyDayOfWeek:
    """Monthly rules on the Nth or last weekday."""

    def test_second_monday(self, second_monday_rule: RecurrenceRule) -> None:
        dates = expand(second_monday_rule, _range(date(2024, 1, 1), date(2024, 3, 31)))
        assert dates == [date(2024, 1, 1), date(2024, 2, 12), date(2024, 3, 11)]
        assert all(d.isoweekday() % 7 == WeekDay.MONDAY for d in dates)

    def test_last_friday(self) -> None:
        rule = RecurrenceRule(
            type=RecurrenceType.MONTHLY,
            monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
            week_of_month=-1,
            day_of_week=WeekDay.FRIDAY,
        )
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 4, 30)))
        assert dates == [
            date(2024, 1, 1),
            date(2024, 2, 23),
            date(2024, 3, 29),
            date(2024, 4, 26),
        ]

    def test_missing_ordinal_overflows_into_next_month(self) -> None:
        rule = RecurrenceRule(
            type=RecurrenceType.MONTHLY,
            monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
            week_of_month=5,
            day_of_week=WeekDay.MONDAY,
        )
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 3, 31)))
        # February 2024 has four Mondays; the "fifth" lands on March 4
        assert dates == [date(2024, 1, 1), date(2024, 3, 4)]

    @pytest.mark.parametrize(
        "month,week,weekday,expected",
        [
            (date(2024, 2, 1), 1, WeekDay.MONDAY, date(2024, 2, 5)),
            (date(2024, 2, 20), 4, WeekDay.THURSDAY, date(2024, 2, 22)),
            (date(2024, 2, 1), -1, WeekDay.THURSDAY, date(2024, 2, 29)),
            (date(2024, 3, 1), -1, WeekDay.SUNDAY, date(2024, 3, 31)),
            (date(2024, 9, 1), 1, WeekDay.SUNDAY, date(2024, 9, 1)),
        ],
    )
    def test_nth_weekday_of_month(
        self, month: date, week: int, weekday: int, expected: date
    ) -> None:
        assert nth_weekday_of_month(month, week, weekday) == expected


class TestDegenerateInput:
    """Clamping and defaults instead of errors."""

    @pytest.mark.parametrize("interval", [0, -3, None])
    def test_non_positive_or_missing_interval_means_one(self, interval) -> None:
        rule = RecurrenceRule(type=RecurrenceType.DAILY, interval=interval)
        dates = expand(rule, _range(date(2024, 1, 1), date(2024, 1, 5)))
        assert dates == [date(2024, 1, d) for d in range(1, 6)]
        assert rule.interval == interval

    def test_irrelevant_fields_do_not_affect_output(self) -> None:
        plain = RecurrenceRule(type=RecurrenceType.DAILY, interval=3)
        noisy = RecurrenceRule(
            type=RecurrenceType.DAILY,
            interval=3,
            week_days=[2, 4],
            monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
            day_of_month=0,
            week_of_month=-1,
            day_of_week=6,
        )
        date_range = _range(date(2024, 1, 1), date(2024, 2, 1))
        assert expand(noisy, date_range) == expand(plain, date_range)
        assert noisy.week_days == (2, 4)

    def test_start_after_end_yields_empty_sequence(self) -> None:
        rule = RecurrenceRule()
        assert expand(rule, _range(date(2024, 2, 1), date(2024, 1, 1))) == []

    def test_datetime_inputs_are_normalized_to_midnight(self) -> None:
        date_range = DateRange(
            start_date=datetime(2024, 1, 1, 15, 30), end_date=datetime(2024, 1, 3, 0, 0)
        )
        assert date_range.start_date == date(2024, 1, 1)
        assert expand(RecurrenceRule(), date_range) == [
            date(2024, 1, 1),
            date(2024, 1, 2),
            date(2024, 1, 3),
        ]

    def test_yearly_step_past_year_9999_ends_series(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.YEARLY, interval=10000)
        result = expand_with_diagnostics(rule, _range(date(2024, 1, 1), date(2026, 1, 1)))
        assert list(result.dates) == [date(2024, 1, 1)]
        assert result.truncated is False

    def test_daily_step_past_date_max_ends_series(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.DAILY, interval=5)
        assert expand(rule, _range(date(9999, 12, 30), date(9999, 12, 31))) == [
            date(9999, 12, 30)
        ]

    @pytest.mark.parametrize(
        "rule",
        [
            RecurrenceRule(type=RecurrenceType.WEEKLY, week_days=[WeekDay.FRIDAY]),
            RecurrenceRule(
                type=RecurrenceType.MONTHLY,
                monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
                week_of_month=4,
                day_of_week=WeekDay.SUNDAY,
            ),
        ],
    )
    def test_other_steps_near_date_max_do_not_raise(self, rule: RecurrenceRule) -> None:
        dates = expand(rule, _range(date(9999, 12, 1), date.max))
        assert dates[0] == date(9999, 12, 1)
        assert dates[-1] <= date.max

    def test_horizon_past_year_9999_is_capped(self) -> None:
        date_range = _range(date(9998, 6, 1))
        assert RecurrenceExpander().effective_limit(date_range) == date.max
        result = expand_with_diagnostics(RecurrenceRule(type=RecurrenceType.DAILY), date_range)
        # Jun 1 9998 through Dec 31 9999
        assert len(result.dates) == 579
        assert result.dates[-1] == date.max
        assert result.truncated is False


class TestIterationCap:
    """The loop cap silently truncates; diagnostics expose it."""

    def test_default_cap_is_one_thousand(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.DAILY)
        date_range = _range(date(2024, 1, 1), date(2030, 12, 31))
        dates = expand(rule, date_range)
        assert len(dates) == 1000
        assert dates[-1] == date(2024, 1, 1) + timedelta(days=999)
        assert expand_with_diagnostics(rule, date_range).truncated is True

    def test_configured_cap(self) -> None:
        expander = RecurrenceExpander(SimpleNamespace(max_iterations=100, default_horizon_years=2))
        result = expander.expand_with_diagnostics(RecurrenceRule(), _range(date(2024, 1, 1)))
        assert len(result.dates) == 100
        assert result.iterations == 100
        assert result.truncated is True

    def test_exact_fit_is_not_truncated(self) -> None:
        expander = RecurrenceExpander(SimpleNamespace(max_iterations=5))
        result = expander.expand_with_diagnostics(
            RecurrenceRule(), _range(date(2024, 1, 1), date(2024, 1, 5))
        )
        assert len(result.dates) == 5
        assert result.truncated is False

    def test_truncation_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        expander = RecurrenceExpander(SimpleNamespace(max_iterations=3))
        with caplog.at_level("WARNING"):
            expander.expand(RecurrenceRule(), _range(date(2024, 1, 1)))
        assert "iteration cap" in caplog.text


class TestExpanderConfig:
    def test_from_settings_none_uses_defaults(self) -> None:
        config = ExpanderConfig.from_settings(None)
        assert config.max_iterations == 1000
        assert config.default_horizon_years == 2

    def test_from_settings_reads_attributes(self, simple_settings: SimpleNamespace) -> None:
        simple_settings.max_iterations = 50
        config = ExpanderConfig.from_settings(simple_settings)
        assert config.max_iterations == 50

    def test_custom_horizon(self) -> None:
        expander = RecurrenceExpander(SimpleNamespace(default_horizon_years=5))
        dates = expander.expand(RecurrenceRule(type=RecurrenceType.YEARLY), _range(date(2024, 1, 1)))
        assert len(dates) == 5


class TestHelpers:
    def test_should_include_always_keeps_start(self) -> None:
        rule = RecurrenceRule(type=RecurrenceType.WEEKLY, week_days=[WeekDay.MONDAY])
        start = date(2024, 1, 3)  # Wednesday
        assert should_include(start, rule, start) is True
        assert should_include(date(2024, 1, 10), rule, start) is False
        assert should_include(date(2024, 1, 8), rule, start) is True

    @pytest.mark.parametrize("rule_type", list(RecurrenceType))
    def test_next_cursor_always_advances(self, rule_type: RecurrenceType) -> None:
        rule = RecurrenceRule(type=rule_type, interval=0, week_days=[0, 6], day_of_month=1)
        cursor = date(2024, 1, 31)
        for _ in range(50):
            following = next_cursor(cursor, rule)
            assert following > cursor
            cursor = following


_PROPERTY_RULES = [
    RecurrenceRule(type=RecurrenceType.DAILY, interval=1),
    RecurrenceRule(type=RecurrenceType.DAILY, interval=7),
    RecurrenceRule(type=RecurrenceType.WEEKLY, week_days=[0, 3, 6]),
    RecurrenceRule(type=RecurrenceType.WEEKLY, interval=3, week_days=[2]),
    RecurrenceRule(type=RecurrenceType.WEEKLY, interval=2),
    RecurrenceRule(type=RecurrenceType.MONTHLY, day_of_month=31),
    RecurrenceRule(
        type=RecurrenceType.MONTHLY,
        monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
        week_of_month=-1,
        day_of_week=0,
    ),
    RecurrenceRule(
        type=RecurrenceType.MONTHLY,
        interval=3,
        monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
        week_of_month=4,
        day_of_week=2,
    ),
    RecurrenceRule(type=RecurrenceType.YEARLY, interval=1),
]

_PROPERTY_RANGES = [
    DateRange(start_date=date(2024, 1, 31)),
    DateRange(start_date=date(2023, 6, 15), end_date=date(2024, 3, 1)),
    DateRange(start_date=date(2024, 2, 29), end_date=date(2024, 2, 29)),
]


@pytest.mark.parametrize("rule", _PROPERTY_RULES)
@pytest.mark.parametrize("date_range", _PROPERTY_RANGES)
def test_sequence_properties(rule: RecurrenceRule, date_range: DateRange) -> None:
    """Ascending, unique, bounded, anchored, capped and repeatable."""
    result = expand_with_diagnostics(rule, date_range)
    dates = list(result.dates)

    assert dates, "start date must always be returned"
    assert dates[0] == date_range.start_date
    assert all(earlier < later for earlier, later in zip(dates, dates[1:]))
    assert all(date_range.start_date <= d <= result.limit for d in dates)
    if date_range.end_date is not None:
        assert result.limit == date_range.end_date
    assert len(dates) <= 1000
    assert expand(rule, date_range) == dates


def test_returned_list_is_a_fresh_snapshot() -> None:
    rule = RecurrenceRule()
    date_range = _range(date(2024, 1, 1), date(2024, 1, 3))
    first = expand(rule, date_range)
    first.clear()
    assert len(expand(rule, date_range)) == 3
