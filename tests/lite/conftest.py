from collections.abc import Generator
from datetime import date
from types import SimpleNamespace
from typing import Any

import pytest

from recurrence_lite.calendar.lite_models import (
    DateRange,
    MonthlyPattern,
    RecurrenceRule,
    RecurrenceType,
    WeekDay,
)


def pytest_configure(config: Any) -> None:
    config.addinivalue_line("markers", "unit: fast isolated unit tests")
    config.addinivalue_line("markers", "fast: tests that complete in milliseconds")


@pytest.fixture
def simple_settings() -> SimpleNamespace:
    """Lightweight settings object used across lite tests.

    Fields:
      - max_iterations: expansion loop cap
      - default_horizon_years: horizon for open-ended ranges
      - preview_size: number of preview dates
    """
    return SimpleNamespace(max_iterations=1000, default_horizon_years=2, preview_size=10)


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Clear recurrence environment overrides before and after each test."""
    for key in (
        "RECURRENCE_TEST_DATE",
        "RECURRENCE_DEBUG",
        "RECURRENCE_LOG_LEVEL",
        "RECURRENCE_MAX_ITERATIONS",
        "RECURRENCE_PREVIEW_SIZE",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def frozen_today(monkeypatch: Any) -> date:
    """Pin today() to 2024-01-15 via RECURRENCE_TEST_DATE."""
    monkeypatch.setenv("RECURRENCE_TEST_DATE", "2024-01-15")
    return date(2024, 1, 15)


@pytest.fixture
def january_2024() -> DateRange:
    """Jan 1 - Jan 31 2024 (Jan 1 2024 is a Monday)."""
    return DateRange(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))


@pytest.fixture
def weekly_mon_fri_rule() -> RecurrenceRule:
    return RecurrenceRule(
        type=RecurrenceType.WEEKLY, interval=1, week_days=[WeekDay.MONDAY, WeekDay.FRIDAY]
    )


@pytest.fixture
def second_monday_rule() -> RecurrenceRule:
    return RecurrenceRule(
        type=RecurrenceType.MONTHLY,
        interval=1,
        monthly_pattern=MonthlyPattern.DAY_OF_WEEK,
        week_of_month=2,
        day_of_week=WeekDay.MONDAY,
    )
