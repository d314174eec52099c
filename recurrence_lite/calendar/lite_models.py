"""Data models for recurrence expansion - Recurrence Lite version."""

from datetime import date
from enum import Enum, IntEnum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .lite_datetime_utils import to_calendar_date


class RecurrenceType(str, Enum):
    """Supported recurrence frequencies."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class MonthlyPattern(str, Enum):
    """How a monthly rule picks its day within the month."""

    DAY_OF_MONTH = "dayOfMonth"
    DAY_OF_WEEK = "dayOfWeek"


class WeekDay(IntEnum):
    """Weekday indices, Sunday first."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6


LAST_WEEK_OF_MONTH = -1
MAX_DAY_OF_MONTH = 31


class RecurrenceRule(BaseModel):
    """Declarative recurrence configuration.

    Numeric fields are stored exactly as given. Degenerate values (interval 0,
    day_of_month 40, ...) are resolved by the expander at use time, never here,
    so an editing surface can round-trip whatever the user typed.
    """

    type: RecurrenceType = RecurrenceType.DAILY
    interval: Optional[int] = Field(default=1, description="Step size in units of type")
    week_days: tuple[int, ...] = Field(
        default_factory=tuple, description="Weekday indices (0=Sunday) for weekly rules"
    )
    monthly_pattern: MonthlyPattern = MonthlyPattern.DAY_OF_MONTH
    day_of_month: Optional[int] = Field(default=1, description="Day 1-31 for dayOfMonth")
    week_of_month: Optional[int] = Field(default=1, description="1-4, or -1 for last")
    day_of_week: Optional[int] = Field(default=int(WeekDay.MONDAY), description="Weekday for dayOfWeek")

    model_config = ConfigDict(frozen=True)

    @field_validator("week_days", mode="before")
    @classmethod
    def _coerce_week_days(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, (list, set, frozenset)):
            return tuple(value)
        return value

    @property
    def effective_interval(self) -> int:
        """Interval actually used for stepping (missing or < 1 means 1)."""
        if self.interval is None or self.interval < 1:
            return 1
        return self.interval

    @property
    def selected_week_days(self) -> list[int]:
        """Selected weekdays folded into 0..6, sorted ascending, duplicates removed."""
        return sorted({day % 7 for day in self.week_days})

    @property
    def effective_day_of_month(self) -> Optional[int]:
        """day_of_month clamped into 1..31, or None when unset."""
        if self.day_of_month is None:
            return None
        return max(1, min(self.day_of_month, MAX_DAY_OF_MONTH))


class DateRange(BaseModel):
    """Bounds for an expansion. end_date is inclusive through the end of that day."""

    start_date: date
    end_date: Optional[date] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _normalize_to_midnight(cls, value: Any) -> Any:
        if isinstance(value, (date, str)):
            return to_calendar_date(value)
        return value


class ExpansionResult(BaseModel):
    """Expanded occurrences plus loop diagnostics."""

    dates: tuple[date, ...] = Field(default_factory=tuple)
    iterations: int = 0
    truncated: bool = Field(
        default=False, description="True when the iteration cap stopped the loop early"
    )
    limit: date

    model_config = ConfigDict(frozen=True)

    @property
    def count(self) -> int:
        return len(self.dates)


class OccurrenceSummary(BaseModel):
    """Consumer-facing summary of an expanded sequence."""

    count: int = 0
    next_occurrence: Optional[date] = None
    truncated: bool = False

    model_config = ConfigDict(frozen=True)
