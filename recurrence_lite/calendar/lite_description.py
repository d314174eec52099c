"""Human-readable descriptions of recurrence rules - Recurrence Lite.

describe() renders a rule and its range as one English sentence, e.g.
"Every 2 weeks on Mon, Fri, starting Jan 01, 2024 until Mar 31, 2024".
"""

from datetime import date

from .lite_models import (
    LAST_WEEK_OF_MONTH,
    DateRange,
    MonthlyPattern,
    RecurrenceRule,
    RecurrenceType,
)

WEEKDAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
WEEKDAY_FULL_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

_ORDINAL_NAMES = {1: "first", 2: "second", 3: "third", 4: "fourth"}

# (singular, plural) unit names per recurrence type
_UNITS = {
    RecurrenceType.DAILY: ("day", "days"),
    RecurrenceType.WEEKLY: ("week", "weeks"),
    RecurrenceType.MONTHLY: ("month", "months"),
    RecurrenceType.YEARLY: ("year", "years"),
}


def ordinal_suffix(number: int) -> str:
    """English ordinal suffix: 1 -> "st", 12 -> "th", 22 -> "nd"."""
    if 11 <= number % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def ordinal_name(week_of_month: int) -> str:
    """Ordinal word for a week-of-month; anything outside 1-4 reads as "last"."""
    return _ORDINAL_NAMES.get(week_of_month, "last")


def format_display_date(value: date) -> str:
    """Format as 'Mon DD, YYYY' (e.g. 'Jan 01, 2024')."""
    return f"{MONTH_NAMES[value.month - 1][:3]} {value.day:02d}, {value.year}"


def _frequency_clause(rule: RecurrenceRule) -> str:
    singular, plural = _UNITS[rule.type]
    interval = rule.effective_interval
    if interval == 1:
        return f"Every {singular}"
    return f"Every {interval} {plural}"


def _pattern_clause(rule: RecurrenceRule) -> str:
    if rule.type == RecurrenceType.WEEKLY:
        week_days = rule.selected_week_days
        if not week_days:
            return ""
        names = ", ".join(WEEKDAY_NAMES[day] for day in week_days)
        return f" on {names}"

    if rule.type != RecurrenceType.MONTHLY:
        return ""

    if rule.monthly_pattern == MonthlyPattern.DAY_OF_MONTH:
        day = rule.effective_day_of_month
        if day is None:
            return ""
        return f" on the {day}{ordinal_suffix(day)}"

    if rule.day_of_week is None:
        return ""
    week = rule.week_of_month if rule.week_of_month is not None else LAST_WEEK_OF_MONTH
    return f" on the {ordinal_name(week)} {WEEKDAY_FULL_NAMES[rule.day_of_week % 7]}"


def describe(rule: RecurrenceRule, date_range: DateRange) -> str:
    """Describe rule and date_range as a sentence.

    Always returns non-empty text, whatever degenerate values the rule holds.
    """
    description = _frequency_clause(rule) + _pattern_clause(rule)
    description += f", starting {format_display_date(date_range.start_date)}"

    if date_range.end_date is not None:
        description += f" until {format_display_date(date_range.end_date)}"

    return description
