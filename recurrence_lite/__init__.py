"""recurrence_lite - recurrence rule expansion and description engine.

Expands a declarative recurrence rule plus a date range into the ordered list
of occurrence dates, describes the rule in English, and builds the month grid
a calendar surface decorates with those dates.
"""

__version__ = "0.1.0"

from typing import Optional

from .calendar.lite_calendar_grid import (
    build_grid,
    is_in_sequence,
    is_same_calendar_day,
    is_today,
    is_within_month,
    next_month,
    previous_month,
)
from .calendar.lite_description import describe
from .calendar.lite_models import (
    DateRange,
    ExpansionResult,
    MonthlyPattern,
    OccurrenceSummary,
    RecurrenceRule,
    RecurrenceType,
    WeekDay,
)
from .calendar.lite_rrule_expander import RecurrenceExpander, expand, expand_with_diagnostics
from .domain.preview_session import PreviewSession

__all__ = [
    "DateRange",
    "ExpansionResult",
    "MonthlyPattern",
    "OccurrenceSummary",
    "PreviewSession",
    "RecurrenceExpander",
    "RecurrenceRule",
    "RecurrenceType",
    "WeekDay",
    "build_grid",
    "describe",
    "expand",
    "expand_with_diagnostics",
    "is_in_sequence",
    "is_same_calendar_day",
    "is_today",
    "is_within_month",
    "next_month",
    "previous_month",
]


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Installs a colorized stderr handler (only if the root logger has none)
    and sets the root level. The RECURRENCE_DEBUG environment variable
    (truthy values: "1", "true", "yes", "on") forces DEBUG verbosity.
    """
    import logging
    import os
    import sys

    from colorlog import ColoredFormatter

    debug_env = os.environ.get("RECURRENCE_DEBUG", "")
    if debug_env.strip().lower() in ("1", "true", "yes", "on"):
        level_name = "DEBUG"

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   logger.name: message, only the level colorized
        fmt = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)

    level = logging.INFO
    if isinstance(level_name, str):
        level = getattr(logging, level_name.upper(), logging.INFO)
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )
