"""
Central logging configuration for recurrence_lite.

Keeps the engine's own loggers at INFO (or DEBUG when troubleshooting) and
quiets third-party libraries that would otherwise flood debug output.
"""

import logging
import os
from typing import Optional

# Loggers quieted regardless of debug mode
_SUPPRESSED_LOGGERS: dict[str, int] = {
    "dateutil": logging.WARNING,
    "yaml": logging.WARNING,
}

LITE_MODULES = [
    "recurrence_lite",
    "recurrence_lite.calendar.lite_rrule_expander",
    "recurrence_lite.calendar.lite_datetime_utils",
    "recurrence_lite.domain.preview_session",
    "recurrence_lite.core.config_loader",
]

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


def configure_lite_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging levels for recurrence_lite.

    Args:
        debug_mode: Whether to enable debug logging for recurrence_lite modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        RECURRENCE_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        RECURRENCE_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR);
            DEBUG also enables debug logging for recurrence_lite modules
    """
    env_debug = os.getenv("RECURRENCE_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("RECURRENCE_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug or env_log_level == "DEBUG":
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
        root_level = getattr(logging, env_log_level)

    # Keep handlers installed by recurrence_lite._init_logging (colorized console)
    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setLevel(root_level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    logger_config = dict(_SUPPRESSED_LOGGERS)
    lite_level = logging.DEBUG if final_debug else logging.INFO
    for module in LITE_MODULES:
        logger_config[module] = lite_level

    for logger_name, level in logger_config.items():
        logging.getLogger(logger_name).setLevel(level)

    if final_debug:
        root_logger.info("Debug logging enabled for recurrence_lite modules.")
    else:
        root_logger.debug("Production logging configuration applied.")


def reset_logging_to_debug() -> None:
    """
    Reset all loggers to DEBUG level for troubleshooting.
    """
    logging.getLogger().setLevel(logging.DEBUG)

    for logger_name in list(_SUPPRESSED_LOGGERS) + LITE_MODULES:
        logging.getLogger(logger_name).setLevel(logging.DEBUG)

    logging.getLogger().info("All loggers reset to DEBUG level for troubleshooting")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for logger_name in ["recurrence_lite", "dateutil", "yaml"]:
        status[logger_name] = logging.getLevelName(logging.getLogger(logger_name).level)

    return status
