"""recurrence_lite.core.config_loader

Lightweight config loader for recurrence_lite.

- Reads YAML through PyYAML (JSON files load too, JSON being a YAML subset).
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
- `apply_env_overrides()` layers RECURRENCE_* environment variables on top.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from recurrence_lite.calendar.lite_rrule_expander import (
    DEFAULT_HORIZON_YEARS,
    DEFAULT_MAX_ITERATIONS,
)
from recurrence_lite.domain.exceptions import RecurrenceConfigError
from recurrence_lite.domain.preview_session import DEFAULT_PREVIEW_SIZE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("recurrence_lite") / "config.yaml"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Typed configuration for recurrence_lite.

    Fields:
        max_iterations: hard cap on expansion loop iterations (>= 1)
        default_horizon_years: horizon used when a range has no end date (>= 1)
        preview_size: number of dates in the preview view (>= 1)
        log_level: logging level name
    """

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    default_horizon_years: int = DEFAULT_HORIZON_YEARS
    preview_size: int = DEFAULT_PREVIEW_SIZE
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int; values that cannot be coerced
        fall back to the default and values below 1 are raised to 1, each with
        a warning. Unknown keys are ignored.
        """
        if data is None:
            data = {}

        def _coerce_positive_int(key: str, default: int) -> int:
            raw = data.get(key, default)
            try:
                value = int(raw)
            except (TypeError, ValueError):
                logger.warning("Config %s=%r is not an int; using default %d", key, raw, default)
                return default
            if value < 1:
                logger.warning("Config %s=%d below minimum; coercing to 1", key, value)
                return 1
            return value

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"
        if log_level not in _VALID_LOG_LEVELS:
            logger.warning("Config log_level=%r is not a known level; using INFO", log_level)
            log_level = "INFO"

        return cls(
            max_iterations=_coerce_positive_int("max_iterations", DEFAULT_MAX_ITERATIONS),
            default_horizon_years=_coerce_positive_int(
                "default_horizon_years", DEFAULT_HORIZON_YEARS
            ),
            preview_size=_coerce_positive_int("preview_size", DEFAULT_PREVIEW_SIZE),
            log_level=log_level,
        )


def apply_env_overrides(config: Config) -> Config:
    """Return a copy of config with RECURRENCE_* environment overrides applied.

    Recognizes:
    - RECURRENCE_MAX_ITERATIONS -> max_iterations
    - RECURRENCE_PREVIEW_SIZE -> preview_size
    - RECURRENCE_LOG_LEVEL -> log_level
    """
    env_map = {
        "RECURRENCE_MAX_ITERATIONS": "max_iterations",
        "RECURRENCE_PREVIEW_SIZE": "preview_size",
        "RECURRENCE_LOG_LEVEL": "log_level",
    }
    overrides: dict[str, Any] = {
        field: os.environ[env_key] for env_key, field in env_map.items() if os.environ.get(env_key)
    }
    if not overrides:
        return config

    logger.debug("Applying environment overrides for: %s", ", ".join(sorted(overrides)))
    merged = {
        "max_iterations": config.max_iterations,
        "default_horizon_years": config.default_horizon_years,
        "preview_size": config.preview_size,
        "log_level": config.log_level,
    }
    merged.update(overrides)
    return Config.from_dict(merged)


def _load_yaml(path: Path) -> Any:
    """Load a YAML (or JSON) document, mapping parse failures to RecurrenceConfigError."""
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise RecurrenceConfigError(f"Unable to parse config file {path}: {exc}") from exc
    # safe_load returns None for empty files
    if loaded is None:
        return {}
    return loaded


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a YAML/JSON file and return a Config instance.

    Args:
        path: Optional path to the config file. If not provided the default is
              ./recurrence_lite/config.yaml (relative to current working dir).

    Returns:
        Config dataclass instance with values from file (or defaults).

    Behavior:
    - If file is missing: returns Config() with defaults.
    - If file exists but top-level is not a mapping: raises RecurrenceConfigError.
    - If the file is not valid YAML: raises RecurrenceConfigError.
    """
    p = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_PATH
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config()

    raw = _load_yaml(p)
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise RecurrenceConfigError("Config file must contain a mapping at top level")
    cfg = Config.from_dict(raw)
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg
