"""Structured logging setup.

The engines log through ``structlog.get_logger()`` and emit one ``debug``
event per calculation step. Applications call ``configure_logging`` once at
startup to pick the level and renderer; without it structlog's defaults apply.
"""

import logging
from typing import Optional

import structlog

from .config import HomewiseConfig


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
) -> None:
    """Configure structlog with level filtering and a console or JSON renderer.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Emit one JSON object per event instead of console text.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )


def configure_logging_from(config: Optional[HomewiseConfig] = None) -> None:
    """Configure logging from a loaded ``HomewiseConfig``."""
    config = config or HomewiseConfig()
    configure_logging(level=config.log_level, json_logs=config.json_logs)


__all__ = ["configure_logging", "configure_logging_from"]
