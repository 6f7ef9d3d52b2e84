"""
Structured logging setup built on structlog.

Usage:
    from opflow.core.logging import get_logger, setup_logging

    setup_logging("DEBUG")   # once, at application startup

    logger = get_logger(__name__)
    logger.info("Transaction declared", steps=4)
"""

from __future__ import annotations

import logging

import structlog

from opflow.core.config import settings


def setup_logging(level: str | None = None, json: bool | None = None) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Log level name.  Defaults to ``settings.LOG_LEVEL``.
        json: Render JSON lines instead of the console format.
              Defaults to ``settings.LOG_JSON``.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    use_json = settings.LOG_JSON if json is None else json
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Return a structlog logger named after the calling module."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)
