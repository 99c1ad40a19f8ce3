"""Structured logging configuration using structlog."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.types import Processor

from src.lib.config import get_settings
from src.lib.log_taxonomy import MarkerFilter

# Configure once flag
_configured = False

# Channel receiving every spy event
SPY_CHANNEL = "spylog.jdbc"
# Channel for diagnostics about spylog itself (setup, admin, etc.)
DEBUG_CHANNEL = "spylog.debug"


def configured_marker_filter() -> MarkerFilter:
    """Marker filter following the current `disabled_markers` setting."""
    return MarkerFilter(provider=lambda: get_settings().disabled_markers)


def _configure_structlog() -> None:
    """Configure structlog for the application."""
    global _configured
    if _configured:
        return

    settings = get_settings()
    log_level = logging.getLevelName(settings.log_level)

    # Configure root logger with handlers
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Console handler (stderr)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.NOTSET)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    # File handler with rotation (JSON format for log analysis)
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.log_file,
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.NOTSET)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)

    # The two spylog channels are levelled independently
    logging.getLogger(SPY_CHANNEL).setLevel(log_level)
    logging.getLogger(DEBUG_CHANNEL).setLevel(logging.getLevelName(settings.debug_log_level))

    # In development, use colored console output
    # In production, use JSON output
    is_development = sys.stderr.isatty()

    # Common processors for all environments
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        configured_marker_filter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if is_development:
        # Development: colored console output
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        # Production: JSON output
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _configured = True


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ or one of the spylog channels)
        **initial_context: Initial context values to bind to the logger

    Returns:
        Bound structlog logger

    Example:
        >>> logger = get_logger(SPY_CHANNEL)
        >>> logger.info("sql_timing", marker="select", exec_time_ms=12)
    """
    _configure_structlog()

    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)

    if initial_context:
        logger = logger.bind(**initial_context)

    return logger


def configure_logging() -> None:
    """
    Configure structured logging for the application.

    Safe to call multiple times (idempotent).
    """
    _configure_structlog()


__all__ = [
    "SPY_CHANNEL",
    "DEBUG_CHANNEL",
    "get_logger",
    "configured_marker_filter",
    "configure_logging",
]
