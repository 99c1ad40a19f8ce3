"""Logging backend used by the spy delegator.

Wraps a structlog logger for one named channel and exposes the leveled log
calls and the cheap level checks the delegator needs before building a
message.
"""

import logging
from functools import lru_cache

import structlog

from src.lib.log_taxonomy import LogSeverity, MarkerFilter, SpyMarker, severity_to_level
from src.lib.logging import DEBUG_CHANNEL, SPY_CHANNEL, configured_marker_filter, get_logger
from src.models.messages import SpyMessage

# structlog method used for each severity
_SEVERITY_METHODS = {
    LogSeverity.ERROR: "error",
    LogSeverity.WARN: "warning",
    LogSeverity.INFO: "info",
    LogSeverity.DEBUG: "debug",
}


class SpyLogBackend:
    """Leveled, marker-aware logging for one channel."""

    def __init__(
        self,
        channel: str,
        logger: structlog.stdlib.BoundLogger | None = None,
        marker_filter: MarkerFilter | None = None,
    ):
        """
        Initialize the backend.

        Args:
            channel: Logger name of the channel
            logger: Bound logger to write to (defaults to ``get_logger(channel)``)
            marker_filter: Disabled markers (defaults to following the settings)
        """
        self.channel = channel
        self._logger = logger if logger is not None else get_logger(channel)
        self._stdlib_logger = logging.getLogger(channel)
        if marker_filter is None:
            marker_filter = configured_marker_filter()
        self._marker_filter = marker_filter

    def is_enabled_for(self, severity: LogSeverity, marker: SpyMarker | None = None) -> bool:
        """Check whether an event at this severity and marker would be emitted."""
        if not self._stdlib_logger.isEnabledFor(severity_to_level(severity)):
            return False
        return self._marker_filter.allows(marker)

    def log(
        self,
        severity: LogSeverity,
        marker: SpyMarker | None,
        message: SpyMessage | str,
        error: BaseException | None = None,
    ) -> None:
        """
        Emit one event.

        Args:
            severity: Event severity
            marker: Category label, or None for unlabelled events
            message: Message payload, or a plain event string
            error: Exception to attach as ``exc_info``
        """
        if isinstance(message, str):
            event, fields = message, {}
        else:
            event, fields = message.event, message.as_fields()

        if marker is not None:
            fields["marker"] = marker.value
        if error is not None:
            fields["exc_info"] = error

        getattr(self._logger, _SEVERITY_METHODS[severity])(event, **fields)

    def error(self, marker: SpyMarker | None, message: SpyMessage | str, error: BaseException | None = None) -> None:
        self.log(LogSeverity.ERROR, marker, message, error)

    def warn(self, marker: SpyMarker | None, message: SpyMessage | str) -> None:
        self.log(LogSeverity.WARN, marker, message)

    def info(self, marker: SpyMarker | None, message: SpyMessage | str) -> None:
        self.log(LogSeverity.INFO, marker, message)

    def debug(self, marker: SpyMarker | None, message: SpyMessage | str) -> None:
        self.log(LogSeverity.DEBUG, marker, message)


@lru_cache
def get_spy_backend() -> SpyLogBackend:
    """Get the process-wide backend receiving all spy events."""
    return SpyLogBackend(SPY_CHANNEL)


@lru_cache
def get_debug_backend() -> SpyLogBackend:
    """Get the process-wide backend for spylog's own diagnostics."""
    return SpyLogBackend(DEBUG_CHANNEL, marker_filter=MarkerFilter())


__all__ = ["SpyLogBackend", "get_spy_backend", "get_debug_backend"]
