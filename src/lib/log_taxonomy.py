"""Log classification taxonomy for spylog.

This module defines the markers (category labels) and severity levels used to
route intercepted database events. Markers form a small fixed forest so that
disabling a parent marker also silences its children.
"""

import logging
from collections.abc import Callable, Iterable, MutableMapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

import structlog


class SpyMarker(StrEnum):
    """Category labels attached to spy log events.

    - SQL: statements executed through a statement spy
      (children SELECT, INSERT, UPDATE, DELETE, CREATE)
    - JDBC: every call made on a spied object
      (children AUDIT for everything but result sets, RESULTSET for result sets)
    - CONNECTION: connection open/close events
    - EXCEPTION: errors raised by the spied call
    """

    SQL = "sql"
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    CREATE = "create"
    JDBC = "jdbc"
    AUDIT = "audit"
    RESULTSET = "resultset"
    CONNECTION = "connection"
    EXCEPTION = "exception"


class LogSeverity(StrEnum):
    """Log severity levels (log4j-style) used by the spy delegator."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


# Fixed marker forest; roots map to None
MARKER_PARENTS: MappingProxyType[SpyMarker, SpyMarker | None] = MappingProxyType(
    {
        SpyMarker.SQL: None,
        SpyMarker.SELECT: SpyMarker.SQL,
        SpyMarker.INSERT: SpyMarker.SQL,
        SpyMarker.UPDATE: SpyMarker.SQL,
        SpyMarker.DELETE: SpyMarker.SQL,
        SpyMarker.CREATE: SpyMarker.SQL,
        SpyMarker.JDBC: None,
        SpyMarker.AUDIT: SpyMarker.JDBC,
        SpyMarker.RESULTSET: SpyMarker.JDBC,
        SpyMarker.CONNECTION: None,
        SpyMarker.EXCEPTION: None,
    }
)

_SEVERITY_LEVELS = MappingProxyType(
    {
        LogSeverity.ERROR: logging.ERROR,
        LogSeverity.WARN: logging.WARNING,
        LogSeverity.INFO: logging.INFO,
        LogSeverity.DEBUG: logging.DEBUG,
    }
)


def marker_parent(marker: SpyMarker) -> SpyMarker | None:
    """Return the parent of a marker, or None for a root marker."""
    return MARKER_PARENTS[marker]


def marker_lineage(marker: SpyMarker) -> tuple[SpyMarker, ...]:
    """Return the marker followed by all of its ancestors, root last.

    Example:
        >>> marker_lineage(SpyMarker.SELECT)
        (<SpyMarker.SELECT: 'select'>, <SpyMarker.SQL: 'sql'>)
    """
    lineage: list[SpyMarker] = []
    current: SpyMarker | None = marker
    while current is not None:
        lineage.append(current)
        current = MARKER_PARENTS[current]
    return tuple(lineage)


def is_marker_instance_of(marker: SpyMarker, ancestor: SpyMarker) -> bool:
    """Check whether ``marker`` is ``ancestor`` or one of its descendants."""
    return ancestor in marker_lineage(marker)


def severity_to_level(severity: LogSeverity) -> int:
    """Map a severity to the stdlib logging level number."""
    return _SEVERITY_LEVELS[severity]


class MarkerFilter:
    """Drop spy events whose marker (or an ancestor of it) is disabled.

    Usable both as a predicate (``allows``) and as a structlog processor, in
    which case events carrying a disabled ``marker`` key raise
    ``structlog.DropEvent``. Events without a marker always pass.

    Either a fixed set of disabled markers or a ``provider`` may be given; the
    provider is called on every check so configuration reloads apply at once.
    """

    def __init__(
        self,
        disabled: Iterable[SpyMarker | str] = (),
        provider: Callable[[], Iterable[SpyMarker | str]] | None = None,
    ):
        self._disabled = frozenset(SpyMarker(name) for name in disabled)
        self._provider = provider

    @property
    def disabled(self) -> frozenset[SpyMarker]:
        if self._provider is None:
            return self._disabled
        return frozenset(SpyMarker(name) for name in self._provider())

    def allows(self, marker: SpyMarker | str | None) -> bool:
        if marker is None:
            return True
        disabled = self.disabled
        if not disabled:
            return True
        try:
            marker = SpyMarker(marker)
        except ValueError:
            # Not a spy marker, leave it to the rest of the pipeline
            return True
        return disabled.isdisjoint(marker_lineage(marker))

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        if not self.allows(event_dict.get("marker")):
            raise structlog.DropEvent
        return event_dict


__all__ = [
    "SpyMarker",
    "LogSeverity",
    "MARKER_PARENTS",
    "marker_parent",
    "marker_lineage",
    "is_marker_instance_of",
    "severity_to_level",
    "MarkerFilter",
]
