"""Routes spy events to the structured logging backend.

Only two channels are used: one for all spy events (``spylog.jdbc``) and one
for spylog's own diagnostics (``spylog.debug``). The kind of event is carried
by a marker instead of separate loggers, so connection, audit, result set and
per-operation SQL events can be switched on or off in the logging
configuration.

There is no "SQL only" mode: statements are logged once they have run, so
the execution time is always known. ``sql_occurred`` is therefore a no-op.
Result set and connection events are never tagged with the exception marker,
even when an exception occurs in those contexts; all errors go through
``exception_occurred``.
"""

from collections.abc import Callable
from typing import Protocol

from src.core.backend import SpyLogBackend, get_debug_backend, get_spy_backend
from src.core.classifier import classify_sql, marker_for_operation
from src.core.policy import select_severity, should_log_operation
from src.lib.config import Settings, get_settings
from src.lib.log_taxonomy import LogSeverity, SpyMarker
from src.models.messages import (
    NOT_MEASURED,
    RESULTSET_CLASS_TYPE,
    ConnectionAction,
    DefaultMessageFactory,
    MessageFactory,
    Spy,
)


class SpyLogDelegator(Protocol):
    """Interface called by the spy layer for every intercepted event."""

    def is_jdbc_logging_enabled(self) -> bool: ...

    def exception_occurred(
        self, spy: Spy, method_call: str, error: BaseException, sql: str | None, exec_time_ms: int
    ) -> None: ...

    def method_returned(self, spy: Spy, method_call: str, return_msg: str | None) -> None: ...

    def constructor_returned(self, spy: Spy, construction_info: str) -> None: ...

    def sql_occurred(self, spy: Spy, method_call: str, sql: str | None) -> None: ...

    def sql_timing_occurred(self, spy: Spy, exec_time_ms: int, method_call: str, sql: str | None) -> None: ...

    def connection_opened(self, spy: Spy, exec_time_ms: int = NOT_MEASURED) -> None: ...

    def connection_closed(self, spy: Spy, exec_time_ms: int = NOT_MEASURED) -> None: ...

    def debug(self, msg: str) -> None: ...


class StructlogSpyLogDelegator:
    """Spy log delegator writing to structlog through two channels."""

    def __init__(
        self,
        backend: SpyLogBackend | None = None,
        debug_backend: SpyLogBackend | None = None,
        settings_provider: Callable[[], Settings] = get_settings,
        message_factory: MessageFactory | None = None,
    ):
        """
        Initialize the delegator.

        Args:
            backend: Channel for spy events (defaults to the process-wide one)
            debug_backend: Channel for internal diagnostics
            settings_provider: Called on every event so reloaded settings apply
            message_factory: Builder of message payloads
        """
        self._backend = backend if backend is not None else get_spy_backend()
        self._debug_backend = debug_backend if debug_backend is not None else get_debug_backend()
        self._settings_provider = settings_provider
        self._messages = message_factory if message_factory is not None else DefaultMessageFactory()

    def is_jdbc_logging_enabled(self) -> bool:
        """Whether spying is worth doing at all: error level active on the spy channel."""
        return self._backend.is_enabled_for(LogSeverity.ERROR)

    def exception_occurred(
        self, spy: Spy, method_call: str, error: BaseException, sql: str | None, exec_time_ms: int
    ) -> None:
        message = self._messages.exception(
            spy, method_call, sql, exec_time_ms, self._backend.is_enabled_for(LogSeverity.DEBUG)
        )
        self._backend.error(SpyMarker.EXCEPTION, message, error)

    def method_returned(self, spy: Spy, method_call: str, return_msg: str | None) -> None:
        marker = SpyMarker.RESULTSET if spy.class_type == RESULTSET_CLASS_TYPE else SpyMarker.AUDIT
        message = self._messages.method_returned(
            spy, method_call, return_msg, self._backend.is_enabled_for(LogSeverity.DEBUG, marker)
        )
        self._backend.info(marker, message)

    def constructor_returned(self, spy: Spy, construction_info: str) -> None:
        pass

    def sql_occurred(self, spy: Spy, method_call: str, sql: str | None) -> None:
        pass

    def sql_timing_occurred(self, spy: Spy, exec_time_ms: int, method_call: str, sql: str | None) -> None:
        settings = self._settings_provider()

        operation = classify_sql(sql)
        if not should_log_operation(operation, settings.filter_config):
            return

        marker = marker_for_operation(operation)
        severity = select_severity(exec_time_ms, settings.threshold_config)
        if severity is LogSeverity.INFO and not self._backend.is_enabled_for(LogSeverity.INFO):
            return

        message = self._messages.sql_timing(
            spy, exec_time_ms, method_call, sql, self._backend.is_enabled_for(LogSeverity.DEBUG)
        )
        self._backend.log(severity, marker, message)

    def connection_opened(self, spy: Spy, exec_time_ms: int = NOT_MEASURED) -> None:
        self._connection_opened_or_closed(spy, exec_time_ms, ConnectionAction.OPENING)

    def connection_closed(self, spy: Spy, exec_time_ms: int = NOT_MEASURED) -> None:
        self._connection_opened_or_closed(spy, exec_time_ms, ConnectionAction.CLOSING)

    def _connection_opened_or_closed(self, spy: Spy, exec_time_ms: int, action: ConnectionAction) -> None:
        # exec_time_ms is NOT_MEASURED (-1) when the caller did not time it
        message = self._messages.connection(
            spy, exec_time_ms, action, self._backend.is_enabled_for(LogSeverity.DEBUG)
        )
        self._backend.info(SpyMarker.CONNECTION, message)

    def debug(self, msg: str) -> None:
        self._debug_backend.debug(None, msg)


__all__ = ["SpyLogDelegator", "StructlogSpyLogDelegator"]
