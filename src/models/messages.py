"""Spy event message payloads.

These are the default message builders handed to the logging backend. They
only carry the event data as structured fields; rendering is left to the
structlog processor chain.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

# Class type reported by result set spies
RESULTSET_CLASS_TYPE = "ResultSet"

# Execution time value meaning "not measured"
NOT_MEASURED = -1


class Spy(Protocol):
    """Identity of a spied connection, statement or result set."""

    @property
    def class_type(self) -> str: ...

    @property
    def connection_number(self) -> int: ...


class ConnectionAction(str, Enum):
    """Whether a connection event is an open or a close."""

    OPENING = "opening"
    CLOSING = "closing"


def _spy_fields(spy: Spy, debug_enabled: bool) -> dict[str, Any]:
    fields: dict[str, Any] = {"connection_number": spy.connection_number}
    if debug_enabled:
        fields["spy_class_type"] = spy.class_type
    return fields


@dataclass(frozen=True)
class ConnectionMessage:
    """Connection opened or closed."""

    spy: Spy
    exec_time_ms: int
    action: ConnectionAction
    debug_enabled: bool = False

    @property
    def event(self) -> str:
        return f"connection_{'opened' if self.action is ConnectionAction.OPENING else 'closed'}"

    def as_fields(self) -> dict[str, Any]:
        return {
            **_spy_fields(self.spy, self.debug_enabled),
            "action": self.action.value,
            "exec_time_ms": self.exec_time_ms,
        }


@dataclass(frozen=True)
class MethodReturnedMessage:
    """A spied method returned."""

    spy: Spy
    method_call: str
    return_msg: str | None
    debug_enabled: bool = False
    event: str = "method_returned"

    def as_fields(self) -> dict[str, Any]:
        return {
            **_spy_fields(self.spy, self.debug_enabled),
            "method_call": self.method_call,
            "return_msg": self.return_msg,
        }


@dataclass(frozen=True)
class SqlTimingMessage:
    """A statement finished executing."""

    spy: Spy
    exec_time_ms: int
    method_call: str
    sql: str | None
    debug_enabled: bool = False
    event: str = "sql_timing"

    def as_fields(self) -> dict[str, Any]:
        return {
            **_spy_fields(self.spy, self.debug_enabled),
            "method_call": self.method_call,
            "sql": self.sql,
            "exec_time_ms": self.exec_time_ms,
        }


@dataclass(frozen=True)
class ExceptionMessage:
    """A spied method raised."""

    spy: Spy
    method_call: str
    sql: str | None
    exec_time_ms: int
    debug_enabled: bool = False
    event: str = "exception_occurred"

    def as_fields(self) -> dict[str, Any]:
        return {
            **_spy_fields(self.spy, self.debug_enabled),
            "method_call": self.method_call,
            "sql": self.sql,
            "exec_time_ms": self.exec_time_ms,
        }


class SpyMessage(Protocol):
    """Anything the backend can log: an event name plus structured fields."""

    @property
    def event(self) -> str: ...

    def as_fields(self) -> dict[str, Any]: ...


class MessageFactory(Protocol):
    """Builds message payloads for the delegator."""

    def connection(
        self, spy: Spy, exec_time_ms: int, action: ConnectionAction, debug_enabled: bool
    ) -> SpyMessage: ...

    def method_returned(
        self, spy: Spy, method_call: str, return_msg: str | None, debug_enabled: bool
    ) -> SpyMessage: ...

    def sql_timing(
        self, spy: Spy, exec_time_ms: int, method_call: str, sql: str | None, debug_enabled: bool
    ) -> SpyMessage: ...

    def exception(
        self, spy: Spy, method_call: str, sql: str | None, exec_time_ms: int, debug_enabled: bool
    ) -> SpyMessage: ...


class DefaultMessageFactory:
    """Message factory producing the dataclass payloads above."""

    def connection(
        self, spy: Spy, exec_time_ms: int, action: ConnectionAction, debug_enabled: bool
    ) -> ConnectionMessage:
        return ConnectionMessage(spy, exec_time_ms, action, debug_enabled)

    def method_returned(
        self, spy: Spy, method_call: str, return_msg: str | None, debug_enabled: bool
    ) -> MethodReturnedMessage:
        return MethodReturnedMessage(spy, method_call, return_msg, debug_enabled)

    def sql_timing(
        self, spy: Spy, exec_time_ms: int, method_call: str, sql: str | None, debug_enabled: bool
    ) -> SqlTimingMessage:
        return SqlTimingMessage(spy, exec_time_ms, method_call, sql, debug_enabled)

    def exception(
        self, spy: Spy, method_call: str, sql: str | None, exec_time_ms: int, debug_enabled: bool
    ) -> ExceptionMessage:
        return ExceptionMessage(spy, method_call, sql, exec_time_ms, debug_enabled)


__all__ = [
    "RESULTSET_CLASS_TYPE",
    "NOT_MEASURED",
    "Spy",
    "ConnectionAction",
    "ConnectionMessage",
    "MethodReturnedMessage",
    "SqlTimingMessage",
    "ExceptionMessage",
    "SpyMessage",
    "MessageFactory",
    "DefaultMessageFactory",
]
