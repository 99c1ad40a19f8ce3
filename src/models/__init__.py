"""Data models for spylog."""

from src.models.messages import (
    NOT_MEASURED,
    RESULTSET_CLASS_TYPE,
    ConnectionAction,
    ConnectionMessage,
    DefaultMessageFactory,
    ExceptionMessage,
    MessageFactory,
    MethodReturnedMessage,
    Spy,
    SpyMessage,
    SqlTimingMessage,
)
from src.models.policy import FilterConfig, ThresholdConfig

__all__ = [
    "NOT_MEASURED",
    "RESULTSET_CLASS_TYPE",
    "Spy",
    "ConnectionAction",
    "ConnectionMessage",
    "MethodReturnedMessage",
    "SqlTimingMessage",
    "ExceptionMessage",
    "SpyMessage",
    "MessageFactory",
    "DefaultMessageFactory",
    "FilterConfig",
    "ThresholdConfig",
]
