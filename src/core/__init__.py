"""Core spy event routing package."""

from src.core.backend import SpyLogBackend, get_debug_backend, get_spy_backend
from src.core.classifier import SqlOperation, classify_sql, marker_for_operation
from src.core.delegator import SpyLogDelegator, StructlogSpyLogDelegator
from src.core.policy import select_severity, should_log_operation

__all__ = [
    "SpyLogBackend",
    "get_spy_backend",
    "get_debug_backend",
    "SqlOperation",
    "classify_sql",
    "marker_for_operation",
    "should_log_operation",
    "select_severity",
    "SpyLogDelegator",
    "StructlogSpyLogDelegator",
]
