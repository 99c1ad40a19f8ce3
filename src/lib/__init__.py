"""Core library modules for spylog."""

from src.lib.config import Settings, get_settings, reload_settings
from src.lib.log_taxonomy import LogSeverity, MarkerFilter, SpyMarker
from src.lib.logging import get_logger

__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "get_logger",
    "LogSeverity",
    "MarkerFilter",
    "SpyMarker",
]
