"""Unit tests for the spy logging backend."""

import logging
from unittest.mock import MagicMock

import pytest
import structlog

from src.core.backend import SpyLogBackend
from src.lib.config import reload_settings
from src.lib.log_taxonomy import LogSeverity, MarkerFilter, SpyMarker
from src.lib.logging import configured_marker_filter
from src.models.messages import SqlTimingMessage


@pytest.fixture
def channel_logger():
    """A stdlib logger for a test-only channel, restored afterwards."""
    logger = logging.getLogger("tests.spylog.backend")
    previous = logger.level
    logger.setLevel(logging.INFO)
    yield logger
    logger.setLevel(previous)


@pytest.fixture
def bound_logger():
    return MagicMock()


@pytest.fixture
def backend(channel_logger, bound_logger):
    return SpyLogBackend(channel_logger.name, logger=bound_logger, marker_filter=MarkerFilter(["resultset"]))


class TestIsEnabledFor:
    """Tests for SpyLogBackend.is_enabled_for()."""

    def test_follows_channel_level(self, backend, channel_logger):
        assert backend.is_enabled_for(LogSeverity.INFO)
        assert not backend.is_enabled_for(LogSeverity.DEBUG)

        channel_logger.setLevel(logging.ERROR)

        assert backend.is_enabled_for(LogSeverity.ERROR)
        assert not backend.is_enabled_for(LogSeverity.WARN)

    def test_disabled_marker(self, backend):
        assert not backend.is_enabled_for(LogSeverity.INFO, SpyMarker.RESULTSET)
        assert backend.is_enabled_for(LogSeverity.INFO, SpyMarker.AUDIT)


class TestLog:
    """Tests for SpyLogBackend.log() and its shorthands."""

    def test_message_fields_and_marker(self, backend, bound_logger, statement_spy):
        message = SqlTimingMessage(statement_spy, 12, "executeQuery()", "select 1 from dual")

        backend.log(LogSeverity.WARN, SpyMarker.SELECT, message)

        bound_logger.warning.assert_called_once_with(
            "sql_timing",
            connection_number=7,
            method_call="executeQuery()",
            sql="select 1 from dual",
            exec_time_ms=12,
            marker="select",
        )

    def test_error_is_attached(self, backend, bound_logger):
        error = RuntimeError("boom")

        backend.error(SpyMarker.EXCEPTION, "exception_occurred", error)

        bound_logger.error.assert_called_once_with("exception_occurred", marker="exception", exc_info=error)

    def test_plain_message_without_marker(self, backend, bound_logger):
        backend.debug(None, "driver registered")

        bound_logger.debug.assert_called_once_with("driver registered")

    @pytest.mark.parametrize(
        ("shorthand", "method"),
        [("info", "info"), ("warn", "warning"), ("debug", "debug")],
    )
    def test_shorthands(self, backend, bound_logger, shorthand, method):
        getattr(backend, shorthand)(SpyMarker.CONNECTION, "connection_opened")

        getattr(bound_logger, method).assert_called_once_with("connection_opened", marker="connection")


class TestMarkerSettingsReload:
    """Disabled markers follow reloaded settings."""

    def test_reload_disables_marker(self, channel_logger, bound_logger, monkeypatch):
        monkeypatch.delenv("SPYLOG_DISABLED_MARKERS", raising=False)
        reload_settings()
        backend = SpyLogBackend(channel_logger.name, logger=bound_logger)
        chain_filter = configured_marker_filter()

        assert backend.is_enabled_for(LogSeverity.ERROR, SpyMarker.RESULTSET)

        monkeypatch.setenv("SPYLOG_DISABLED_MARKERS", '["resultset"]')
        reload_settings()

        assert not backend.is_enabled_for(LogSeverity.ERROR, SpyMarker.RESULTSET)
        assert backend.is_enabled_for(LogSeverity.ERROR, SpyMarker.AUDIT)
        with pytest.raises(structlog.DropEvent):
            chain_filter(None, "info", {"event": "method_returned", "marker": "resultset"})

    def test_reload_reenables_marker(self, channel_logger, bound_logger, monkeypatch):
        monkeypatch.setenv("SPYLOG_DISABLED_MARKERS", '["jdbc"]')
        reload_settings()
        backend = SpyLogBackend(channel_logger.name, logger=bound_logger)

        assert not backend.is_enabled_for(LogSeverity.INFO, SpyMarker.AUDIT)

        monkeypatch.delenv("SPYLOG_DISABLED_MARKERS")
        reload_settings()

        assert backend.is_enabled_for(LogSeverity.INFO, SpyMarker.AUDIT)
