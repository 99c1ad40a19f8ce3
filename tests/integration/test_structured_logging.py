"""Integration tests for spy events flowing through structlog."""

import logging

import pytest
from structlog.testing import capture_logs

from src.core.backend import SpyLogBackend
from src.core.delegator import StructlogSpyLogDelegator
from src.lib.config import Settings, reload_settings
from src.lib.log_taxonomy import MarkerFilter
from src.lib.logging import DEBUG_CHANNEL, SPY_CHANNEL, configure_logging


@pytest.fixture
def channel_levels():
    """Configure logging, then pin both channel levels for the test."""
    configure_logging()
    spy_logger = logging.getLogger(SPY_CHANNEL)
    debug_logger = logging.getLogger(DEBUG_CHANNEL)
    previous = spy_logger.level, debug_logger.level
    spy_logger.setLevel(logging.INFO)
    debug_logger.setLevel(logging.DEBUG)
    yield spy_logger, debug_logger
    spy_logger.setLevel(previous[0])
    debug_logger.setLevel(previous[1])


class _RecordingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def spy_records(channel_levels):
    """Records reaching the spy channel after the full processor chain."""
    spy_logger, _ = channel_levels
    handler = _RecordingHandler()
    spy_logger.addHandler(handler)
    yield handler.records
    spy_logger.removeHandler(handler)


@pytest.fixture
def delegator(channel_levels):
    settings = Settings(
        _env_file=None,
        dump_sql_create=False,
        sql_timing_warn_threshold_ms=100,
        sql_timing_error_threshold_ms=1000,
    )
    return StructlogSpyLogDelegator(
        backend=SpyLogBackend(SPY_CHANNEL, marker_filter=MarkerFilter()),
        debug_backend=SpyLogBackend(DEBUG_CHANNEL, marker_filter=MarkerFilter()),
        settings_provider=lambda: settings,
    )


@pytest.mark.integration
class TestStructuredLogging:
    """Spy events as seen by the structlog pipeline."""

    def test_slow_statement_logged_as_warning(self, delegator, statement_spy):
        with capture_logs() as logs:
            delegator.sql_timing_occurred(statement_spy, 150, "executeUpdate()", "UPDATE t SET a = 1")

        assert logs == [
            {
                "event": "sql_timing",
                "log_level": "warning",
                "marker": "update",
                "connection_number": 7,
                "method_call": "executeUpdate()",
                "sql": "UPDATE t SET a = 1",
                "exec_time_ms": 150,
            }
        ]

    def test_excluded_statement_not_logged(self, delegator, statement_spy):
        with capture_logs() as logs:
            delegator.sql_timing_occurred(statement_spy, 5000, "execute()", "create table t (a int)")

        assert logs == []

    def test_fast_statement_dropped_when_info_disabled(self, delegator, channel_levels, statement_spy):
        spy_logger, _ = channel_levels
        spy_logger.setLevel(logging.WARNING)

        with capture_logs() as logs:
            delegator.sql_timing_occurred(statement_spy, 5, "executeQuery()", "select 1 from t")
            delegator.sql_timing_occurred(statement_spy, 2000, "executeQuery()", "select 1 from t")

        assert [(entry["log_level"], entry["marker"]) for entry in logs] == [("error", "select")]

    def test_exception_carries_error(self, delegator, statement_spy):
        error = RuntimeError("deadlock detected")

        with capture_logs() as logs:
            delegator.exception_occurred(statement_spy, "executeUpdate()", error, "delete from t", 12)

        assert len(logs) == 1
        assert logs[0]["log_level"] == "error"
        assert logs[0]["marker"] == "exception"
        assert logs[0]["exc_info"] is error

    def test_connection_and_resultset_events(self, delegator, connection_spy, resultset_spy):
        with capture_logs() as logs:
            delegator.connection_opened(connection_spy)
            delegator.method_returned(resultset_spy, "next()", "true")
            delegator.connection_closed(connection_spy, 3)

        assert [(entry["event"], entry["marker"]) for entry in logs] == [
            ("connection_opened", "connection"),
            ("method_returned", "resultset"),
            ("connection_closed", "connection"),
        ]
        assert logs[0]["exec_time_ms"] == -1
        assert logs[2]["exec_time_ms"] == 3

    def test_debug_channel(self, delegator):
        with capture_logs() as logs:
            delegator.debug("spy driver loaded")

        assert logs == [{"event": "spy driver loaded", "log_level": "debug"}]

    def test_configured_chain_drops_disabled_marker(
        self, delegator, spy_records, resultset_spy, statement_spy, monkeypatch
    ):
        """The marker filter in the configured chain stops events before any handler."""
        monkeypatch.setenv("SPYLOG_DISABLED_MARKERS", '["resultset"]')
        reload_settings()

        delegator.method_returned(resultset_spy, "next()", "true")

        assert spy_records == []

        delegator.method_returned(statement_spy, "getFetchSize()", "10")

        assert len(spy_records) == 1
        assert "audit" in spy_records[0].getMessage()
        assert "getFetchSize()" in spy_records[0].getMessage()
