"""Statement filtering and timing severity rules."""

from src.core.classifier import SqlOperation
from src.lib.log_taxonomy import LogSeverity
from src.models.policy import FilterConfig, ThresholdConfig


def should_log_operation(operation: SqlOperation | None, config: FilterConfig) -> bool:
    """
    Determine whether statements of the given operation should be logged.

    Unclassified statements are never filtered out.

    Args:
        operation: Operation detected for the statement
        config: Dump flags snapshot

    Returns:
        True if the statement should be logged
    """
    if not config.filtering_enabled:
        return True

    if operation is None or operation is SqlOperation.UNKNOWN:
        return True

    flags = {
        SqlOperation.SELECT: config.dump_select,
        SqlOperation.INSERT: config.dump_insert,
        SqlOperation.UPDATE: config.dump_update,
        SqlOperation.DELETE: config.dump_delete,
        SqlOperation.CREATE: config.dump_create,
    }
    return flags[operation]


def select_severity(elapsed_ms: int, config: ThresholdConfig) -> LogSeverity:
    """
    Pick the severity of a timed statement from the configured thresholds.

    Thresholds are inclusive: a statement taking exactly the threshold
    breaches it. The error threshold is checked first.

    Args:
        elapsed_ms: Statement execution time in milliseconds
        config: Threshold snapshot

    Returns:
        ERROR, WARN or INFO
    """
    if config.error_enabled and elapsed_ms >= config.error_threshold_ms:
        return LogSeverity.ERROR

    if config.warn_enabled and elapsed_ms >= config.warn_threshold_ms:
        return LogSeverity.WARN

    return LogSeverity.INFO


__all__ = ["should_log_operation", "select_severity"]
