"""SQL operation detection and operation-to-marker mapping."""

from enum import StrEnum

from src.lib.log_taxonomy import SpyMarker


class SqlOperation(StrEnum):
    """Operation performed by a SQL statement."""

    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    CREATE = "create"
    UNKNOWN = "unknown"


# Length of every recognised keyword
_KEYWORD_LENGTH = 6

_KNOWN_OPERATIONS = {op.value: op for op in SqlOperation if op is not SqlOperation.UNKNOWN}

_OPERATION_MARKERS = {
    SqlOperation.SELECT: SpyMarker.SELECT,
    SqlOperation.INSERT: SpyMarker.INSERT,
    SqlOperation.UPDATE: SpyMarker.UPDATE,
    SqlOperation.DELETE: SpyMarker.DELETE,
    SqlOperation.CREATE: SpyMarker.CREATE,
}


def classify_sql(sql: str | None) -> SqlOperation:
    """Identify the operation performed by a SQL statement.

    Only the first six characters of the stripped statement are looked at, so
    statements starting with a comment, a ``WITH`` clause or a non-English
    keyword come out as ``UNKNOWN``.

    Args:
        sql: The SQL statement, possibly None or empty

    Returns:
        The matching operation, or ``SqlOperation.UNKNOWN``
    """
    if sql is None:
        return SqlOperation.UNKNOWN

    sql = sql.strip()
    if len(sql) < _KEYWORD_LENGTH:
        return SqlOperation.UNKNOWN

    return _KNOWN_OPERATIONS.get(sql[:_KEYWORD_LENGTH].lower(), SqlOperation.UNKNOWN)


def marker_for_operation(operation: SqlOperation | None) -> SpyMarker:
    """Return the statement marker for an operation, ``SpyMarker.SQL`` when unknown."""
    if operation is None:
        return SpyMarker.SQL
    return _OPERATION_MARKERS.get(operation, SpyMarker.SQL)


__all__ = ["SqlOperation", "classify_sql", "marker_for_operation"]
