"""Live-catalog schema probes.

Migrations decide whether to run by asking these questions of the current
schema rather than consulting a log of applied migrations.
"""

from __future__ import annotations

from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.errors import DatabaseError, SchemaIntrospectionError


def table_exists(db: Database, table: str) -> bool:
    """Return True if `table` exists in the active database.

    An absent table is a normal answer (False), not an error.

    Raises:
        SchemaIntrospectionError: the catalog could not be queried.
    """

    try:
        rows = db.query(db.dialect.table_exists_sql, (table,))
    except DatabaseError as e:
        raise SchemaIntrospectionError(f"failed to check table {table!r}: {e}") from e
    return _count(rows) > 0


def column_exists(db: Database, table: str, column: str) -> bool:
    """Return True if `column` exists on `table`.

    False when either the table or the column is absent.

    Raises:
        SchemaIntrospectionError: the catalog could not be queried.
    """

    try:
        rows = db.query(db.dialect.column_exists_sql, (table, column))
    except DatabaseError as e:
        raise SchemaIntrospectionError(
            f"failed to check column {table}.{column}: {e}"
        ) from e
    return _count(rows) > 0


def _count(rows: list[tuple[object, ...]]) -> int:
    if not rows or rows[0][0] is None:
        return 0
    return int(rows[0][0])  # type: ignore[call-overload]
