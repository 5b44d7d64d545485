"""Thin statement-execution handle over a DB-API 2.0 connection."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from dolt_issue_sync.storage.dialect import Dialect
from dolt_issue_sync.storage.errors import DatabaseError

logger = logging.getLogger(__name__)


class Database:
    """Execute SQL against one open connection.

    Driver exceptions (`driver_error`) are re-raised as `DatabaseError` so that
    callers above the storage layer never depend on a specific driver. Anything
    else (a `TypeError` from bad parameters, say) propagates unchanged.

    The handle is not safe for concurrent use; callers serialize access.
    """

    def __init__(
        self,
        connection: Any,
        dialect: Dialect,
        *,
        driver_error: type[BaseException],
    ) -> None:
        self.connection = connection
        self.dialect = dialect
        self._driver_error = driver_error

    def exec(self, sql: str, params: Sequence[Any] = ()) -> None:
        """Run a statement, discarding any result set."""

        cursor = self.connection.cursor()
        try:
            self._execute(cursor, sql, params)
            # Stored procedures (CALL DOLT_*) return a result set that must be drained.
            if cursor.description is not None:
                try:
                    cursor.fetchall()
                except self._driver_error as e:
                    raise DatabaseError(f"failed to drain result set: {e}") from e
        finally:
            cursor.close()

    def query(self, sql: str, params: Sequence[Any] = ()) -> list[tuple[Any, ...]]:
        """Run a query and return all rows as tuples."""

        cursor = self.connection.cursor()
        try:
            self._execute(cursor, sql, params)
            try:
                return [tuple(row) for row in cursor.fetchall()]
            except self._driver_error as e:
                raise DatabaseError(f"failed to read rows: {e}") from e
        finally:
            cursor.close()

    def close(self) -> None:
        self.connection.close()

    def _execute(self, cursor: Any, sql: str, params: Sequence[Any]) -> None:
        logger.debug("Executing SQL", extra={"sql": " ".join(sql.split())})
        try:
            if params:
                cursor.execute(sql, tuple(params))
            else:
                cursor.execute(sql)
        except self._driver_error as e:
            raise DatabaseError(str(e)) from e
