"""Versioned issue store on a Dolt SQL server.

Dolt speaks the MySQL wire protocol; version control is driven through its
stored procedures (`DOLT_COMMIT`, `DOLT_PUSH`) and system tables
(`dolt_remotes`).
"""

from __future__ import annotations

import logging
from typing import Any

import mysql.connector

from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.dialect import MYSQL
from dolt_issue_sync.storage.errors import (
    DatabaseError,
    NothingToCommitError,
    RemoteError,
    StoreError,
    is_nothing_to_commit,
)
from dolt_issue_sync.storage.store import SQLIssueStore

logger = logging.getLogger(__name__)


class DoltStore(SQLIssueStore):
    """Dolt-backed issue store."""

    @classmethod
    def connect(
        cls,
        *,
        host: str,
        port: int,
        user: str,
        password: str,
        database: str,
        **kwargs: Any,
    ) -> DoltStore:
        """Open a connection to a running `dolt sql-server`."""

        try:
            conn = mysql.connector.connect(
                host=host,
                port=port,
                user=user,
                password=password,
                database=database,
                autocommit=True,
                **kwargs,
            )
        except mysql.connector.Error as e:
            raise StoreError(f"failed to connect to Dolt at {host}:{port}: {e}") from e

        logger.info(
            "Connected to Dolt",
            extra={"host": host, "port": port, "database": database},
        )
        return cls(Database(conn, MYSQL, driver_error=mysql.connector.Error))

    def commit(self, message: str) -> None:
        """Stage all tables and create a Dolt commit."""

        try:
            self.db.exec("CALL DOLT_COMMIT('-Am', %s)", (message,))
        except DatabaseError as e:
            if is_nothing_to_commit(e):
                raise NothingToCommitError(str(e)) from e
            raise StoreError(f"dolt commit failed: {e}") from e
        logger.info("Created Dolt commit", extra={"commit_message": message})

    def has_remote(self, name: str) -> bool:
        try:
            rows = self.db.query("SELECT name FROM dolt_remotes WHERE name = %s", (name,))
        except DatabaseError as e:
            raise RemoteError(f"failed to look up remote {name!r}: {e}") from e
        return bool(rows)

    def push(self, name: str) -> None:
        """Push the active branch to remote `name`."""

        try:
            rows = self.db.query("SELECT active_branch()")
            branch = str(rows[0][0]) if rows else "main"
            self.db.exec("CALL DOLT_PUSH(%s, %s)", (name, branch))
        except DatabaseError as e:
            raise RemoteError(f"dolt push to {name!r} failed: {e}") from e
        logger.info("Pushed to Dolt remote", extra={"remote": name, "branch": branch})
