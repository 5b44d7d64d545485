"""Local, unversioned issue store on SQLite.

Committing means committing the open SQL transaction. There is no history
and no remote, so push never runs against this backend.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.dialect import SQLITE
from dolt_issue_sync.storage.errors import NothingToCommitError, RemoteError, StoreError
from dolt_issue_sync.storage.store import SQLIssueStore

logger = logging.getLogger(__name__)


class SQLiteStore(SQLIssueStore):
    """SQLite-backed issue store."""

    @classmethod
    def open(cls, path: Path) -> SQLiteStore:
        path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path)
        conn.execute("PRAGMA busy_timeout=5000")
        logger.info("Opened SQLite store", extra={"path": str(path)})
        return cls(Database(conn, SQLITE, driver_error=sqlite3.Error))

    def commit(self, message: str) -> None:
        conn: sqlite3.Connection = self.db.connection
        if not conn.in_transaction:
            raise NothingToCommitError("nothing to commit, working tree clean")
        try:
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"commit failed: {e}") from e
        logger.info("Committed pending changes", extra={"commit_message": message})

    def has_remote(self, name: str) -> bool:
        return False

    def push(self, name: str) -> None:
        raise RemoteError(f"SQLite stores have no remotes (asked for {name!r})")
