"""Issue store abstraction consumed by sync and export."""

from __future__ import annotations

import logging
from typing import Protocol

from dolt_issue_sync.models import Issue
from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.errors import DatabaseError, StoreError
from dolt_issue_sync.storage.introspect import column_exists
from dolt_issue_sync.storage.migrations.wisp_type import WISP_TYPE_COLUMN
from dolt_issue_sync.storage.schema import ISSUES_TABLE

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


class IssueStore(Protocol):
    """Operations the sync pipeline needs from an open store."""

    @property
    def db(self) -> Database: ...

    def list_issues(self) -> list[Issue]: ...

    def commit(self, message: str) -> None:
        """Commit pending changes.

        Raises NothingToCommitError when the working set is clean.
        """
        ...

    def has_remote(self, name: str) -> bool: ...

    def push(self, name: str) -> None: ...

    def close(self) -> None: ...


class SQLIssueStore:
    """Shared row access for stores backed by a `Database` handle."""

    def __init__(self, db: Database) -> None:
        self._db = db

    @property
    def db(self) -> Database:
        return self._db

    def list_issues(self) -> list[Issue]:
        """Load every issue, ordered by ID."""

        columns = ["id", "title", "status", "ephemeral", "pinned"]
        # Pre-migration databases have no wisp_type column yet.
        if column_exists(self._db, ISSUES_TABLE, WISP_TYPE_COLUMN):
            columns.append(WISP_TYPE_COLUMN)

        try:
            rows = self._db.query(
                f"SELECT {', '.join(columns)} FROM {ISSUES_TABLE} ORDER BY id"
            )
        except DatabaseError as e:
            raise StoreError(f"failed to list issues: {e}") from e

        issues: list[Issue] = []
        for row in rows:
            values = dict(zip(columns, row, strict=True))
            # An empty wisp_type is the column default, not a category.
            if not values.get(WISP_TYPE_COLUMN):
                values.pop(WISP_TYPE_COLUMN, None)
            values["ephemeral"] = bool(values["ephemeral"])
            values["pinned"] = bool(values["pinned"])
            issues.append(Issue.model_validate(values))
        return issues

    def close(self) -> None:
        logger.debug("Closing store", extra={"dialect": self._db.dialect.name})
        self._db.close()
