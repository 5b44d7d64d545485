"""Add the `wisp_type` column to issues."""

from __future__ import annotations

import logging

from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.introspect import column_exists, table_exists
from dolt_issue_sync.storage.schema import ISSUES_TABLE

logger = logging.getLogger(__name__)

WISP_TYPE_COLUMN = "wisp_type"


def migrate_wisp_type_column(db: Database) -> None:
    """Add `issues.wisp_type` when it is missing.

    Safe to call any number of times: the column is only added after a live
    catalog probe says it is absent.

    Raises:
        SchemaIntrospectionError: the probe failed; nothing was altered.
        DatabaseError: the ALTER TABLE itself failed.
    """

    if not table_exists(db, ISSUES_TABLE):
        return

    if column_exists(db, ISSUES_TABLE, WISP_TYPE_COLUMN):
        return

    db.exec(f"ALTER TABLE {ISSUES_TABLE} ADD COLUMN {WISP_TYPE_COLUMN} VARCHAR(32) DEFAULT ''")
    logger.info("Added column", extra={"table": ISSUES_TABLE, "column": WISP_TYPE_COLUMN})
