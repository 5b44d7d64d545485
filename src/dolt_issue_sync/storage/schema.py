"""Base schema for the issues table.

This is the schema as it existed before any migration ran; later columns
(for example `wisp_type`) are added by `storage.migrations`.
"""

from __future__ import annotations

from dolt_issue_sync.storage.database import Database

ISSUES_TABLE = "issues"

ISSUES_DDL = """
CREATE TABLE IF NOT EXISTS issues (
    id VARCHAR(255) PRIMARY KEY,
    title VARCHAR(500) NOT NULL,
    status VARCHAR(32) NOT NULL DEFAULT 'open',
    ephemeral BOOL DEFAULT 0,
    pinned BOOL DEFAULT 0
)
"""


def ensure_issues_table(db: Database) -> None:
    """Create the issues table if it does not exist yet."""

    db.exec(ISSUES_DDL)
