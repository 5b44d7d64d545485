"""Detect child issues whose parent row no longer exists.

A child issue has an ID containing '.' (e.g. "bd-abc123.1"). Its parent is
the text before the *first* '.' (e.g. "bd-abc123"). Deleting a parent leaves
its children behind; this module finds them.

Detection is advisory: findings are logged, never raised and never repaired.
Repair belongs to `bd doctor --fix`.

Known limitation, kept on purpose: only the root-level prefix is checked. A
grandchild "P.1.1" whose direct parent "P.1" is gone, but whose root "P"
exists, is not reported.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dolt_issue_sync.models import first_separator_prefix
from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.errors import DatabaseError, OrphanDetectionError
from dolt_issue_sync.storage.introspect import table_exists
from dolt_issue_sync.storage.schema import ISSUES_TABLE

logger = logging.getLogger(__name__)

REPAIR_HINT = "run 'bd doctor --fix' to repair orphaned children"

_ISSUE_IDS_SQL = f"SELECT id FROM {ISSUES_TABLE}"

# Orphan details are fetched with `WHERE id IN (...)`, this many IDs at a time
# (SQLite caps bound parameters per statement).
LOOKUP_BATCH_SIZE = 500


@dataclass(frozen=True, slots=True)
class OrphanInfo:
    """A child issue whose encoded parent is missing."""

    id: str
    title: str
    status: str

    @property
    def missing_parent(self) -> str:
        return first_separator_prefix(self.id) or ""

    def to_json(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "status": self.status,
            "missing_parent": self.missing_parent,
        }


def query_orphaned_children(db: Database) -> list[OrphanInfo]:
    """Return every child issue whose parent prefix matches no issue ID.

    Results are ordered by ID ascending. The parent test goes through
    `first_separator_prefix`, the same rule used everywhere an ID is split.

    The anti-join runs here rather than in SQL so that both engines split IDs
    the same way. Only the ID column is scanned in full; title and status are
    read for the orphans alone.

    Raises:
        OrphanDetectionError: the issues table could not be read.
    """

    try:
        known_ids = {str(row[0]) for row in db.query(_ISSUE_IDS_SQL)}
    except DatabaseError as e:
        raise OrphanDetectionError(f"orphan query failed: {e}") from e

    # Plain code-point order; independent of the engine's collation.
    orphan_ids = sorted(i for i in known_ids if _is_orphan(i, known_ids))
    details = _load_details(db, orphan_ids)
    return [details[i] for i in orphan_ids if i in details]


def _is_orphan(issue_id: str, known_ids: set[str]) -> bool:
    parent = first_separator_prefix(issue_id)
    return parent is not None and parent not in known_ids


def _load_details(db: Database, issue_ids: list[str]) -> dict[str, OrphanInfo]:
    details: dict[str, OrphanInfo] = {}
    for start in range(0, len(issue_ids), LOOKUP_BATCH_SIZE):
        batch = issue_ids[start : start + LOOKUP_BATCH_SIZE]
        placeholders = ", ".join([db.dialect.placeholder] * len(batch))
        try:
            rows = db.query(
                f"SELECT id, title, status FROM {ISSUES_TABLE} WHERE id IN ({placeholders})",
                batch,
            )
        except DatabaseError as e:
            raise OrphanDetectionError(f"orphan detail lookup failed: {e}") from e

        for row in rows:
            try:
                issue_id, title, status = (str(value) for value in row)
            except ValueError as e:
                raise OrphanDetectionError(f"failed to scan orphan row: {e}") from e
            details[issue_id] = OrphanInfo(id=issue_id, title=title, status=status)
    return details


def format_orphan_report(orphans: list[OrphanInfo]) -> list[str]:
    """Human-readable report lines, ending with the repair hint."""

    if not orphans:
        return []

    lines = [f"orphan detection: found {len(orphans)} orphaned child issue(s):"]
    lines.extend(f"  orphan: {o.id} (title={o.title!r}, status={o.status})" for o in orphans)
    lines.append(f"orphan detection: {REPAIR_HINT}")
    return lines


def detect_orphaned_children(db: Database) -> None:
    """Advisory migration step: log orphaned children, change nothing.

    Returns silently when the issues table does not exist yet (nothing to
    check before the first schema bring-up).

    Raises:
        SchemaIntrospectionError: the table probe failed.
        OrphanDetectionError: the orphan query failed.
    """

    if not table_exists(db, ISSUES_TABLE):
        return

    orphans = query_orphaned_children(db)
    if not orphans:
        return

    for line in format_orphan_report(orphans):
        logger.warning(line, extra={"orphan_count": len(orphans)})
