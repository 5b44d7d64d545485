"""Schema migrations, applied in a fixed order at session open.

There is no table of applied migrations. Each migration probes the live
schema and only acts when its change is missing, so every migration can be
re-run at any time and in any starting state.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.errors import MigrationError, StoreError
from dolt_issue_sync.storage.migrations.orphan_detection import (
    OrphanInfo,
    detect_orphaned_children,
    format_orphan_report,
    query_orphaned_children,
)
from dolt_issue_sync.storage.migrations.wisp_type import migrate_wisp_type_column

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Migration:
    name: str
    apply: Callable[[Database], None]


MIGRATIONS: tuple[Migration, ...] = (
    Migration("001_wisp_type_column", migrate_wisp_type_column),
    Migration("002_orphan_detection", detect_orphaned_children),
)


def run_migrations(
    db: Database, migrations: tuple[Migration, ...] = MIGRATIONS
) -> list[str]:
    """Apply every migration in order; stop at the first failure.

    Returns:
        Names of the migrations that ran.

    Raises:
        MigrationError: a migration failed. The cause is chained.
    """

    applied: list[str] = []
    for migration in migrations:
        try:
            migration.apply(db)
        except StoreError as e:
            logger.error(
                "Migration failed",
                extra={"migration": migration.name, "error": str(e)},
            )
            raise MigrationError(migration.name, str(e)) from e
        logger.debug("Migration checked", extra={"migration": migration.name})
        applied.append(migration.name)
    return applied


__all__ = [
    "MIGRATIONS",
    "Migration",
    "OrphanInfo",
    "detect_orphaned_children",
    "format_orphan_report",
    "migrate_wisp_type_column",
    "query_orphaned_children",
    "run_migrations",
]
