"""Open the process-wide store handle and bring its schema up to date.

One store is opened per process. Callers must hold exclusive access to the
workspace while the handle is in use; nothing here takes a lock.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from dolt_issue_sync.config import SyncSettings
from dolt_issue_sync.storage.dolt_store import DoltStore
from dolt_issue_sync.storage.migrations import run_migrations
from dolt_issue_sync.storage.schema import ensure_issues_table
from dolt_issue_sync.storage.sqlite_store import SQLiteStore
from dolt_issue_sync.storage.store import IssueStore

logger = logging.getLogger(__name__)


def open_store(settings: SyncSettings) -> IssueStore:
    """Connect to the configured backend without touching the schema."""

    if settings.backend == "dolt":
        return DoltStore.connect(
            host=settings.dolt_host,
            port=settings.dolt_port,
            user=settings.dolt_user,
            password=settings.dolt_password,
            database=settings.dolt_database,
        )
    return SQLiteStore.open(settings.sqlite_file)


def bring_up_schema(store: IssueStore) -> list[str]:
    """Create the base table and run all migrations, in order."""

    ensure_issues_table(store.db)
    applied = run_migrations(store.db)
    logger.info("Schema up to date", extra={"migrations": applied})
    return applied


@contextmanager
def store_session(settings: SyncSettings) -> Iterator[IssueStore]:
    """Yield an open, migrated store and close it afterwards.

    A migration failure aborts the session before anything is yielded.
    """

    store = open_store(settings)
    try:
        bring_up_schema(store)
        yield store
    finally:
        store.close()
