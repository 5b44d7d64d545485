"""Exceptions raised by the storage layer."""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for issue store failures."""


class DatabaseError(StoreError):
    """A statement failed in the underlying driver."""


class SchemaIntrospectionError(StoreError):
    """A catalog lookup (table/column existence) could not be answered."""


class MigrationError(StoreError):
    """A schema migration failed; startup must not continue."""

    def __init__(self, migration: str, message: str) -> None:
        super().__init__(f"migration {migration} failed: {message}")
        self.migration = migration


class OrphanDetectionError(StoreError):
    """The orphaned-children query failed."""


class NothingToCommitError(StoreError):
    """The working set has no changes; committing is a no-op."""


class RemoteError(StoreError):
    """Remote lookup or push failed."""


_NOTHING_TO_COMMIT = "nothing to commit"


def is_nothing_to_commit(exc: BaseException) -> bool:
    """Classify the benign "nothing to commit" condition.

    Dolt reports it as a plain SQL error, so the message text is checked as
    well as the exception type.
    """

    if isinstance(exc, NothingToCommitError):
        return True
    return _NOTHING_TO_COMMIT in str(exc).lower()
