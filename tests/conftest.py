"""Test configuration and fixtures."""

import sqlite3
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from dolt_issue_sync.config import SyncSettings
from dolt_issue_sync.session import bring_up_schema
from dolt_issue_sync.storage.database import Database
from dolt_issue_sync.storage.dialect import SQLITE
from dolt_issue_sync.storage.schema import ensure_issues_table
from dolt_issue_sync.storage.sqlite_store import SQLiteStore

_SETTINGS_ENV_VARS = (
    "BD_BACKEND",
    "BEADS_DIR",
    "BD_SQLITE_PATH",
    "BD_DOLT_HOST",
    "BD_DOLT_PORT",
    "BD_DOLT_USER",
    "BD_DOLT_PASSWORD",
    "BD_DOLT_DATABASE",
    "BD_SYNC_MODE",
    "BD_ACTOR",
    "LOG_LEVEL",
)

InsertIssue = Callable[..., None]


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no settings leaking in from the environment."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def bare_db(tmp_path: Path) -> Iterator[Database]:
    """A SQLite database with no tables at all."""
    conn = sqlite3.connect(tmp_path / "bare.db")
    db = Database(conn, SQLITE, driver_error=sqlite3.Error)
    yield db
    db.close()


@pytest.fixture
def db(bare_db: Database) -> Database:
    """A database holding the pre-migration issues table (no wisp_type)."""
    ensure_issues_table(bare_db)
    return bare_db


@pytest.fixture
def insert_issue(db: Database) -> InsertIssue:
    """Insert an issue row into the `db` fixture."""

    def _insert(issue_id: str, title: str, status: str = "open") -> None:
        db.exec(
            "INSERT INTO issues (id, title, status) VALUES (?, ?, ?)",
            (issue_id, title, status),
        )

    return _insert


@pytest.fixture
def settings(clean_env: Path) -> SyncSettings:
    """Settings for a sqlite workspace under the temporary directory."""
    metadata_dir = clean_env / ".beads"
    metadata_dir.mkdir()
    return SyncSettings(backend="sqlite", metadata_dir=metadata_dir, actor="tester")


@pytest.fixture
def sqlite_store(settings: SyncSettings) -> Iterator[SQLiteStore]:
    """An open, fully migrated SQLite store."""
    store = SQLiteStore.open(settings.sqlite_file)
    bring_up_schema(store)
    yield store
    store.close()
