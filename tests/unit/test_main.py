"""Unit tests for the CLI entrypoint."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from dolt_issue_sync import main as cli
from dolt_issue_sync.config import SyncSettings
from dolt_issue_sync.storage.errors import MigrationError
from dolt_issue_sync.storage.schema import ensure_issues_table
from dolt_issue_sync.storage.sqlite_store import SQLiteStore


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    # Leave the root logger (and caplog) alone.
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


@pytest.fixture
def workspace(settings: SyncSettings, monkeypatch: pytest.MonkeyPatch) -> SyncSettings:
    monkeypatch.setenv("BD_ACTOR", settings.actor)
    return settings


def _seed(settings: SyncSettings, *rows: tuple[str, str]) -> None:
    store = SQLiteStore.open(settings.sqlite_file)
    try:
        ensure_issues_table(store.db)
        for issue_id, title in rows:
            store.db.exec("INSERT INTO issues (id, title) VALUES (?, ?)", (issue_id, title))
        store.commit("seed")
    finally:
        store.close()


def test_sync_accepts_deprecated_flags(workspace: SyncSettings) -> None:
    argv = [
        "sync",
        "-m",
        "ignored message",
        "--dry-run",
        "--no-push",
        "--import",
        "--import-only",
        "--export",
        "--flush-only",
        "--pull",
        "--no-git-history",
    ]

    assert cli.main(argv) == 0
    assert workspace.export_path.exists()


def test_sync_json_reports_steps(workspace: SyncSettings, capsys: pytest.CaptureFixture[str]) -> None:
    _seed(workspace, ("bd-1", "One"))

    assert cli.main(["sync", "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is True
    assert [(s["step"], s["outcome"]) for s in payload["steps"]] == [
        ("commit", "success"),
        ("export", "success"),
        ("push", "skipped"),
    ]
    assert workspace.export_path.read_text(encoding="utf-8").count("\n") == 1


def test_sync_without_workspace_is_a_noop(
    clean_env: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["sync"]) == 0

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert not (clean_env / ".beads").exists()


def test_sync_prints_step_warnings_and_exits_zero(
    workspace: SyncSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    # A directory where the export file should go makes the export step fail.
    workspace.export_path.mkdir()

    assert cli.main(["sync"]) == 0

    assert "Warning: export failed:" in capsys.readouterr().err


def test_migrate_prints_applied_migrations(
    workspace: SyncSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["migrate"]) == 0

    assert capsys.readouterr().out.split() == ["001_wisp_type_column", "002_orphan_detection"]


def test_migration_failure_exits_nonzero(
    workspace: SyncSettings, capsys: pytest.CaptureFixture[str]
) -> None:
    with patch(
        "dolt_issue_sync.session.run_migrations",
        side_effect=MigrationError("001_wisp_type_column", "disk I/O error"),
    ):
        assert cli.main(["sync"]) == 1

    assert "migration 001_wisp_type_column failed" in capsys.readouterr().err


def test_orphans_json(workspace: SyncSettings, capsys: pytest.CaptureFixture[str]) -> None:
    _seed(workspace, ("bd-a", "Parent"), ("bd-a.1", "Child"), ("bd-gone.1", "Orphan"))

    assert cli.main(["orphans", "--json"]) == 0

    assert json.loads(capsys.readouterr().out) == [
        {"id": "bd-gone.1", "title": "Orphan", "status": "open", "missing_parent": "bd-gone"}
    ]


def test_orphans_text_report(workspace: SyncSettings, capsys: pytest.CaptureFixture[str]) -> None:
    _seed(workspace, ("bd-gone.1", "Orphan"))

    assert cli.main(["orphans"]) == 0

    out = capsys.readouterr().out
    assert "orphan detection: found 1 orphaned child issue(s):" in out
    assert "bd doctor --fix" in out


def test_orphans_none_found(workspace: SyncSettings, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["orphans"]) == 0

    assert capsys.readouterr().out.strip() == "No orphaned child issues found"


def test_invalid_configuration_exits_2(
    clean_env: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("BD_SYNC_MODE", "bidirectional")

    assert cli.main(["sync"]) == 2

    assert "Configuration error" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [["orphans"], ["orphans", "--json"], ["migrate"]])
def test_commands_without_workspace_do_not_create_one(
    clean_env: Path, capsys: pytest.CaptureFixture[str], argv: list[str]
) -> None:
    assert cli.main(argv) == 1

    assert "no workspace at .beads" in capsys.readouterr().err
    assert not (clean_env / ".beads").exists()
