"""Unit tests for the JSONL export."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import Mock

import pytest

from dolt_issue_sync.export import ExportError, export_issues_jsonl
from dolt_issue_sync.models import Issue
from dolt_issue_sync.storage.errors import StoreError
from dolt_issue_sync.storage.store import IssueStore


def _store(*issues: Issue) -> Mock:
    store = Mock(spec=IssueStore)
    store.list_issues.return_value = list(issues)
    return store


def test_export_writes_one_sorted_record_per_line(tmp_path: Path) -> None:
    path = tmp_path / ".beads" / "issues.jsonl"
    store = _store(
        Issue(id="bd-b", title="Second"),
        Issue(id="bd-a", title="First", status="closed", wisp_type="patrol"),
    )

    count = export_issues_jsonl(store, path)

    assert count == 2
    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert records == [
        {
            "id": "bd-a",
            "title": "First",
            "status": "closed",
            "ephemeral": False,
            "pinned": False,
            "wisp_type": "patrol",
        },
        {"id": "bd-b", "title": "Second", "status": "open", "ephemeral": False, "pinned": False},
    ]


def test_export_replaces_existing_file_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "issues.jsonl"
    path.write_text("stale\n", encoding="utf-8")

    export_issues_jsonl(_store(Issue(id="bd-1", title="One")), path)

    assert "stale" not in path.read_text(encoding="utf-8")
    assert [p.name for p in tmp_path.iterdir()] == ["issues.jsonl"]


def test_export_of_empty_store_writes_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "issues.jsonl"

    assert export_issues_jsonl(_store(), path) == 0
    assert path.read_text(encoding="utf-8") == ""


def test_export_read_failure_propagates_store_error(tmp_path: Path) -> None:
    store = _store()
    store.list_issues.side_effect = StoreError("no such table: issues")
    path = tmp_path / "issues.jsonl"

    with pytest.raises(StoreError):
        export_issues_jsonl(store, path)

    assert not path.exists()


def test_export_write_failure_raises_export_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(ExportError):
        export_issues_jsonl(_store(Issue(id="bd-1", title="One")), blocker / "issues.jsonl")
