"""JSONL export of the issues table.

One JSON object per line, sorted by issue ID, written atomically so a reader
never sees a half-written file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from dolt_issue_sync.storage.store import IssueStore

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Raised when the export file cannot be written."""


def export_issues_jsonl(store: IssueStore, path: Path) -> int:
    """Write every issue in `store` to `path`.

    Returns:
        Number of issues written.

    Raises:
        StoreError: issues could not be read.
        ExportError: the file could not be written.
    """

    issues = sorted(store.list_issues(), key=lambda issue: issue.id)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise ExportError(f"Failed to prepare {path}: {e}") from e

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as temp_file:
            for issue in issues:
                temp_file.write(issue.model_dump_json(exclude_none=True) + "\n")
        os.replace(temp_path, path)
    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise ExportError(f"Failed to write to {path}: {e}") from e

    logger.info("Exported issues", extra={"path": str(path), "count": len(issues)})
    return len(issues)
