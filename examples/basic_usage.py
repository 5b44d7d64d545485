#!/usr/bin/env python3
"""Programmatic sync example.

This drives the components directly instead of going through `bd-sync`:

* load settings from `.env`
* open the store and bring its schema up to date
* record an issue
* run one sync (commit, JSONL export in mirror mode, push if `origin` exists)

The workspace directory is passed as an argument and overrides `BEADS_DIR`.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from dolt_issue_sync.config import SyncSettings
from dolt_issue_sync.logging import configure_logging
from dolt_issue_sync.session import store_session
from dolt_issue_sync.sync import SyncOrchestrator


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Record an issue and sync (programmatic example).")
    parser.add_argument("--workspace", type=Path, default=Path(".beads"), help="Metadata directory")
    parser.add_argument("--id", required=True, help='Issue ID, e.g. "bd-abc123" or "bd-abc123.1"')
    parser.add_argument("--title", required=True, help="Issue title")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = SyncSettings(metadata_dir=args.workspace)
    configure_logging(settings.log_level)
    settings.metadata_dir.mkdir(parents=True, exist_ok=True)

    with store_session(settings) as store:
        placeholder = store.db.dialect.placeholder
        store.db.exec(
            f"INSERT INTO issues (id, title) VALUES ({placeholder}, {placeholder})",
            (args.id, args.title),
        )
        report = SyncOrchestrator.from_settings(settings).run(store)

    for step in report.steps:
        print(f"{step.name}: {step.outcome.value} ({step.message})")
    return 0 if report.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
