"""CLI entrypoint.

Commands:
- sync:     commit pending changes, refresh the JSONL mirror, push to the remote
- migrate:  bring the schema up to date and report which migrations ran
- orphans:  list child issues whose parent no longer exists (read-only)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from pydantic import ValidationError

from dolt_issue_sync import __version__
from dolt_issue_sync.config import SyncSettings
from dolt_issue_sync.logging import configure_logging
from dolt_issue_sync.session import bring_up_schema, open_store, store_session
from dolt_issue_sync.storage.errors import MigrationError, StoreError
from dolt_issue_sync.storage.migrations import format_orphan_report, query_orphaned_children
from dolt_issue_sync.sync.orchestrator import StepOutcome, SyncOrchestrator

logger = logging.getLogger(__name__)

# Kept so old invocations (hooks, scripts) don't error out.
_DEPRECATED_SYNC_FLAGS: list[tuple[tuple[str, ...], str]] = [
    (("-m", "--message"), "Deprecated: no-op"),
    (("--dry-run",), "Deprecated: no-op"),
    (("--no-push",), "Deprecated: no-op"),
    (("--import",), "Deprecated: use 'bd import' instead"),
    (("--import-only",), "Deprecated: use 'bd import' instead"),
    (("--export",), "Deprecated: use 'bd export' instead"),
    (("--flush-only",), "Deprecated: no-op"),
    (("--pull",), "Deprecated: use 'bd dolt pull' instead"),
    (("--no-git-history",), "Deprecated: no-op"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bd-sync",
        description="Schema bring-up, orphan detection and sync for the issue store",
    )
    parser.add_argument("--version", action="version", version=f"dolt-issue-sync {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser(
        "sync",
        help="Commit pending changes and export to JSONL",
        description=(
            "1. Commits any pending changes. "
            "2. Exports the database to JSONL (skipped in native mode). "
            "3. Pushes to the 'origin' remote if configured. "
            "Step failures are printed as warnings; the command still succeeds."
        ),
    )
    for flags, help_text in _DEPRECATED_SYNC_FLAGS:
        dest = "deprecated_" + flags[-1].lstrip("-").replace("-", "_")
        if flags[-1] == "--message":
            sync.add_argument(*flags, dest=dest, default=None, help=help_text)
        else:
            sync.add_argument(*flags, dest=dest, action="store_true", help=help_text)
    sync.add_argument("--json", action="store_true", help="Output in JSON format")

    subparsers.add_parser("migrate", help="Apply schema migrations")

    orphans = subparsers.add_parser(
        "orphans",
        help="Report child issues whose parent issue no longer exists",
    )
    orphans.add_argument("--json", action="store_true", help="Output in JSON format")

    return parser


def _used_deprecated_flags(args: argparse.Namespace) -> list[str]:
    return [
        name.removeprefix("deprecated_")
        for name, value in vars(args).items()
        if name.startswith("deprecated_") and value not in (None, False)
    ]


def _run_sync(settings: SyncSettings, args: argparse.Namespace) -> int:
    ignored = _used_deprecated_flags(args)
    if ignored:
        logger.debug("Ignoring deprecated sync flags", extra={"flags": ignored})

    orchestrator = SyncOrchestrator.from_settings(settings)
    if not settings.metadata_dir.is_dir():
        # No workspace, so no store to open: nothing to sync.
        report = orchestrator.run(None)
    else:
        with store_session(settings) as store:
            report = orchestrator.run(store)

    if args.json:
        print(json.dumps(report.to_json(), indent=2))
    for step in report.steps:
        if step.outcome is StepOutcome.WARNING:
            print(f"Warning: {step.message}", file=sys.stderr)
        elif step.name == "push" and step.outcome is StepOutcome.SUCCESS:
            print("Pushed to Dolt remote", file=sys.stderr)

    return 0 if report.ok else 1


def _workspace_missing(settings: SyncSettings) -> bool:
    if settings.metadata_dir.is_dir():
        return False
    print(
        f"Error: no workspace at {settings.metadata_dir} (set BEADS_DIR)",
        file=sys.stderr,
    )
    return True


def _run_migrate(settings: SyncSettings) -> int:
    if _workspace_missing(settings):
        return 1

    store = open_store(settings)
    try:
        applied = bring_up_schema(store)
    finally:
        store.close()
    for name in applied:
        print(name)
    return 0


def _run_orphans(settings: SyncSettings, args: argparse.Namespace) -> int:
    if _workspace_missing(settings):
        return 1

    with store_session(settings) as store:
        orphans = query_orphaned_children(store.db)

    if args.json:
        print(json.dumps([o.to_json() for o in orphans], indent=2))
    elif orphans:
        print("\n".join(format_orphan_report(orphans)))
    else:
        print("No orphaned child issues found")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = SyncSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    try:
        if args.command == "sync":
            return _run_sync(settings, args)
        if args.command == "migrate":
            return _run_migrate(settings)
        if args.command == "orphans":
            return _run_orphans(settings, args)

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except MigrationError as e:
        logger.error(str(e), extra={"migration": e.migration})
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except StoreError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
