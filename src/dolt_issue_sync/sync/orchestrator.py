"""Best-effort sync: commit -> (export) -> push.

Each step reports a `StepResult` instead of raising. A failing step becomes a
warning and the next step still runs; only a `fatal` outcome stops the
pipeline. Sync tries to make as much progress as it can per invocation
rather than being all-or-nothing.

Precondition: the caller holds exclusive access to the store handle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from dolt_issue_sync.config import SyncMode, SyncSettings
from dolt_issue_sync.export.jsonl import ExportError, export_issues_jsonl
from dolt_issue_sync.storage.errors import StoreError, is_nothing_to_commit
from dolt_issue_sync.storage.store import DEFAULT_REMOTE, IssueStore

logger = logging.getLogger(__name__)


class StepOutcome(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    WARNING = "warning"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class StepResult:
    name: str
    outcome: StepOutcome
    message: str

    def to_json(self) -> dict[str, str]:
        return {"step": self.name, "outcome": self.outcome.value, "message": self.message}


@dataclass(slots=True)
class SyncReport:
    """Accumulated step results for one sync invocation."""

    steps: list[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not any(s.outcome is StepOutcome.FATAL for s in self.steps)

    @property
    def warnings(self) -> list[str]:
        return [s.message for s in self.steps if s.outcome is StepOutcome.WARNING]

    def outcome_of(self, name: str) -> StepOutcome | None:
        for step in self.steps:
            if step.name == name:
                return step.outcome
        return None

    def to_json(self) -> dict[str, object]:
        return {"ok": self.ok, "steps": [s.to_json() for s in self.steps]}


@dataclass(frozen=True, slots=True)
class SyncPlan:
    """Inputs shared by every step of one sync run."""

    mode: SyncMode
    export_path: Path
    actor: str
    remote: str = DEFAULT_REMOTE

    @property
    def commit_message(self) -> str:
        return f"bd sync (auto-commit) by {self.actor}"


Step = Callable[[IssueStore, SyncPlan], StepResult]


def commit_step(store: IssueStore, plan: SyncPlan) -> StepResult:
    """Commit pending local changes; a clean working set is success."""

    try:
        store.commit(plan.commit_message)
    except StoreError as e:
        if is_nothing_to_commit(e):
            return StepResult("commit", StepOutcome.SUCCESS, "nothing to commit")
        return StepResult("commit", StepOutcome.WARNING, f"commit failed: {e}")
    return StepResult("commit", StepOutcome.SUCCESS, "committed pending changes")


def export_step(store: IssueStore, plan: SyncPlan) -> StepResult:
    """Refresh the JSONL mirror; skipped in native mode."""

    if plan.mode is SyncMode.NATIVE:
        return StepResult("export", StepOutcome.SKIPPED, "native mode: no JSONL mirror")
    try:
        count = export_issues_jsonl(store, plan.export_path)
    except (StoreError, ExportError) as e:
        return StepResult("export", StepOutcome.WARNING, f"export failed: {e}")
    return StepResult(
        "export", StepOutcome.SUCCESS, f"exported {count} issue(s) to {plan.export_path}"
    )


def push_step(store: IssueStore, plan: SyncPlan) -> StepResult:
    """Push to the named remote when one is configured."""

    try:
        configured = store.has_remote(plan.remote)
    except StoreError as e:
        logger.debug("Remote lookup failed", extra={"remote": plan.remote, "error": str(e)})
        return StepResult("push", StepOutcome.SKIPPED, f"remote lookup failed: {e}")
    if not configured:
        return StepResult("push", StepOutcome.SKIPPED, f"no {plan.remote!r} remote configured")

    try:
        store.push(plan.remote)
    except StoreError as e:
        return StepResult("push", StepOutcome.WARNING, f"push failed: {e}")
    return StepResult("push", StepOutcome.SUCCESS, f"pushed to {plan.remote!r}")


DEFAULT_STEPS: tuple[Step, ...] = (commit_step, export_step, push_step)


class SyncOrchestrator:
    """Drive the sync steps against one open store."""

    def __init__(self, plan: SyncPlan, *, steps: Sequence[Step] = DEFAULT_STEPS) -> None:
        self.plan = plan
        self.steps = tuple(steps)

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> SyncOrchestrator:
        return cls(
            SyncPlan(
                mode=settings.sync_mode,
                export_path=settings.export_path,
                actor=settings.actor,
            )
        )

    def run(self, store: IssueStore | None) -> SyncReport:
        """Run every step in order.

        With no open store there is nothing to sync; the empty report counts
        as success.
        """

        report = SyncReport()
        if store is None:
            logger.debug("No store open; nothing to sync")
            return report

        for step in self.steps:
            result = step(store, self.plan)
            report.steps.append(result)
            self._log(result)
            if result.outcome is StepOutcome.FATAL:
                break
        return report

    def _log(self, result: StepResult) -> None:
        extra = {"step": result.name, "outcome": result.outcome.value}
        if result.outcome is StepOutcome.WARNING:
            logger.warning(result.message, extra=extra)
        elif result.outcome is StepOutcome.FATAL:
            logger.error(result.message, extra=extra)
        else:
            logger.info(result.message, extra=extra)
