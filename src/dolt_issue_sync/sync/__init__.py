"""Sync pipeline between the versioned store, the JSONL mirror and the remote."""

from dolt_issue_sync.sync.orchestrator import (
    StepOutcome,
    StepResult,
    SyncOrchestrator,
    SyncPlan,
    SyncReport,
)

__all__ = ["StepOutcome", "StepResult", "SyncOrchestrator", "SyncPlan", "SyncReport"]
