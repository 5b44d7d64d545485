"""Dolt issue sync.

Schema bring-up, orphan detection and sync for a versioned issue store:
- state-probing, idempotent schema migrations
- advisory detection of child issues whose parent row is gone
- a best-effort commit -> export -> push sync pipeline
"""

__version__ = "0.1.0"

from dolt_issue_sync.config import SyncMode, SyncSettings

__all__ = ["__version__", "SyncMode", "SyncSettings"]
