"""Configuration for store sessions and sync.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Variable names follow the `bd` conventions (`BEADS_DIR`, `BD_*`) so an existing
workspace can be pointed at without renaming anything.
"""

from __future__ import annotations

import getpass
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SyncMode(str, Enum):
    """How the versioned store relates to the flat-file export.

    NATIVE: the versioned store is authoritative; no JSONL mirror is written.
    MIRROR: a JSONL export is refreshed on every sync as an interchange artefact.
    """

    NATIVE = "native"
    MIRROR = "mirror"


def _default_actor() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


class SyncSettings(BaseSettings):
    """Settings for opening the issue store and running sync.

    Environment variables:
    - BD_BACKEND        (sqlite | dolt)
    - BEADS_DIR         metadata directory holding the export and SQLite file
    - BD_SQLITE_PATH    (optional)
    - BD_DOLT_HOST / BD_DOLT_PORT / BD_DOLT_USER / BD_DOLT_PASSWORD / BD_DOLT_DATABASE
    - BD_SYNC_MODE      (native | mirror)
    - BD_ACTOR          (optional)
    - LOG_LEVEL         (optional)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `SyncSettings(_env_file=path_to_env)`.
    """

    backend: Literal["sqlite", "dolt"] = Field(
        default="sqlite",
        validation_alias="BD_BACKEND",
        description="Relational engine holding the issues table",
    )

    metadata_dir: Path = Field(
        default=Path(".beads"),
        validation_alias="BEADS_DIR",
        description="Project metadata directory (export file, local database)",
    )

    sqlite_path: Path | None = Field(
        default=None,
        validation_alias="BD_SQLITE_PATH",
        description="SQLite database file; defaults to <metadata_dir>/beads.db",
    )

    dolt_host: str = Field(default="127.0.0.1", validation_alias="BD_DOLT_HOST")
    dolt_port: int = Field(default=3307, gt=0, validation_alias="BD_DOLT_PORT")
    dolt_user: str = Field(default="root", validation_alias="BD_DOLT_USER")
    dolt_password: str = Field(default="", validation_alias="BD_DOLT_PASSWORD")
    dolt_database: str = Field(default="beads", validation_alias="BD_DOLT_DATABASE")

    sync_mode: SyncMode = Field(
        default=SyncMode.MIRROR,
        validation_alias="BD_SYNC_MODE",
        description="native skips the JSONL export; mirror keeps it current",
    )

    actor: str = Field(
        default_factory=_default_actor,
        validation_alias="BD_ACTOR",
        description="Name recorded in auto-commit messages",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def sqlite_file(self) -> Path:
        """Path of the SQLite database used by the sqlite backend."""

        return self.sqlite_path or self.metadata_dir / "beads.db"

    @property
    def export_path(self) -> Path:
        """Path where the JSONL mirror is written."""

        return self.metadata_dir / "issues.jsonl"
