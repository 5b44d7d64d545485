"""SQL dialects for the engines the issue store runs on.

Only what differs between engines lives here: the parameter placeholder and
the catalog queries used for schema introspection. Everything else (the issues
DDL, the wisp_type column add) is written in the common subset of SQLite and
MySQL/Dolt.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Dialect:
    name: str
    placeholder: str
    table_exists_sql: str
    column_exists_sql: str


SQLITE = Dialect(
    name="sqlite",
    placeholder="?",
    table_exists_sql="SELECT COUNT(*) FROM sqlite_master WHERE type = 'table' AND name = ?",
    column_exists_sql="SELECT COUNT(*) FROM pragma_table_info(?) WHERE name = ?",
)

# Dolt speaks the MySQL wire protocol and exposes information_schema.
MYSQL = Dialect(
    name="mysql",
    placeholder="%s",
    table_exists_sql=(
        "SELECT COUNT(*) FROM information_schema.tables "
        "WHERE table_schema = DATABASE() AND table_name = %s"
    ),
    column_exists_sql=(
        "SELECT COUNT(*) FROM information_schema.columns "
        "WHERE table_schema = DATABASE() AND table_name = %s AND column_name = %s"
    ),
)
