"""Static table descriptors, schema identity hash and live-schema comparison."""

from __future__ import annotations

import hashlib
import json
import sqlite3
from dataclasses import dataclass
from typing import Any

from fitstore.errors import TableSchemaDiff

SCHEMA_VERSION = 5

SESSIONS = "sessions"
DAILY_PROGRESS = "daily_progress"
USER_PROFILE = "user_profile"


@dataclass(frozen=True)
class ColumnSpec:
    """One expected column: on-disk name, declared type, nullability, PK position."""

    name: str
    attr: str
    type: str
    notnull: bool = True
    pk: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {"type": self.type, "notnull": self.notnull, "pk": self.pk}


@dataclass(frozen=True)
class TableSpec:
    """Expected layout of one table plus the DDL that creates it."""

    name: str
    columns: tuple[ColumnSpec, ...]
    ddl: str

    def column_map(self) -> dict[str, dict[str, Any]]:
        return {c.name: c.as_dict() for c in self.columns}

    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


TABLES: tuple[TableSpec, ...] = (
    TableSpec(
        name=SESSIONS,
        columns=(
            ColumnSpec("id", "id", "INTEGER", pk=1),
            ColumnSpec("timestampIso", "timestamp_iso", "TEXT"),
            ColumnSpec("exercise", "exercise", "TEXT"),
            ColumnSpec("reps", "reps", "INTEGER"),
            ColumnSpec("durationSeconds", "duration_seconds", "REAL"),
            ColumnSpec("totalXp", "total_xp", "INTEGER"),
        ),
        ddl=(
            "CREATE TABLE IF NOT EXISTS `sessions` ("
            "`id` INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL, "
            "`timestampIso` TEXT NOT NULL, "
            "`exercise` TEXT NOT NULL, "
            "`reps` INTEGER NOT NULL, "
            "`durationSeconds` REAL NOT NULL, "
            "`totalXp` INTEGER NOT NULL)"
        ),
    ),
    TableSpec(
        name=DAILY_PROGRESS,
        columns=(
            ColumnSpec("date", "date", "TEXT", pk=1),
            ColumnSpec("pushups", "pushups", "INTEGER"),
            ColumnSpec("squats", "squats", "INTEGER"),
            ColumnSpec("plankSeconds", "plank_seconds", "INTEGER"),
            ColumnSpec("bicepLeft", "bicep_left", "INTEGER"),
            ColumnSpec("bicepRight", "bicep_right", "INTEGER"),
            ColumnSpec("goalsMet", "goals_met", "INTEGER"),
            ColumnSpec("lastUpdatedIso", "last_updated_iso", "TEXT"),
        ),
        ddl=(
            "CREATE TABLE IF NOT EXISTS `daily_progress` ("
            "`date` TEXT NOT NULL, "
            "`pushups` INTEGER NOT NULL, "
            "`squats` INTEGER NOT NULL, "
            "`plankSeconds` INTEGER NOT NULL, "
            "`bicepLeft` INTEGER NOT NULL, "
            "`bicepRight` INTEGER NOT NULL, "
            "`goalsMet` INTEGER NOT NULL, "
            "`lastUpdatedIso` TEXT NOT NULL, "
            "PRIMARY KEY(`date`))"
        ),
    ),
    TableSpec(
        name=USER_PROFILE,
        columns=(
            ColumnSpec("id", "id", "INTEGER", pk=1),
            ColumnSpec("totalXp", "total_xp", "INTEGER"),
            ColumnSpec("name", "name", "TEXT"),
        ),
        # The CHECK pins the table to the single profile slot.
        ddl=(
            "CREATE TABLE IF NOT EXISTS `user_profile` ("
            "`id` INTEGER NOT NULL CHECK (`id` = 1), "
            "`totalXp` INTEGER NOT NULL, "
            "`name` TEXT NOT NULL, "
            "PRIMARY KEY(`id`))"
        ),
    ),
)

TABLES_BY_NAME: dict[str, TableSpec] = {t.name: t for t in TABLES}


def schema_descriptor() -> dict[str, Any]:
    """Structural description of the expected schema."""
    return {
        "version": SCHEMA_VERSION,
        "tables": {t.name: t.column_map() for t in TABLES},
    }


def schema_identity() -> str:
    """Compute deterministic SHA-256 hash of the schema descriptor."""
    canonical = json.dumps(schema_descriptor(), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def read_live_columns(conn: sqlite3.Connection, table: str) -> dict[str, dict[str, Any]]:
    """Return the column set the engine reports for ``table`` (empty if absent)."""
    rows = conn.execute(f"PRAGMA table_info(`{table}`)").fetchall()
    return {
        str(r[1]): {"type": str(r[2]).upper(), "notnull": bool(r[3]), "pk": int(r[5])}
        for r in rows
    }


def diff_table(spec: TableSpec, live: dict[str, dict[str, Any]]) -> TableSchemaDiff | None:
    """Compare expected and live columns; None when they match exactly."""
    expected = spec.column_map()
    missing = sorted(set(expected) - set(live))
    unexpected = sorted(set(live) - set(expected))
    changed: dict[str, dict[str, Any]] = {}
    for name in set(expected) & set(live):
        if expected[name] != live[name]:
            changed[name] = {"expected": expected[name], "found": live[name]}

    if not missing and not unexpected and not changed:
        return None
    return TableSchemaDiff(
        table=spec.name,
        expected=expected,
        found=live,
        missing_columns=missing,
        unexpected_columns=unexpected,
        changed_columns=changed,
    )


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name = ?",
        (table,),
    ).fetchone()
    return row is not None
