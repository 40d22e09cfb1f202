"""Schema versioning: ordered migration steps, open-time validation, recreation."""

from __future__ import annotations

import os
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from fitstore.errors import (
    MigrationError,
    MissingMigrationError,
    SchemaMismatchError,
    TableSchemaDiff,
)
from fitstore.logging import get_logger
from fitstore.schema import (
    SCHEMA_VERSION,
    TABLES,
    diff_table,
    read_live_columns,
    schema_identity,
    table_exists,
)

__all__ = [
    "migration",
    "MigrationStep",
    "OpenReport",
    "open_database",
    "validate_schema",
    "stored_version",
    "plan_migrations",
    "recreate_database",
]

log = get_logger(__name__)

MigrationFunc = Callable[[sqlite3.Connection], None]


@dataclass(frozen=True)
class MigrationStep:
    from_version: int
    description: str
    func: MigrationFunc

    @property
    def to_version(self) -> int:
        return self.from_version + 1


_REGISTRY: dict[int, MigrationStep] = {}


def migration(*, from_version: int, description: str) -> Callable[[MigrationFunc], MigrationFunc]:
    """Decorator registering a function as the step from ``from_version`` to the next.

    Example::

        @migration(from_version=5, description="add heartRate column")
        def _add_heart_rate(conn):
            conn.execute("ALTER TABLE sessions ADD COLUMN heartRate INTEGER")
    """

    def decorator(func: MigrationFunc) -> MigrationFunc:
        if from_version in _REGISTRY:
            raise MigrationError(
                f"Duplicate migration from_version={from_version}: "
                f"{_REGISTRY[from_version].func.__qualname__} and {func.__qualname__}"
            )
        _REGISTRY[from_version] = MigrationStep(from_version, description, func)
        return func

    return decorator


# --- Ordered steps ---


@migration(from_version=1, description="create daily_progress")
def _create_daily_progress(conn: sqlite3.Connection) -> None:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS daily_progress ("
        "date TEXT NOT NULL PRIMARY KEY, "
        "pushups INTEGER NOT NULL DEFAULT 0, "
        "squats INTEGER NOT NULL DEFAULT 0, "
        "plankSeconds INTEGER NOT NULL DEFAULT 0, "
        "goalsMet INTEGER NOT NULL DEFAULT 0, "
        "lastUpdatedIso TEXT NOT NULL)"
    )


@migration(from_version=2, description="create user_profile")
def _create_user_profile(conn: sqlite3.Connection) -> None:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS user_profile ("
        "id INTEGER NOT NULL PRIMARY KEY, "
        "totalXp INTEGER NOT NULL DEFAULT 0)"
    )


@migration(from_version=3, description="add user_profile.name")
def _add_profile_name(conn: sqlite3.Connection) -> None:
    conn.execute("ALTER TABLE user_profile ADD COLUMN name TEXT NOT NULL DEFAULT ''")


@migration(from_version=4, description="add daily_progress bicep curl counts")
def _add_bicep_counts(conn: sqlite3.Connection) -> None:
    conn.execute("ALTER TABLE daily_progress ADD COLUMN bicepLeft INTEGER NOT NULL DEFAULT 0")
    conn.execute("ALTER TABLE daily_progress ADD COLUMN bicepRight INTEGER NOT NULL DEFAULT 0")


def _chain_migrations(from_version: int, to_version: int) -> list[MigrationStep]:
    """Collect the ordered steps from ``from_version`` up to ``to_version``.

    Raises MissingMigrationError if any step in the chain is missing.
    """
    missing: list[int] = []
    chain: list[MigrationStep] = []
    for v in range(from_version, to_version):
        step = _REGISTRY.get(v)
        if step is None:
            missing.append(v)
        else:
            chain.append(step)
    if missing:
        raise MissingMigrationError(missing)
    return chain


# --- Bookkeeping ---


@dataclass
class OpenReport:
    """How the database was brought to the current schema on open."""

    path: str  # 'fresh', 'fast', 'validated' or 'migrated'
    from_version: int
    to_version: int = SCHEMA_VERSION
    applied: list[str] = field(default_factory=list)


def _create_bookkeeping(conn: sqlite3.Connection) -> None:
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_migrations ("
        "version INTEGER PRIMARY KEY, "
        "description TEXT NOT NULL, "
        "applied_at TEXT NOT NULL)"
    )
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_meta (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
    )


def _read_marker(conn: sqlite3.Connection) -> str | None:
    if not table_exists(conn, "schema_meta"):
        return None
    row = conn.execute("SELECT value FROM schema_meta WHERE key = 'identity_hash'").fetchone()
    return str(row[0]) if row else None


def _write_marker(conn: sqlite3.Connection) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO schema_meta (key, value) VALUES ('identity_hash', ?)",
        (schema_identity(),),
    )
    conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")


def _record_version(conn: sqlite3.Connection, version: int, description: str) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO schema_migrations (version, description, applied_at) "
        "VALUES (?, ?, ?)",
        (version, description, datetime.now(timezone.utc).isoformat()),
    )


def stored_version(conn: sqlite3.Connection) -> int:
    """Return the recorded schema version, 0 when nothing is recorded."""
    if table_exists(conn, "schema_migrations"):
        row = conn.execute("SELECT MAX(version) FROM schema_migrations").fetchone()
        if row and row[0] is not None:
            return int(row[0])
    # Databases written before the migrations table existed only carry user_version.
    row = conn.execute("PRAGMA user_version").fetchone()
    return int(row[0]) if row else 0


def validate_schema(conn: sqlite3.Connection) -> list[TableSchemaDiff]:
    """Compare every expected table against what the engine reports."""
    diffs: list[TableSchemaDiff] = []
    for spec in TABLES:
        diff = diff_table(spec, read_live_columns(conn, spec.name))
        if diff is not None:
            diffs.append(diff)
    return diffs


def list_applied(conn: sqlite3.Connection) -> list[dict[str, Any]]:
    if not table_exists(conn, "schema_migrations"):
        return []
    rows = conn.execute(
        "SELECT version, description, applied_at FROM schema_migrations ORDER BY version"
    ).fetchall()
    return [{"version": r[0], "description": r[1], "applied_at": r[2]} for r in rows]


def _refuse_newer(version: int) -> None:
    if version > SCHEMA_VERSION:
        raise MigrationError(
            f"Database schema version {version} is newer than supported version {SCHEMA_VERSION}"
        )


def open_database(conn: sqlite3.Connection) -> OpenReport:
    """Bring ``conn`` to the current schema or fail.

    The connection must be in autocommit mode; all changes happen inside one
    IMMEDIATE transaction that is rolled back on any failure.
    """
    if _read_marker(conn) == schema_identity():
        log.debug("schema_fast_path", version=SCHEMA_VERSION)
        return OpenReport(path="fast", from_version=SCHEMA_VERSION)

    conn.execute("BEGIN IMMEDIATE")
    try:
        report = _open_in_transaction(conn)
        conn.execute("COMMIT")
    except Exception:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    log.info(
        "schema_opened",
        path=report.path,
        from_version=report.from_version,
        to_version=report.to_version,
        applied=report.applied,
    )
    return report


def _open_in_transaction(conn: sqlite3.Connection) -> OpenReport:
    marker = _read_marker(conn)
    version = stored_version(conn)
    has_tables = any(table_exists(conn, spec.name) for spec in TABLES)

    _create_bookkeeping(conn)

    if marker is None and version == 0 and not has_tables:
        for spec in TABLES:
            conn.execute(spec.ddl)
        _record_version(conn, SCHEMA_VERSION, "initial schema")
        _write_marker(conn)
        return OpenReport(path="fresh", from_version=0)

    _refuse_newer(version)

    report = OpenReport(path="validated", from_version=version)
    if version == 0:
        # Tables without any version record: adopt them if they validate.
        version = SCHEMA_VERSION
        report.from_version = SCHEMA_VERSION

    for step in _chain_migrations(version, SCHEMA_VERSION):
        step.func(conn)
        _record_version(conn, step.to_version, step.description)
        report.applied.append(f"v{step.from_version}->v{step.to_version}: {step.description}")
    if report.applied:
        report.path = "migrated"

    diffs = validate_schema(conn)
    if diffs:
        log.warning("schema_mismatch", tables=[d.table for d in diffs])
        raise SchemaMismatchError(diffs)

    if not list_applied(conn):
        _record_version(conn, SCHEMA_VERSION, "adopted existing schema")
    _write_marker(conn)
    return report


def recreate_database(db_path: str) -> list[str]:
    """Delete the database file and its WAL/SHM siblings. Returns removed paths.

    This is the destructive recovery a caller may choose after a
    SchemaMismatchError; the store never does it on its own.
    """
    if db_path == ":memory:":
        return []
    removed: list[str] = []
    for path in (db_path, f"{db_path}-wal", f"{db_path}-shm", f"{db_path}-journal"):
        if os.path.exists(path):
            os.remove(path)
            removed.append(path)
    log.warning("database_recreated", db_path=db_path, removed=removed)
    return removed


def plan_migrations(conn: sqlite3.Connection) -> list[MigrationStep]:
    """Ordered steps that opening ``conn`` would apply, without applying them.

    Raises MigrationError when the stored version is newer than this code.
    """
    version = stored_version(conn)
    _refuse_newer(version)
    if version == 0 or version >= SCHEMA_VERSION:
        return []
    return _chain_migrations(version, SCHEMA_VERSION)
