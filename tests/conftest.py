"""Shared test fixtures for fitstore tests."""

from __future__ import annotations

import sqlite3

import pytest

from fitstore.storage import Repository

# Room-era layouts, one script per schema version, as written by the mobile app.
LEGACY_SESSIONS_DDL = (
    "CREATE TABLE IF NOT EXISTS `sessions` ("
    "`id` INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL, `timestampIso` TEXT NOT NULL, "
    "`exercise` TEXT NOT NULL, `reps` INTEGER NOT NULL, "
    "`durationSeconds` REAL NOT NULL, `totalXp` INTEGER NOT NULL)"
)

LEGACY_V5_DDL = [
    LEGACY_SESSIONS_DDL,
    "CREATE TABLE IF NOT EXISTS `daily_progress` (`date` TEXT NOT NULL, "
    "`pushups` INTEGER NOT NULL, `squats` INTEGER NOT NULL, `plankSeconds` INTEGER NOT NULL, "
    "`bicepLeft` INTEGER NOT NULL, `bicepRight` INTEGER NOT NULL, `goalsMet` INTEGER NOT NULL, "
    "`lastUpdatedIso` TEXT NOT NULL, PRIMARY KEY(`date`))",
    "CREATE TABLE IF NOT EXISTS `user_profile` (`id` INTEGER NOT NULL, "
    "`totalXp` INTEGER NOT NULL, `name` TEXT NOT NULL, PRIMARY KEY(`id`))",
    "CREATE TABLE IF NOT EXISTS room_master_table (id INTEGER PRIMARY KEY,identity_hash TEXT)",
]


def make_legacy_db(path: str, *, version: int) -> None:
    """Write a database the way the v1 app did, then record ``version``.

    Only version 1 (sessions only) and version 5 (full layout) are built here;
    other versions are reached by the store's own migration steps.
    """
    conn = sqlite3.connect(path)
    try:
        if version == 5:
            for ddl in LEGACY_V5_DDL:
                conn.execute(ddl)
        else:
            conn.execute(LEGACY_SESSIONS_DDL)
        conn.execute(
            "INSERT INTO sessions (timestampIso, exercise, reps, durationSeconds, totalXp) "
            "VALUES ('2024-03-01T08:00:00Z', 'pushups', 12, 30.5, 1)"
        )
        conn.execute(f"PRAGMA user_version = {version}")
        conn.commit()
    finally:
        conn.close()


@pytest.fixture
def tmp_db(tmp_path):
    """Create a temporary SQLite database path."""
    return str(tmp_path / "test.db")


@pytest.fixture
def repo(tmp_db):
    """Create a Repository instance with a temporary database."""
    r = Repository(tmp_db)
    yield r
    r.close()
