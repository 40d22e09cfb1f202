"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from fitstore.cli import app
from fitstore.storage import Repository
from fitstore.types import DailyProgress, UserProfile, WorkoutSession

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_db(tmp_path):
    """Create a temp DB path for the CLI to use."""
    return str(tmp_path / "cli_test.db")


@pytest.fixture
def seeded_db(cli_db):
    """Create a DB with some seed data."""
    repo = Repository(cli_db)
    repo.insert_session(
        WorkoutSession(
            timestamp_iso="2024-03-01T08:00:00Z",
            exercise="pushups",
            reps=20,
            duration_seconds=40.0,
            total_xp=2,
        )
    )
    repo.insert_session(
        WorkoutSession(
            timestamp_iso="2024-03-01T09:00:00Z",
            exercise="pushups",
            reps=15,
            duration_seconds=35.0,
            total_xp=1,
        )
    )
    repo.insert_session(
        WorkoutSession(
            timestamp_iso="2024-03-02T08:00:00Z",
            exercise="squats",
            reps=30,
            duration_seconds=60.0,
            total_xp=3,
        )
    )
    repo.upsert_daily(DailyProgress(date="2024-03-01", pushups=35, goals_met=True))
    repo.upsert_daily(DailyProgress(date="2024-03-02", squats=30, goals_met=True))
    repo.upsert_profile(UserProfile(total_xp=6, name="Alice"))
    repo.close()
    return cli_db


def invoke(runner: CliRunner, args: list[str], db_path: str | None = None) -> "Result":
    """Invoke CLI with proper state setup."""
    if db_path:
        # Inject --db before subcommand
        args = ["--db", db_path] + args
    result = runner.invoke(app, args, catch_exceptions=False)
    return result


def bump_recorded_version(db_path: str, version: int) -> None:
    """Record ``version`` the way a newer fitstore release would."""
    import sqlite3

    conn = sqlite3.connect(db_path)
    conn.execute(
        "INSERT INTO schema_migrations (version, description, applied_at) "
        "VALUES (?, 'future', '2030-01-01T00:00:00+00:00')",
        (version,),
    )
    conn.execute("UPDATE schema_meta SET value = 'future' WHERE key = 'identity_hash'")
    conn.commit()
    conn.close()
