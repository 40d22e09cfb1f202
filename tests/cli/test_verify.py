"""Tests for fitstore verify command."""

import json
import sqlite3

from fitstore.cli import _exitcodes as ec
from tests.cli.conftest import bump_recorded_version, invoke
from tests.conftest import make_legacy_db


def test_verify_ok(runner, seeded_db):
    result = invoke(runner, ["verify"], seeded_db)
    assert result.exit_code == 0
    assert "Schema OK" in result.output


def test_verify_json(runner, seeded_db):
    result = invoke(runner, ["--json", "verify"], seeded_db)
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["status"] == "ok"
    assert data["schema_version"] == 5


def test_verify_legacy_reports_pending(runner, cli_db):
    make_legacy_db(cli_db, version=1)
    result = invoke(runner, ["--json", "verify"], cli_db)
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["status"] == "mismatch"
    assert data["schema_version"] == 1
    assert len(data["pending_migrations"]) == 4
    assert {d["table"] for d in data["diffs"]} == {"daily_progress", "user_profile"}


def test_verify_does_not_migrate(runner, cli_db):
    make_legacy_db(cli_db, version=1)
    invoke(runner, ["verify"], cli_db)
    conn = sqlite3.connect(cli_db)
    try:
        assert conn.execute("PRAGMA user_version").fetchone()[0] == 1
    finally:
        conn.close()


def test_verify_strict_mismatch(runner, cli_db):
    make_legacy_db(cli_db, version=1)
    result = invoke(runner, ["verify", "--strict"], cli_db)
    assert result.exit_code == ec.SCHEMA_MISMATCH
    assert "Missing columns" in result.output or "Table missing" in result.output


def test_verify_missing_db(runner, tmp_path):
    result = invoke(runner, ["verify"], str(tmp_path / "nope.db"))
    assert result.exit_code == ec.DATABASE_ERROR


def test_verify_refuses_newer_db(runner, seeded_db):
    bump_recorded_version(seeded_db, 9)
    result = invoke(runner, ["verify"], seeded_db)
    assert result.exit_code == ec.SCHEMA_MISMATCH
    assert "newer than supported version 5" in result.output
    assert "Schema OK" not in result.output
