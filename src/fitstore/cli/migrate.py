"""fitstore migrate — plan and apply schema migration, or recreate the database."""

from __future__ import annotations

import sqlite3
from typing import Any

import typer

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error, print_object
from fitstore.cli._storage import cli_config, open_repo, require_existing_db
from fitstore.errors import MigrationError
from fitstore.migration import plan_migrations, recreate_database, stored_version
from fitstore.schema import SCHEMA_VERSION


def migrate_cmd(
    apply: bool = typer.Option(False, "--apply", help="Execute migration (default: dry-run)"),
    recreate: bool = typer.Option(
        False, "--recreate", help="Delete the database and create an empty one"
    ),
    yes: bool = typer.Option(False, "--yes", help="Confirm a destructive --recreate"),
) -> None:
    """Plan and optionally apply pending schema migrations."""
    from fitstore.cli import state

    json_mode = state.json_output

    if recreate:
        if not yes:
            print_error("--recreate deletes all data; pass --yes to confirm")
            raise typer.Exit(ec.USAGE_ERROR)
        removed = recreate_database(cli_config().db_path)
        repo = open_repo(must_exist=False)
        try:
            report = repo.open_report
        finally:
            repo.close()
        print_object(
            {"recreated": True, "removed": removed, "path": report.path},
            json_mode=json_mode,
        )
        return

    db_path = require_existing_db()

    if not apply:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
        try:
            version = stored_version(conn)
            steps = plan_migrations(conn)
        except MigrationError as e:
            print_error(str(e))
            raise typer.Exit(ec.SCHEMA_MISMATCH)
        finally:
            conn.close()

        plan: dict[str, Any] = {
            "stored_version": version,
            "target_version": SCHEMA_VERSION,
            "steps": [f"v{s.from_version}->v{s.to_version}: {s.description}" for s in steps],
        }
        if json_mode:
            print_object(plan, json_mode=True)
        elif not steps:
            print("No pending migrations.")
        else:
            print(f"Migration plan (v{version} -> v{SCHEMA_VERSION}):")
            for step in plan["steps"]:
                print(f"  {step}")
            print("\nRe-run with --apply to execute.")
        return

    repo = open_repo()
    try:
        report = repo.open_report
    finally:
        repo.close()
    print_object(
        {
            "path": report.path,
            "from_version": report.from_version,
            "to_version": report.to_version,
            "applied": report.applied,
        },
        json_mode=json_mode,
    )
