"""fitstore verify — compare the live database schema with the expected schema."""

from __future__ import annotations

import sqlite3
from typing import Any

import typer

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error, print_object
from fitstore.cli._storage import require_existing_db
from fitstore.errors import MigrationError
from fitstore.migration import plan_migrations, stored_version, validate_schema
from fitstore.schema import SCHEMA_VERSION


def verify_cmd(
    strict: bool = typer.Option(False, "--strict", help="Non-zero exit on any mismatch"),
) -> None:
    """Verify the live schema without opening (and so without migrating) the store."""
    from fitstore.cli import state

    json_mode = state.json_output
    db_path = require_existing_db()

    try:
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
    except sqlite3.Error as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)

    try:
        version = stored_version(conn)
        pending = [s.description for s in plan_migrations(conn)]
        diffs = validate_schema(conn)
    except MigrationError as e:
        print_error(str(e))
        raise typer.Exit(ec.SCHEMA_MISMATCH)
    except sqlite3.Error as e:
        print_error(f"Cannot read database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)
    finally:
        conn.close()

    if not diffs:
        if json_mode:
            print_object(
                {"status": "ok", "schema_version": version, "diffs": []}, json_mode=True
            )
        else:
            print(f"Schema OK — version {version}, no mismatches found.")
        return

    diffs_data: list[dict[str, Any]] = []
    for d in diffs:
        diff_info: dict[str, Any] = {"table": d.table}
        if d.missing_columns:
            diff_info["missing_columns"] = d.missing_columns
        if d.unexpected_columns:
            diff_info["unexpected_columns"] = d.unexpected_columns
        if d.changed_columns:
            diff_info["changed_columns"] = d.changed_columns
        diffs_data.append(diff_info)

    if json_mode:
        print_object(
            {
                "status": "mismatch",
                "schema_version": version,
                "expected_version": SCHEMA_VERSION,
                "pending_migrations": pending,
                "diffs": diffs_data,
            },
            json_mode=True,
        )
    else:
        print(f"Schema mismatch — {len(diffs)} table(s) differ (stored v{version}):")
        for d in diffs:
            print(f"\n  table '{d.table}':")
            if not d.found:
                print("    Table missing")
            if d.missing_columns:
                print(f"    Missing columns: {', '.join(d.missing_columns)}")
            if d.unexpected_columns:
                print(f"    Unexpected columns: {', '.join(d.unexpected_columns)}")
            for name, change in d.changed_columns.items():
                print(f"    Changed '{name}': {change}")
        if pending:
            print(f"\nPending migrations: {', '.join(pending)}")

    if strict:
        raise typer.Exit(ec.SCHEMA_MISMATCH)
