"""fitstore info — show database status and high-level metadata."""

from __future__ import annotations

from typing import Any

import typer

from fitstore.cli._output import print_object
from fitstore.cli._storage import open_repo


def info_cmd(
    stats: bool = typer.Option(False, "--stats", help="Show row counts per table"),
) -> None:
    """Show database status and high-level metadata."""
    from fitstore.cli import state

    json_mode = state.json_output
    repo = open_repo()

    try:
        data: dict[str, Any] = repo.storage_info()
        if stats:
            data["table_counts"] = repo.table_counts()

        if json_mode:
            print_object(data, json_mode=True)
            return

        print(f"Backend: {data['backend']}")
        print(f"Database: {data['db_path']}")
        if "file_size_bytes" in data:
            print(f"File size: {int(data['file_size_bytes']):,} bytes")
        print(f"Journal mode: {data['journal_mode']}")
        print(f"Schema version: {data['schema_version']}")
        print(f"Identity hash: {data['identity_hash']}")
        if stats:
            print("\nTable counts:")
            for name, cnt in data["table_counts"].items():
                print(f"  {name}: {cnt}")
    finally:
        repo.close()
