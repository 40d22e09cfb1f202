"""fitstore schema — print the expected schema descriptor."""

from __future__ import annotations

import json
from typing import Any

import typer
import yaml

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error
from fitstore.schema import TABLES, schema_descriptor, schema_identity

app = typer.Typer(no_args_is_help=True)


@app.command(name="show")
def schema_show_cmd(
    fmt: str = typer.Option("json", "--format", help="Output format: json or yaml"),
    with_hash: bool = typer.Option(False, "--with-hash", help="Include schema identity hash"),
    with_ddl: bool = typer.Option(False, "--with-ddl", help="Include CREATE TABLE statements"),
) -> None:
    """Show the schema this version of fitstore expects on disk."""
    if fmt not in ("json", "yaml"):
        print_error("--format must be 'json' or 'yaml'")
        raise typer.Exit(ec.USAGE_ERROR)

    data: dict[str, Any] = schema_descriptor()
    if with_hash:
        data["identity_hash"] = schema_identity()
    if with_ddl:
        data["ddl"] = {t.name: t.ddl for t in TABLES}

    if fmt == "yaml":
        print(yaml.safe_dump(data, sort_keys=False, default_flow_style=False), end="")
    else:
        print(json.dumps(data, indent=2))
