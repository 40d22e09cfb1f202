"""fitstore CLI: operator console for inspecting and maintaining a fitness store."""

from __future__ import annotations

from typing import Optional

import typer

from fitstore.cli import daily, info, maintenance, migrate, profile, schema, sessions, verify
from fitstore.config import FitstoreConfig
from fitstore.logging import setup_logging

app = typer.Typer(
    name="fitstore",
    help="fitstore CLI: operator console for inspecting and maintaining a fitness store.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    db: str | None = None
    json_output: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        from fitstore import __version__

        print(f"fitstore {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    db: Optional[str] = typer.Option(
        None,
        "--db",
        envvar="FITSTORE_DB",
        help="SQLite database file path (default: fitstore.db)",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level (default: FITSTORE_LOG_LEVEL or WARNING)"
    ),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log format: console or json (default: FITSTORE_LOG_FORMAT)"
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all fitstore commands."""
    state.db = db
    state.json_output = json_output
    cfg = FitstoreConfig.from_env(log_level=log_level, log_format=log_format)
    setup_logging(level=cfg.log_level, log_format=cfg.log_format)
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


app.add_typer(sessions.app, name="sessions", help="Inspect and delete workout sessions")
app.add_typer(daily.app, name="daily", help="Inspect daily progress")
app.add_typer(schema.app, name="schema", help="Expected schema descriptor")

app.command(name="info")(info.info_cmd)
app.command(name="verify")(verify.verify_cmd)
app.command(name="migrate")(migrate.migrate_cmd)
app.command(name="profile")(profile.profile_cmd)
app.command(name="totals")(profile.totals_cmd)
app.command(name="clear")(maintenance.clear_cmd)


def main() -> None:
    """Entry point for the fitstore CLI."""
    app()
