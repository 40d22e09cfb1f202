"""CLI helpers for repository construction."""

from __future__ import annotations

import os

import typer

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error
from fitstore.config import FitstoreConfig
from fitstore.errors import FitstoreError, SchemaMismatchError
from fitstore.storage import Repository


def cli_config() -> FitstoreConfig:
    """Build the store config from CLI state and FITSTORE_* environment defaults."""
    from fitstore.cli import state

    return FitstoreConfig.from_env(db_path=state.db)


def require_existing_db() -> str:
    """Return the selected database path, exiting when the file does not exist."""
    db_path = cli_config().db_path
    if db_path != ":memory:" and not os.path.exists(db_path):
        print_error(f"Database not found: {db_path}")
        raise typer.Exit(ec.DATABASE_ERROR)
    return db_path


def open_repo(*, must_exist: bool = True) -> Repository:
    """Open the repository selected by the global CLI options."""
    if must_exist:
        require_existing_db()
    try:
        return Repository(config=cli_config())
    except SchemaMismatchError as e:
        print_error(str(e))
        raise typer.Exit(ec.SCHEMA_MISMATCH)
    except FitstoreError as e:
        print_error(f"Cannot open database: {e}")
        raise typer.Exit(ec.DATABASE_ERROR)
