"""fitstore clear — delete all rows and reclaim disk space."""

from __future__ import annotations

import typer

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error, print_object
from fitstore.cli._storage import open_repo
from fitstore.errors import FitstoreError


def clear_cmd(
    yes: bool = typer.Option(False, "--yes", help="Confirm deletion of all rows"),
) -> None:
    """Remove every session, daily progress row and the profile, then compact."""
    from fitstore.cli import state

    if not yes:
        print_error("clear deletes all data; pass --yes to confirm")
        raise typer.Exit(ec.USAGE_ERROR)

    repo = open_repo()
    try:
        vacuumed = repo.clear_all()
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()
    print_object({"cleared": True, "vacuumed": vacuumed}, json_mode=state.json_output)
