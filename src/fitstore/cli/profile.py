"""fitstore profile / totals — the user profile and session aggregates."""

from __future__ import annotations

from typing import Any, Optional

import typer

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error, print_object, to_data
from fitstore.cli._storage import open_repo
from fitstore.errors import FitstoreError


def profile_cmd() -> None:
    """Show the stored user profile."""
    from fitstore.cli import state

    repo = open_repo()
    try:
        record = repo.get_profile()
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()

    if record is None:
        print_error("No profile stored")
        raise typer.Exit(ec.NOT_FOUND)
    print_object(to_data(record), json_mode=state.json_output)


def totals_cmd(
    exercise: Optional[list[str]] = typer.Option(
        None, "--exercise", help="Report summed reps for this exercise (repeatable)"
    ),
) -> None:
    """Show session count, total XP and per-exercise rep sums.

    Aggregates over no matching rows print as null, not zero.
    """
    from fitstore.cli import state

    repo = open_repo()
    try:
        data: dict[str, Any] = {
            "session_count": repo.count_sessions(),
            "total_xp": repo.sum_total_xp(),
        }
        if exercise:
            data["reps"] = {name: repo.sum_reps_for_exercise(name) for name in exercise}
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()

    if state.json_output:
        print_object(data, json_mode=True)
        return
    print(f"Sessions: {data['session_count']}")
    print(f"Total XP: {_fmt(data['total_xp'])}")
    for name, reps in data.get("reps", {}).items():
        print(f"Reps ({name}): {_fmt(reps)}")


def _fmt(value: int | None) -> str:
    return "(none)" if value is None else str(value)
