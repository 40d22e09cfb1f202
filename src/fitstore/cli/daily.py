"""fitstore daily — inspect per-day progress."""

from __future__ import annotations

from typing import Optional

import typer

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error, print_object, print_records, to_data
from fitstore.cli._storage import open_repo
from fitstore.errors import FitstoreError

app = typer.Typer(no_args_is_help=True)


@app.command(name="show")
def daily_show_cmd(day: str = typer.Argument(..., help="Date (YYYY-MM-DD)")) -> None:
    """Show progress for one date."""
    from fitstore.cli import state

    repo = open_repo()
    try:
        record = repo.get_daily(day)
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()

    if record is None:
        print_error(f"No progress recorded for {day}")
        raise typer.Exit(ec.NOT_FOUND)
    print_object(to_data(record), json_mode=state.json_output)


@app.command(name="recent")
def daily_recent_cmd(
    limit: Optional[int] = typer.Option(None, "--limit", help="Number of most recent days"),
    streak_from: Optional[str] = typer.Option(
        None, "--streak-from", help="Also report the goal streak ending at this date"
    ),
) -> None:
    """List the most recent days, newest first."""
    from fitstore.cli import state

    repo = open_repo()
    try:
        records = repo.get_recent_daily(limit)
        streak = repo.get_streak(streak_from) if streak_from else None
    except ValueError as e:
        print_error(f"Invalid --streak-from date: {e}")
        raise typer.Exit(ec.USAGE_ERROR)
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()

    if state.json_output:
        if streak is None:
            print_records(records, json_mode=True)
        else:
            print_object({"days": to_data(records), "streak": streak}, json_mode=True)
        return

    if not records:
        print("No daily progress.")
    else:
        print_records(records)
    if streak is not None:
        print(f"\nStreak: {streak} day(s)")
