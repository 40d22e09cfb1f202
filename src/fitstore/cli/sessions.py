"""fitstore sessions — list, show and delete workout sessions."""

from __future__ import annotations

from typing import Optional

import typer

from fitstore.cli import _exitcodes as ec
from fitstore.cli._output import print_error, print_object, print_records, to_data
from fitstore.cli._storage import open_repo
from fitstore.errors import FitstoreError

app = typer.Typer(no_args_is_help=True)


@app.command(name="list")
def sessions_list_cmd(
    exercise: Optional[str] = typer.Option(None, "--exercise", help="Only this exercise"),
    last: Optional[int] = typer.Option(None, "--last", help="Only the N most recent sessions"),
) -> None:
    """List sessions, most recent first."""
    from fitstore.cli import state

    repo = open_repo()
    try:
        records = repo.list_sessions()
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()

    if exercise is not None:
        records = [r for r in records if r.exercise == exercise]
    if last is not None:
        records = records[: max(last, 0)]
    if not records and not state.json_output:
        print("No sessions.")
        return
    print_records(records, json_mode=state.json_output)


@app.command(name="show")
def sessions_show_cmd(session_id: int = typer.Argument(..., help="Session id")) -> None:
    """Show one session."""
    from fitstore.cli import state

    repo = open_repo()
    try:
        record = repo.get_session(session_id)
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()

    if record is None:
        print_error(f"Session {session_id} not found")
        raise typer.Exit(ec.NOT_FOUND)
    print_object(to_data(record), json_mode=state.json_output)


@app.command(name="delete")
def sessions_delete_cmd(session_id: int = typer.Argument(..., help="Session id")) -> None:
    """Delete one session by id. Deleting a missing id is not an error."""
    from fitstore.cli import state

    repo = open_repo()
    try:
        deleted = repo.delete_session(session_id)
    except FitstoreError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
    finally:
        repo.close()
    print_object({"session_id": session_id, "deleted": deleted}, json_mode=state.json_output)
