"""Session commands: move, status, add, remove, recurring, edit-recurring."""

import json
from typing import Annotated, Optional

import typer

from ...core.config import SESSION_STATUSES
from ...core.models import validate_iso_date
from ...core.plan_ops import (
    add_session,
    get_recurring_sessions_in_block,
    move_session,
    remove_session,
    update_recurring_session_exercises,
    update_session_status,
)
from ...io.serializers import ValidationError, parse_exercise_list
from .. import views
from ..app import PlanOption, StoreOption, app, get_store, load_plan_or_exit, save_plan_or_exit

SessionIdArg = Annotated[str, typer.Argument(help="Session id (see 'show')")]


def _require_session(plan, session_id: str) -> None:
    if plan.find_session(session_id) is None:
        views.print_error(f"Session not found: {session_id}")
        raise typer.Exit(1)


def _check_date(value: str) -> str:
    try:
        validate_iso_date(value)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    return value


@app.command()
def move(
    session_id: SessionIdArg,
    new_date: Annotated[str, typer.Argument(help="New date YYYY-MM-DD")],
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
) -> None:
    """
    Move a session to another date.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)
    _require_session(plan, session_id)

    updated = move_session(plan, session_id, _check_date(new_date))
    if updated is plan:
        views.print_info(f"Session {session_id} is already on {new_date}.")
        return

    save_plan_or_exit(store, updated)
    views.print_success(f"Moved session {session_id} to {new_date}")


@app.command()
def status(
    session_id: SessionIdArg,
    new_status: Annotated[
        str,
        typer.Argument(help="planned, in_progress, completed or skipped"),
    ],
    data: Annotated[
        Optional[str],
        typer.Option("--data", help="Completion data as a JSON object (with 'completed')"),
    ] = None,
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
) -> None:
    """
    Set the status of a session.
    """
    if new_status not in SESSION_STATUSES:
        views.print_error(f"Invalid status: {new_status}. Must be one of {', '.join(SESSION_STATUSES)}")
        raise typer.Exit(1)

    completed_data = None
    if data is not None:
        try:
            completed_data = json.loads(data)
        except json.JSONDecodeError as e:
            views.print_error(f"Invalid JSON for --data: {e}")
            raise typer.Exit(1)
        if not isinstance(completed_data, dict):
            views.print_error("--data must be a JSON object")
            raise typer.Exit(1)

    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)
    _require_session(plan, session_id)

    updated = update_session_status(plan, session_id, new_status, completed_data)
    save_plan_or_exit(store, updated)
    views.print_success(f"Session {session_id} is now {new_status}")


@app.command()
def add(
    session_type: Annotated[str, typer.Argument(help="Session type, e.g. upper, full, hiit")],
    on_date: Annotated[
        Optional[str],
        typer.Option("--date", help="Date YYYY-MM-DD (default: day after the last session)"),
    ] = None,
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
) -> None:
    """
    Add an empty session to the plan.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)

    updated = add_session(plan, session_type, _check_date(on_date) if on_date else None)
    known = {s.id for s in plan.sessions}
    added = next(s for s in updated.sessions if s.id not in known)

    save_plan_or_exit(store, updated)
    views.print_success(f"Added {session_type} session {added.id} on {added.date}")


@app.command()
def remove(
    session_id: SessionIdArg,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
) -> None:
    """
    Remove a session from the plan.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)
    _require_session(plan, session_id)

    target = plan.find_session(session_id)
    views.console.print(f"Session to remove: [bold]{target.date}[/bold] ({target.session_type})")
    if not force and not views.confirm_action("Remove this session?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    save_plan_or_exit(store, remove_session(plan, session_id))
    views.print_success(f"Removed session {session_id}: {target.date} ({target.session_type})")


@app.command()
def recurring(
    session_id: SessionIdArg,
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
) -> None:
    """
    List the sessions that recur with a session in its training block.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)
    _require_session(plan, session_id)

    sessions = get_recurring_sessions_in_block(plan, session_id)
    views.console.print(views.format_plan_table(plan, sessions))
    views.print_info(f"{len(sessions)} recurring {sessions[0].session_type} session(s)")


@app.command("edit-recurring")
def edit_recurring(
    session_id: SessionIdArg,
    exercises: Annotated[
        str,
        typer.Option(
            "--exercises",
            "-x",
            help="Semicolon-separated Name:SETSxREPS[@KG][/REST], e.g. 'Back Squat:4x8-12@60/90'",
        ),
    ],
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
) -> None:
    """
    Replace the exercises of a session and every recurring session in its block.
    """
    try:
        entries = parse_exercise_list(exercises)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)
    _require_session(plan, session_id)

    target = plan.find_session(session_id)
    if not target.is_standard:
        views.print_error(f"{target.session_type} sessions have no exercise list to edit")
        raise typer.Exit(1)

    try:
        updated = update_recurring_session_exercises(plan, session_id, entries)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    count = len(get_recurring_sessions_in_block(updated, session_id))
    save_plan_or_exit(store, updated)
    views.print_success(f"Updated {count} {target.session_type} session(s) with {len(entries)} exercises")
