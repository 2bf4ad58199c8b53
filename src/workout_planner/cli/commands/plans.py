"""Plan store commands: list, show, activate, delete."""

import json
from typing import Annotated, Optional

import typer

from ...core.plan_ops import get_sessions_in_range, get_upcoming_sessions
from ...io.serializers import ValidationError, plan_to_dict, session_to_dict
from .. import views
from ..app import PlanOption, StoreOption, app, get_store, load_plan_or_exit


@app.command("list")
def list_plans(
    store_dir: StoreOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    List stored plans, newest first.
    """
    store = get_store(store_dir)
    plans = store.list_plans()

    if json_out:
        print(json.dumps([
            {
                "id": p.id,
                "name": p.name,
                "start_date": p.start_date,
                "end_date": p.end_date,
                "sessions": len(p.sessions),
                "active": p.active,
            }
            for p in plans
        ], indent=2))
        return

    views.print_plan_list(plans)


@app.command()
def show(
    session_id: Annotated[
        Optional[str],
        typer.Option("--session", help="Show one session in detail"),
    ] = None,
    upcoming: Annotated[
        Optional[int],
        typer.Option("--upcoming", "-u", help="Only the next N planned sessions"),
    ] = None,
    date_from: Annotated[
        Optional[str],
        typer.Option("--from", help="Only sessions on or after this date"),
    ] = None,
    date_to: Annotated[
        Optional[str],
        typer.Option("--to", help="Only sessions on or before this date"),
    ] = None,
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show a plan (default: the active one) or a single session.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)

    if session_id is not None:
        session = plan.find_session(session_id)
        if session is None:
            views.print_error(f"Session not found: {session_id}")
            raise typer.Exit(1)
        if json_out:
            print(json.dumps(session_to_dict(session), indent=2))
        else:
            views.print_session_detail(session)
        return

    sessions = None
    try:
        if upcoming is not None:
            sessions = get_upcoming_sessions(plan, limit=upcoming)
        elif date_from is not None or date_to is not None:
            sessions = get_sessions_in_range(
                plan, date_from or plan.start_date, date_to or plan.end_date
            )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        if sessions is None:
            print(json.dumps(plan_to_dict(plan), indent=2))
        else:
            print(json.dumps([session_to_dict(s) for s in sessions], indent=2))
        return

    views.print_plan(plan, sessions)


@app.command()
def activate(
    plan_id: Annotated[str, typer.Argument(help="Plan id (see 'list')")],
    store_dir: StoreOption = None,
) -> None:
    """
    Make a stored plan the active plan.
    """
    store = get_store(store_dir)
    try:
        plan = store.set_active_plan(plan_id)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.print_success(f"Active plan: {plan.name} ({plan.id})")


@app.command()
def delete(
    plan_id: Annotated[str, typer.Argument(help="Plan id (see 'list')")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    store_dir: StoreOption = None,
) -> None:
    """
    Delete a stored plan.
    """
    store = get_store(store_dir)
    try:
        plan = store.load_plan(plan_id)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not force and not views.confirm_action(f"Delete plan '{plan.name}'?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_plan(plan_id)
    views.print_success(f"Deleted plan {plan_id}")
