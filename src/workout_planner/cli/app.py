"""Shared Typer app object, shared option types, and store utility."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..core.models import Plan
from ..io.plan_store import PlanStore, get_default_store_dir
from ..io.serializers import ValidationError
from . import views

# Shared --store-dir option type used across all commands
StoreOption = Annotated[
    Optional[Path],
    typer.Option("--store-dir", "-s", help="Directory holding plan JSON files"),
]

# Shared --plan option; default is the active plan
PlanOption = Annotated[
    Optional[str],
    typer.Option("--plan", "-P", help="Plan id (default: the active plan)"),
]

app = typer.Typer(
    name="workout-planner",
    help="Periodized workout plan generator with deload weeks and recurring sessions.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Generate and manage multi-week workout plans.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=views.err_console, show_path=False)],
        force=True,
    )


def get_store(store_dir: Path | None) -> PlanStore:
    """Get plan store from directory or default location."""
    if store_dir is None:
        store_dir = get_default_store_dir()
    return PlanStore(store_dir)


def load_plan_or_exit(store: PlanStore, plan_id: str | None) -> Plan:
    """Load the given plan (or the active one), printing an error and exiting on failure."""
    try:
        if plan_id is not None:
            return store.load_plan(plan_id)
        plan = store.get_active_plan()
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if plan is None:
        views.print_error(f"No active plan in {store.directory}")
        views.print_info("Run 'generate' first to create a plan.")
        raise typer.Exit(1)
    return plan


def save_plan_or_exit(store: PlanStore, plan: Plan) -> None:
    try:
        store.save_plan(plan)
    except (OSError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
