"""Analysis commands: stats, balance."""

import json
from dataclasses import asdict
from typing import Annotated

import typer

from ...core.balance import calculate_sympathetic_balance, validate_hiit_spacing
from ...core.plan_ops import get_plan_statistics
from .. import views
from ..app import PlanOption, StoreOption, app, get_store, load_plan_or_exit


@app.command()
def stats(
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Show completion statistics for a plan.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)
    statistics = get_plan_statistics(plan)

    if json_out:
        print(json.dumps(asdict(statistics), indent=2))
        return

    views.console.print()
    views.console.print(views.format_statistics(statistics))
    views.console.print()


@app.command()
def balance(
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output as JSON for machine processing"),
    ] = False,
) -> None:
    """
    Check HIIT spacing and the high-intensity / recovery balance of a plan.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)

    spacing = validate_hiit_spacing(plan.sessions)
    mix = calculate_sympathetic_balance(plan.sessions)

    if json_out:
        print(json.dumps({"spacing": asdict(spacing), "balance": asdict(mix)}, indent=2))
        return

    views.print_balance(spacing, mix)
