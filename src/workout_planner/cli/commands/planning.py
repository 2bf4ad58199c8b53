"""Planning commands: generate, template, customize, repopulate."""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.engine.config_loader import load_planner_config
from ...core.exercises.catalog import FileCatalogProvider
from ...core.models import PlanPreferences
from ...core.planner import (
    customize_plan,
    generate_workout_plan,
    get_recommended_plan_template,
    populate_plan,
    repopulate_session,
)
from ...core.populators import default_populators
from ...io.serializers import plan_to_dict
from .. import views
from ..app import PlanOption, StoreOption, app, get_store, load_plan_or_exit, save_plan_or_exit

CatalogOption = Annotated[
    Optional[Path],
    typer.Option("--catalog", help="Exercise catalog YAML (default: user or bundled catalog)"),
]
ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", help="Planner config YAML (default: <app dir>/planner.yaml)"),
]


def _split_csv(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_days(value: str | None) -> list[int] | None:
    """Parse "1,3,5" into weekday numbers (0=Sunday)."""
    parts = _split_csv(value)
    if parts is None:
        return None
    try:
        return [int(p) for p in parts]
    except ValueError as e:
        raise typer.BadParameter(f"Preferred days must be integers 0-6, got {value!r}") from e


def _populators(catalog_path: Path | None, config_path: Path | None):
    catalog = FileCatalogProvider(catalog_path)
    return default_populators(catalog, load_planner_config(config_path), with_hiit=True)


@app.command()
def generate(
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="strength, hypertrophy, fat_loss or general_fitness"),
    ] = "general_fitness",
    level: Annotated[
        str,
        typer.Option("--level", "-l", help="beginner, intermediate or advanced"),
    ] = "intermediate",
    days_per_week: Annotated[
        int,
        typer.Option("--days", "-d", help="Training days per week (2-7)"),
    ] = 3,
    duration: Annotated[
        int,
        typer.Option("--duration", help="Plan length in days (1-90)"),
    ] = 30,
    start: Annotated[
        Optional[str],
        typer.Option("--start", help="Start date YYYY-MM-DD (default: today)"),
    ] = None,
    types: Annotated[
        str,
        typer.Option("--types", "-t", help="Comma-separated session types, e.g. upper,lower,hiit"),
    ] = "full",
    equipment: Annotated[
        str,
        typer.Option("--equipment", "-e", help="Comma-separated equipment, or 'all'"),
    ] = "all",
    preferred_days: Annotated[
        Optional[str],
        typer.Option("--preferred-days", help="Comma-separated weekdays, 0=Sunday .. 6=Saturday"),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Plan name"),
    ] = None,
    store_dir: StoreOption = None,
    catalog_path: CatalogOption = None,
    config_path: ConfigOption = None,
    json_out: Annotated[
        bool,
        typer.Option("--json", "-j", help="Output the plan as JSON"),
    ] = False,
) -> None:
    """
    Generate a new plan, save it and make it the active plan.
    """
    store = get_store(store_dir)

    try:
        prefs_kwargs = dict(
            goal=goal,
            experience_level=level,
            days_per_week=days_per_week,
            duration_days=duration,
            session_types=_split_csv(types) or ["full"],
            equipment_available=_split_csv(equipment) or ["all"],
            preferred_days=_parse_days(preferred_days),
        )
        if start is not None:
            prefs_kwargs["start_date"] = start
        if name:
            prefs_kwargs["plan_name"] = name
        preferences = PlanPreferences(**prefs_kwargs)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    plan = asyncio.run(
        generate_workout_plan(preferences, populators=_populators(catalog_path, config_path))
    )

    save_plan_or_exit(store, plan)
    store.set_active_plan(plan.id)

    if json_out:
        print(json.dumps(plan_to_dict(plan), indent=2))
        return

    views.print_plan(plan)
    views.print_success(f"Saved plan {plan.id} ({len(plan.sessions)} sessions)")


@app.command()
def template(
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="strength, hypertrophy, fat_loss or general_fitness"),
    ] = "general_fitness",
    level: Annotated[
        str,
        typer.Option("--level", "-l", help="beginner, intermediate or advanced"),
    ] = "intermediate",
) -> None:
    """
    Show the recommended days and session types for a goal and level.
    """
    views.print_template(goal, level, get_recommended_plan_template(goal, level))


@app.command()
def customize(
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="New plan name"),
    ] = None,
    days_per_week: Annotated[
        Optional[int],
        typer.Option("--days", "-d", help="New training days per week (2-7)"),
    ] = None,
    duration: Annotated[
        Optional[int],
        typer.Option("--duration", help="New plan length in days (1-90)"),
    ] = None,
    types: Annotated[
        Optional[str],
        typer.Option("--types", "-t", help="New comma-separated session types"),
    ] = None,
    preferred_days: Annotated[
        Optional[str],
        typer.Option("--preferred-days", help="Comma-separated weekdays, 0=Sunday .. 6=Saturday"),
    ] = None,
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
    catalog_path: CatalogOption = None,
    config_path: ConfigOption = None,
) -> None:
    """
    Change a plan's settings.  Schedule changes rebuild and repopulate all sessions.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)

    new_types = _split_csv(types)
    try:
        updated = customize_plan(
            plan,
            name=name,
            days_per_week=days_per_week,
            duration_days=duration,
            session_types=new_types,
            preferred_days=_parse_days(preferred_days),
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if updated.sessions is not plan.sessions:
        updated = asyncio.run(
            populate_plan(updated, populators=_populators(catalog_path, config_path))
        )

    save_plan_or_exit(store, updated)
    views.print_plan(updated)
    views.print_success(f"Updated plan {updated.id}")


@app.command()
def repopulate(
    session_id: Annotated[str, typer.Argument(help="Session id (see 'show')")],
    plan_id: PlanOption = None,
    store_dir: StoreOption = None,
    catalog_path: CatalogOption = None,
    config_path: ConfigOption = None,
) -> None:
    """
    Rebuild the content of one session, e.g. after a catalog problem.
    """
    store = get_store(store_dir)
    plan = load_plan_or_exit(store, plan_id)

    if plan.find_session(session_id) is None:
        views.print_error(f"Session not found: {session_id}")
        raise typer.Exit(1)

    updated = asyncio.run(
        repopulate_session(plan, session_id, populators=_populators(catalog_path, config_path))
    )

    save_plan_or_exit(store, updated)
    session = updated.find_session(session_id)
    views.print_session_detail(session)
    if session.population_error:
        raise typer.Exit(1)
    views.print_success(f"Repopulated session {session_id}")
