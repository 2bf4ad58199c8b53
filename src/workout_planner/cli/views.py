"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of plans and sessions.
"""

from datetime import date

from rich.console import Console
from rich.table import Table

from ..core.balance import BalanceReport, SpacingReport
from ..core.models import ExerciseEntry, Plan, PlanStatistics, Session
from ..core.planner import week_number_for_index

console = Console()
err_console = Console(stderr=True)

STATUS_STYLES = {
    "planned": "white",
    "in_progress": "cyan",
    "completed": "green",
    "skipped": "dim",
}


def _fmt_status(session: Session, today: str) -> str:
    if session.status == "planned" and session.date < today:
        return "[red]missed[/red]"
    style = STATUS_STYLES.get(session.status, "white")
    return f"[{style}]{session.status}[/{style}]"


def _fmt_content(session: Session) -> str:
    if session.population_error:
        return f"[red]! {session.population_error}[/red]"
    if session.exercises is not None:
        if not session.exercises:
            return "[dim]no exercises[/dim]"
        return f"{len(session.exercises)} exercises"
    if session.session_data:
        minutes = round(session.session_data.get("total_duration", 0) / 60)
        return f"generated ({minutes} min)" if minutes else "generated"
    return "[dim]-[/dim]"


def _fmt_exercise(entry: ExerciseEntry) -> str:
    load = f" @ {entry.weight_kg:g} kg" if entry.weight_kg is not None else ""
    return f"{entry.sets}×{entry.reps}{load}"


def format_plan_table(plan: Plan, sessions: list[Session] | None = None) -> Table:
    """
    Create a Rich table listing a plan's sessions.

    Args:
        plan: Plan to display
        sessions: Subset of plan.sessions to show (default: all)

    Returns:
        Rich Table object
    """
    today = date.today().isoformat()
    shown = {s.id for s in sessions} if sessions is not None else None

    table = Table(title=f"{plan.name} ({plan.start_date} → {plan.end_date})")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Wk", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Status")
    table.add_column("Content")
    table.add_column("Id", style="dim", no_wrap=True)

    for i, session in enumerate(plan.sessions):
        if shown is not None and session.id not in shown:
            continue
        week = week_number_for_index(i, plan.days_per_week)
        week_cell = f"{week}D" if session.is_deload_week else str(week)
        table.add_row(
            str(i + 1),
            week_cell,
            session.date,
            session.session_type,
            _fmt_status(session, today),
            _fmt_content(session),
            session.id,
        )

    return table


def print_plan(plan: Plan, sessions: list[Session] | None = None) -> None:
    """Print plan header and session table."""
    console.print()
    console.print(
        f"[bold]{plan.name}[/bold]  [dim]{plan.id}[/dim]"
        f"{'  [green](active)[/green]' if plan.active else ''}"
    )
    console.print(
        f"Goal: {plan.goal}  Level: {plan.experience_level}  "
        f"Split: {plan.split_type}  Days/week: {plan.days_per_week}"
    )
    if plan.deload_weeks:
        console.print(f"Deload weeks: {', '.join(str(w) for w in plan.deload_weeks)}")
    if plan.periodization is not None:
        console.print(
            f"Periodization: {plan.periodization.style}, {plan.periodization.volume_progression}"
        )
    console.print()

    if not plan.sessions:
        console.print("[yellow]Plan has no sessions.[/yellow]")
        return
    console.print(format_plan_table(plan, sessions))
    print_validation_warnings(plan.validation_warnings)


def print_session_detail(session: Session) -> None:
    """Print one session with its exercise list or generated payload."""
    console.print()
    console.print(
        f"[bold]{session.session_type}[/bold] on [cyan]{session.date}[/cyan]  "
        f"[dim]{session.id}[/dim]"
    )
    console.print(f"Status: {session.status}{'  (deload week)' if session.is_deload_week else ''}")
    if session.notes:
        console.print(f"Notes: {session.notes}")
    if session.population_error:
        print_warning(session.population_error)

    if session.exercises:
        table = Table()
        table.add_column("SS", style="dim", width=3)
        table.add_column("Exercise", style="cyan")
        table.add_column("Prescription", justify="right")
        table.add_column("Rest", justify="right")
        for entry in session.exercises:
            table.add_row(
                entry.superset_group or "",
                entry.name,
                _fmt_exercise(entry),
                f"{entry.rest_seconds}s",
            )
        console.print(table)
    elif session.session_data:
        data = session.session_data
        main = data.get("main_workout", {})
        protocol = data.get("protocol", {})
        console.print(
            f"Protocol: {protocol.get('intensity', '?')} intensity, "
            f"{main.get('rounds', '?')} rounds of "
            f"{main.get('work_seconds', '?')}s work / {main.get('rest_seconds', '?')}s rest"
        )
        for name in main.get("exercises", []):
            console.print(f"  - {name}")
    console.print()


def format_statistics(stats: PlanStatistics) -> str:
    """
    Format plan statistics as text block.

    Args:
        stats: PlanStatistics to display

    Returns:
        Formatted string
    """
    return "\n".join(
        [
            "Plan statistics",
            f"- Total sessions: {stats.total_sessions}",
            f"- Completed: {stats.completed_sessions}",
            f"- Skipped: {stats.skipped_sessions}",
            f"- Missed: {stats.missed_sessions}",
            f"- Upcoming: {stats.upcoming_sessions}",
            f"- Completion rate: {stats.completion_rate:.1f}%",
        ]
    )


def print_plan_list(plans: list[Plan]) -> None:
    """Print stored plans as a table."""
    if not plans:
        console.print("[yellow]No plans stored yet.[/yellow]")
        return

    table = Table(title="Plans")
    table.add_column("Active", width=6)
    table.add_column("Id", style="dim", no_wrap=True)
    table.add_column("Name", style="cyan")
    table.add_column("Start")
    table.add_column("Days", justify="right")
    table.add_column("Sessions", justify="right")

    for plan in plans:
        table.add_row(
            "[green]*[/green]" if plan.active else "",
            plan.id,
            plan.name,
            plan.start_date,
            str(plan.duration_days),
            str(len(plan.sessions)),
        )
    console.print(table)


def print_template(goal: str, experience_level: str, template: dict) -> None:
    console.print()
    console.print(f"[bold]Recommended plan[/bold] for {experience_level} / {goal}")
    console.print(f"  {template['description']}")
    console.print(f"  Days per week: {template['days_per_week']}")
    console.print(f"  Session types: {', '.join(template['session_types'])}")
    console.print(f"  Weekly sets per muscle group: {template['volume_per_muscle_group']}")
    console.print(f"  Rep range: {template['rep_range']}")
    console.print()


def print_balance(spacing: SpacingReport, balance: BalanceReport) -> None:
    console.print()
    console.print(
        f"High-intensity: {balance.high_intensity_sessions} "
        f"({balance.high_intensity_pct:.0f}%)  "
        f"Recovery: {balance.recovery_sessions} ({balance.recovery_pct:.0f}%)"
    )
    if balance.is_balanced:
        print_success(balance.recommendation)
    else:
        print_warning(balance.recommendation)

    for w in spacing.warnings:
        print_warning(
            f"HIIT sessions {w.first_session_id} and {w.second_session_id} "
            f"are {w.hours_between:.0f}h apart"
        )
    console.print()


def print_validation_warnings(warnings_: list[str]) -> None:
    for w in warnings_:
        print_warning(w)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
