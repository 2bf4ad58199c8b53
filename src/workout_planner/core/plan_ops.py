"""
Operations on an existing plan.

Every function takes a Plan and returns a Plan (or a derived value) without
mutating its input.  Stale session ids in move/status/remove are ignored
and the input plan is returned as-is; the bulk recurring edit raises
instead, since a bad id there is a caller bug.
"""

import copy
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta

from .config import SESSION_STATUSES
from .models import (
    ExerciseEntry,
    Plan,
    PlanStatistics,
    Session,
    SessionStatus,
    StrengthSession,
    new_session,
    to_iso_date,
)
from .planner import block_bounds, generate_session_id, timestamp, week_number_for_index

logger = logging.getLogger(__name__)


def _today_iso(today: "date | str | None") -> str:
    return to_iso_date(today) if today is not None else date.today().isoformat()


def _with_sessions(plan: Plan, sessions: list[Session]) -> Plan:
    return replace(plan, sessions=sessions, modified=timestamp())


def _sorted_by_date(sessions: list[Session]) -> list[Session]:
    # Stable sort: same-day sessions keep their relative order
    return sorted(sessions, key=lambda s: s.date)


def move_session(plan: Plan, session_id: str, new_date: "date | str") -> Plan:
    """
    Give a session a new date.

    Ordering of the collection is left as-is.  Unknown ids are ignored.
    """
    index = plan.session_index(session_id)
    if index < 0:
        return plan

    target = to_iso_date(new_date)
    if plan.sessions[index].date == target:
        return plan

    sessions = list(plan.sessions)
    sessions[index] = replace(sessions[index], date=target)
    return _with_sessions(plan, sessions)


def update_session_status(
    plan: Plan,
    session_id: str,
    status: SessionStatus,
    completed_data: dict | None = None,
) -> Plan:
    """
    Set a session's status.

    Any transition between the four statuses is allowed.  Moving to
    "completed" with ``completed_data`` also stamps ``completed_at`` and
    attaches the data.

    Raises:
        ValueError: If status is not one of the known statuses.
    """
    if status not in SESSION_STATUSES:
        raise ValueError(f"Invalid status: {status!r}. Must be one of {SESSION_STATUSES}")

    index = plan.session_index(session_id)
    if index < 0:
        return plan

    changes: dict = {"status": status}
    if status == "completed" and completed_data is not None:
        changes["completed_at"] = datetime.now().isoformat(timespec="seconds")
        changes["completed_data"] = copy.deepcopy(completed_data)

    sessions = list(plan.sessions)
    sessions[index] = replace(sessions[index], **changes)
    return _with_sessions(plan, sessions)


def add_session(
    plan: Plan,
    session_type: str,
    on_date: "date | str | None" = None,
    today: "date | str | None" = None,
) -> Plan:
    """
    Add an unpopulated session and re-sort the plan by date.

    Default date is the day after the last session, or today when the plan
    has no sessions.  Standard types start with an empty exercise list.
    """
    if on_date is not None:
        session_date = to_iso_date(on_date)
    elif plan.sessions:
        last = max(s.date for s in plan.sessions)
        session_date = (date.fromisoformat(last) + timedelta(days=1)).isoformat()
    else:
        session_date = _today_iso(today)

    session = new_session(generate_session_id(), session_date, session_type)
    if isinstance(session, StrengthSession):
        session = replace(session, exercises=[])

    return _with_sessions(plan, _sorted_by_date([*plan.sessions, session]))


def remove_session(plan: Plan, session_id: str) -> Plan:
    """Drop a session by id; unknown ids are ignored."""
    if plan.session_index(session_id) < 0:
        return plan
    return _with_sessions(plan, [s for s in plan.sessions if s.id != session_id])


def get_recurring_sessions_in_block(plan: Plan, session_id: str) -> list[Session]:
    """
    Sessions of the same type in the same training block as ``session_id``.

    A block is the run of weeks strictly between the nearest deload weeks
    (plan end bound: ceil(duration / 7) + 1).  A session in a deload week
    only recurs with same-type sessions of that deload week.

    Returns:
        Matching sessions in plan order (including the target); [] for an
        unknown id
    """
    index = plan.session_index(session_id)
    if index < 0:
        return []

    target = plan.sessions[index]
    week = week_number_for_index(index, plan.days_per_week)
    low, high = block_bounds(week, plan.deload_weeks, plan.duration_days)

    return [
        s
        for i, s in enumerate(plan.sessions)
        if s.session_type == target.session_type
        and low < week_number_for_index(i, plan.days_per_week) < high
    ]


def update_recurring_session_exercises(
    plan: Plan,
    session_id: str,
    new_exercises: list[ExerciseEntry],
) -> Plan:
    """
    Replace the exercise list of every recurring session in a block.

    Each standard session in the recurring set gets its own deep copy of
    ``new_exercises``.

    Raises:
        ValueError: If plan or session_id is missing, or new_exercises is
            not a non-empty list.
    """
    if plan is None:
        raise ValueError("Plan is required")
    if not session_id:
        raise ValueError("Session id is required")
    if not isinstance(new_exercises, list) or not new_exercises:
        raise ValueError("new_exercises must be a non-empty list of exercises")

    recurring = get_recurring_sessions_in_block(plan, session_id)
    if not recurring:
        logger.warning("Session %s not found in plan %s; nothing updated", session_id, plan.id)
        return plan

    ids = {s.id for s in recurring}
    sessions = [
        replace(s, exercises=copy.deepcopy(new_exercises), population_error=None)
        if s.id in ids and isinstance(s, StrengthSession)
        else s
        for s in plan.sessions
    ]
    logger.debug("Updated %d recurring %s session(s)", len(ids), recurring[0].session_type)
    return _with_sessions(plan, sessions)


def get_plan_statistics(plan: Plan, today: "date | str | None" = None) -> PlanStatistics:
    """
    Completion counters for a plan.

    Missed and upcoming are computed against ``today`` (default: the
    current date) and never stored.  Completion rate is a percentage,
    0.0 for an empty plan.
    """
    now = _today_iso(today)
    sessions = plan.sessions
    total = len(sessions)
    completed = sum(1 for s in sessions if s.status == "completed")
    skipped = sum(1 for s in sessions if s.status == "skipped")
    missed = sum(1 for s in sessions if s.status == "planned" and s.date < now)
    upcoming = sum(1 for s in sessions if s.status == "planned" and s.date >= now)

    return PlanStatistics(
        total_sessions=total,
        completed_sessions=completed,
        skipped_sessions=skipped,
        missed_sessions=missed,
        upcoming_sessions=upcoming,
        completion_rate=(completed / total * 100) if total else 0.0,
    )


def get_sessions_in_range(
    plan: Plan,
    start: "date | str",
    end: "date | str",
) -> list[Session]:
    """Sessions dated within [start, end], inclusive."""
    lo, hi = to_iso_date(start), to_iso_date(end)
    return [s for s in plan.sessions if lo <= s.date <= hi]


def get_upcoming_sessions(
    plan: Plan,
    limit: int = 10,
    today: "date | str | None" = None,
) -> list[Session]:
    """Planned sessions from today onwards, earliest first."""
    now = _today_iso(today)
    upcoming = [s for s in plan.sessions if s.status == "planned" and s.date >= now]
    return _sorted_by_date(upcoming)[:limit]
