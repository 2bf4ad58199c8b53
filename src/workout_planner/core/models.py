"""
Data models for workout-planner.

All core dataclasses representing preferences, plans, and sessions.

Sessions form a small tagged union: ``StrengthSession`` carries an exercise
list, ``GeneratedSession`` carries an opaque payload built by a
session-specific generator.  Use ``new_session()`` to get the right variant
for a session type tag.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Literal

from .config import (
    DEFAULT_DAYS_PER_WEEK,
    DEFAULT_DURATION_DAYS,
    DEFAULT_PLAN_NAME,
    EXPERIENCE_LEVELS,
    GOALS,
    MAX_DAYS_PER_WEEK,
    MAX_DURATION_DAYS,
    MIN_DAYS_PER_WEEK,
    MIN_DURATION_DAYS,
    SESSION_STATUSES,
    STANDARD_SESSION_TYPES,
)

Goal = Literal["strength", "hypertrophy", "fat_loss", "general_fitness"]
ExperienceLevel = Literal["beginner", "intermediate", "advanced"]
SplitType = Literal["full_body", "upper_lower", "ppl"]
SessionStatus = Literal["planned", "in_progress", "completed", "skipped"]


def validate_iso_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


def to_iso_date(value: "date | datetime | str") -> str:
    """Normalise a date, datetime, or ISO string to a validated YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    validate_iso_date(value)
    return value


def validate_plan_ranges(days_per_week: int, duration_days: int) -> None:
    """Raise ValueError unless days_per_week and duration_days are in range."""
    if not MIN_DAYS_PER_WEEK <= days_per_week <= MAX_DAYS_PER_WEEK:
        raise ValueError(
            f"Days per week must be between {MIN_DAYS_PER_WEEK} and "
            f"{MAX_DAYS_PER_WEEK}, got {days_per_week}"
        )
    if not MIN_DURATION_DAYS <= duration_days <= MAX_DURATION_DAYS:
        raise ValueError(
            f"Duration must be between {MIN_DURATION_DAYS} and "
            f"{MAX_DURATION_DAYS} days, got {duration_days}"
        )


def validate_preferred_days(preferred_days: list[int]) -> None:
    """Raise ValueError unless every entry is a distinct weekday 0 (Sunday) .. 6."""
    for day in preferred_days:
        if not 0 <= day <= 6:
            raise ValueError(
                f"preferred_days entries must be 0 (Sunday) to 6 (Saturday), got {day}"
            )
    if len(set(preferred_days)) != len(preferred_days):
        raise ValueError(f"preferred_days must not repeat a day, got {preferred_days}")


def is_standard_type(session_type: str) -> bool:
    """Return True for resistance session types populated with an exercise list."""
    return session_type in STANDARD_SESSION_TYPES


@dataclass
class ExerciseEntry:
    """
    One exercise inside a session, with session-specific prescription.

    ``reps`` is a string so it can hold either a count ("10") or a
    range ("8-12").  ``weight_kg`` stays None until the user sets a load.
    """

    name: str
    sets: int
    reps: str
    rest_seconds: int
    weight_kg: float | None = None
    superset_group: str | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        """Validate exercise entry."""
        if not self.name or not self.name.strip():
            raise ValueError("Exercise name must be non-empty")
        if self.sets <= 0:
            raise ValueError("sets must be positive")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")
        if self.weight_kg is not None and self.weight_kg < 0:
            raise ValueError("weight_kg must be non-negative")


@dataclass
class Session:
    """
    Fields shared by every scheduled session.

    Not instantiated directly; see StrengthSession and GeneratedSession.
    """

    id: str
    date: str  # ISO format: YYYY-MM-DD
    session_type: str
    status: SessionStatus = "planned"
    notes: str = ""
    completed_at: str | None = None
    completed_data: dict[str, Any] | None = None
    population_error: str | None = None
    is_deload_week: bool = False

    def __post_init__(self) -> None:
        """Validate session data."""
        if not self.id:
            raise ValueError("Session id must be non-empty")
        validate_iso_date(self.date)
        if not self.session_type:
            raise ValueError("session_type must be non-empty")
        if self.status not in SESSION_STATUSES:
            raise ValueError(
                f"Invalid status: {self.status!r}. Must be one of {SESSION_STATUSES}"
            )

    @property
    def is_standard(self) -> bool:
        return is_standard_type(self.session_type)


@dataclass
class StrengthSession(Session):
    """A standard resistance session (upper/lower/full/push/pull/legs)."""

    exercises: list[ExerciseEntry] | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if not is_standard_type(self.session_type):
            raise ValueError(
                f"StrengthSession requires a standard type, got {self.session_type!r}"
            )

    @property
    def session_data(self) -> None:
        return None


@dataclass
class GeneratedSession(Session):
    """
    A session whose content comes from a type-specific generator (HIIT,
    cardio, stretch, or any type the core does not know).

    ``session_data`` is opaque to the planner; it is stored and copied,
    never inspected.
    """

    session_data: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if is_standard_type(self.session_type):
            raise ValueError(
                f"GeneratedSession cannot hold standard type {self.session_type!r}"
            )

    @property
    def exercises(self) -> None:
        return None


def new_session(
    session_id: str,
    session_date: str,
    session_type: str,
    status: SessionStatus = "planned",
    exercises: list[ExerciseEntry] | None = None,
) -> Session:
    """Create an unpopulated session of the variant matching ``session_type``."""
    if is_standard_type(session_type):
        return StrengthSession(
            id=session_id,
            date=session_date,
            session_type=session_type,
            status=status,
            exercises=exercises,
        )
    return GeneratedSession(
        id=session_id,
        date=session_date,
        session_type=session_type,
        status=status,
    )


@dataclass
class PlanPreferences:
    """
    User input for plan generation.

    Validation happens here so that generate_workout_plan() fails before
    any scheduling work when the input is out of range.
    """

    goal: Goal = "general_fitness"
    experience_level: ExperienceLevel = "intermediate"
    days_per_week: int = DEFAULT_DAYS_PER_WEEK
    duration_days: int = DEFAULT_DURATION_DAYS
    start_date: str = field(default_factory=lambda: date.today().isoformat())
    session_types: list[str] = field(default_factory=lambda: ["full"])
    equipment_available: list[str] = field(default_factory=lambda: ["all"])
    preferred_days: list[int] | None = None
    plan_name: str = DEFAULT_PLAN_NAME

    def __post_init__(self) -> None:
        """Validate preferences."""
        validate_plan_ranges(self.days_per_week, self.duration_days)
        if self.goal not in GOALS:
            raise ValueError(f"Invalid goal: {self.goal!r}. Must be one of {GOALS}")
        if self.experience_level not in EXPERIENCE_LEVELS:
            raise ValueError(
                f"Invalid experience_level: {self.experience_level!r}. "
                f"Must be one of {EXPERIENCE_LEVELS}"
            )
        self.start_date = to_iso_date(self.start_date)
        if self.preferred_days is not None:
            validate_preferred_days(self.preferred_days)


@dataclass
class Periodization:
    """Periodization metadata attached to a plan."""

    style: Literal["linear", "undulating"]
    deload_frequency: int
    volume_progression: str


@dataclass
class Plan:
    """
    A complete multi-week training plan.

    ``sessions`` is kept in chronological order; the week of a session is
    derived from its position (see planner.week_number_for_index).
    """

    id: str
    name: str
    start_date: str
    end_date: str
    duration_days: int
    goal: Goal
    experience_level: ExperienceLevel
    days_per_week: int
    split_type: SplitType
    session_types: list[str]
    equipment_available: list[str]
    sessions: list[Session] = field(default_factory=list)
    deload_weeks: list[int] = field(default_factory=list)
    periodization: Periodization | None = None
    created: str = ""
    modified: str = ""
    active: bool = True
    validation_warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate plan data."""
        validate_iso_date(self.start_date)
        validate_iso_date(self.end_date)
        if self.duration_days <= 0:
            raise ValueError("duration_days must be positive")
        if self.days_per_week <= 0:
            raise ValueError("days_per_week must be positive")

    def find_session(self, session_id: str) -> Session | None:
        """Return the session with the given id, or None."""
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def session_index(self, session_id: str) -> int:
        """Return the 0-based position of a session, or -1 if absent."""
        for i, session in enumerate(self.sessions):
            if session.id == session_id:
                return i
        return -1


@dataclass
class PlanStatistics:
    """Completion counters for a plan, computed at call time."""

    total_sessions: int
    completed_sessions: int
    skipped_sessions: int
    missed_sessions: int
    upcoming_sessions: int
    completion_rate: float
