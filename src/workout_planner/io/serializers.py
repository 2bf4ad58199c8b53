"""
JSON serialization for plan data models.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
import re
from typing import Any

from ..core.models import (
    ExerciseEntry,
    GeneratedSession,
    Periodization,
    Plan,
    Session,
    StrengthSession,
    is_standard_type,
    validate_iso_date,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate date string is ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        The same YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    try:
        validate_iso_date(date_str)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return date_str


def _require(data: dict[str, Any], key: str, what: str) -> Any:
    if key not in data or data[key] is None:
        raise ValidationError(f"{what} is missing required field '{key}'")
    return data[key]


def exercise_entry_to_dict(entry: ExerciseEntry) -> dict[str, Any]:
    """
    Convert ExerciseEntry to JSON-compatible dict.

    Args:
        entry: ExerciseEntry to convert

    Returns:
        Dict representation
    """
    return {
        "name": entry.name,
        "sets": entry.sets,
        "reps": entry.reps,
        "rest_seconds": entry.rest_seconds,
        "weight_kg": entry.weight_kg,
        "superset_group": entry.superset_group,
        "notes": entry.notes,
    }


def dict_to_exercise_entry(data: dict[str, Any]) -> ExerciseEntry:
    """
    Convert dict to ExerciseEntry.

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Exercise entry must be an object, got {type(data).__name__}")
    weight = data.get("weight_kg")
    try:
        return ExerciseEntry(
            name=_require(data, "name", "Exercise entry"),
            sets=int(_require(data, "sets", "Exercise entry")),
            reps=str(_require(data, "reps", "Exercise entry")),
            rest_seconds=int(data.get("rest_seconds", 0)),
            weight_kg=float(weight) if weight is not None else None,
            superset_group=data.get("superset_group"),
            notes=data.get("notes") or "",
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid exercise entry {data.get('name')!r}: {e}") from e


def session_to_dict(session: Session) -> dict[str, Any]:
    """
    Convert a session to JSON-compatible dict.

    Both ``exercises`` and ``session_data`` are always written; the one that
    does not apply to the session's variant is null.

    Args:
        session: StrengthSession or GeneratedSession

    Returns:
        Dict representation
    """
    exercises = session.exercises
    return {
        "id": session.id,
        "date": session.date,
        "type": session.session_type,
        "status": session.status,
        "exercises": (
            [exercise_entry_to_dict(e) for e in exercises] if exercises is not None else None
        ),
        "session_data": session.session_data,
        "notes": session.notes,
        "completed_at": session.completed_at,
        "completed_data": session.completed_data,
        "population_error": session.population_error,
        "is_deload_week": session.is_deload_week,
    }


def dict_to_session(data: dict[str, Any]) -> Session:
    """
    Convert dict to the session variant matching its type.

    Args:
        data: Dict representation

    Returns:
        StrengthSession for standard types, GeneratedSession otherwise

    Raises:
        ValidationError: If data is invalid, or a standard session carries
            session_data / a non-standard one carries exercises
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Session must be an object, got {type(data).__name__}")

    session_id = _require(data, "id", "Session")
    session_type = _require(data, "type", "Session")
    validate_date(_require(data, "date", "Session"))

    common = dict(
        id=session_id,
        date=data["date"],
        session_type=session_type,
        status=data.get("status", "planned"),
        notes=data.get("notes") or "",
        completed_at=data.get("completed_at"),
        completed_data=data.get("completed_data"),
        population_error=data.get("population_error"),
        is_deload_week=bool(data.get("is_deload_week", False)),
    )

    try:
        if is_standard_type(session_type):
            if data.get("session_data") is not None:
                raise ValidationError(
                    f"Session {session_id}: {session_type} session cannot carry session_data"
                )
            raw = data.get("exercises")
            exercises = [dict_to_exercise_entry(e) for e in raw] if raw is not None else None
            return StrengthSession(**common, exercises=exercises)

        if data.get("exercises") is not None:
            raise ValidationError(
                f"Session {session_id}: {session_type} session cannot carry exercises"
            )
        return GeneratedSession(**common, session_data=data.get("session_data"))
    except ValueError as e:
        raise ValidationError(f"Invalid session {session_id}: {e}") from e


def plan_to_dict(plan: Plan) -> dict[str, Any]:
    """
    Convert Plan to JSON-compatible dict.

    Args:
        plan: Plan to convert

    Returns:
        Dict representation
    """
    periodization = None
    if plan.periodization is not None:
        periodization = {
            "style": plan.periodization.style,
            "deload_frequency": plan.periodization.deload_frequency,
            "volume_progression": plan.periodization.volume_progression,
        }

    return {
        "id": plan.id,
        "name": plan.name,
        "start_date": plan.start_date,
        "end_date": plan.end_date,
        "duration_days": plan.duration_days,
        "goal": plan.goal,
        "experience_level": plan.experience_level,
        "days_per_week": plan.days_per_week,
        "split_type": plan.split_type,
        "session_types": list(plan.session_types),
        "equipment_available": list(plan.equipment_available),
        "deload_weeks": list(plan.deload_weeks),
        "periodization": periodization,
        "created": plan.created,
        "modified": plan.modified,
        "active": plan.active,
        "validation_warnings": list(plan.validation_warnings),
        "sessions": [session_to_dict(s) for s in plan.sessions],
    }


def dict_to_plan(data: dict[str, Any]) -> Plan:
    """
    Convert dict to Plan.

    Args:
        data: Dict representation

    Returns:
        Plan instance

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Plan must be an object, got {type(data).__name__}")

    validate_date(_require(data, "start_date", "Plan"))
    validate_date(_require(data, "end_date", "Plan"))

    raw_periodization = data.get("periodization")
    if raw_periodization is not None and not isinstance(raw_periodization, dict):
        raise ValidationError(
            f"Plan periodization must be an object, got {type(raw_periodization).__name__}"
        )

    try:
        periodization = None
        if raw_periodization:
            periodization = Periodization(
                style=raw_periodization.get("style", "linear"),
                deload_frequency=int(raw_periodization.get("deload_frequency", 4)),
                volume_progression=raw_periodization.get("volume_progression", ""),
            )
        return Plan(
            id=_require(data, "id", "Plan"),
            name=data.get("name") or "",
            start_date=data["start_date"],
            end_date=data["end_date"],
            duration_days=int(_require(data, "duration_days", "Plan")),
            goal=data.get("goal", "general_fitness"),
            experience_level=data.get("experience_level", "intermediate"),
            days_per_week=int(_require(data, "days_per_week", "Plan")),
            split_type=data.get("split_type", "full_body"),
            session_types=list(data.get("session_types") or []),
            equipment_available=list(data.get("equipment_available") or ["all"]),
            sessions=[dict_to_session(s) for s in data.get("sessions") or []],
            deload_weeks=[int(w) for w in data.get("deload_weeks") or []],
            periodization=periodization,
            created=data.get("created", ""),
            modified=data.get("modified", ""),
            active=bool(data.get("active", True)),
            validation_warnings=list(data.get("validation_warnings") or []),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid plan {data.get('id')!r}: {e}") from e


def plan_to_json(plan: Plan) -> str:
    """Serialize a plan to an indented JSON document."""
    return json.dumps(plan_to_dict(plan), indent=2)


def json_to_plan(text: str) -> Plan:
    """
    Deserialize a JSON document to a Plan.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e

    return dict_to_plan(data)


_DEFAULT_REST_SECONDS = 90  # Used when rest is omitted from an exercise spec

_EXERCISE_SPEC = re.compile(
    r"^(?P<sets>\d+)\s*[xX×]\s*(?P<reps>\d+(?:\s*-\s*\d+)?)"
    r"(?:\s*@\s*\+?(?P<weight>\d+(?:\.\d+)?)\s*(?:kg)?)?"
    r"(?:\s*/\s*(?P<rest>\d+)\s*s?)?$"
)


def parse_exercise_list(text: str) -> list[ExerciseEntry]:
    """
    Parse a semicolon-separated exercise list.

    Format per exercise: ``Name:SETSxREPS[@KG][/REST]``

    Examples:
        "Back Squat:4x8-12@60/90"     → 4 × 8-12 reps, 60 kg, 90 s rest
        "Push-Up:3x10"                → 3 × 10 reps, no load, 90 s rest
        "Bench:5x5@80/180; Row:3x10"  → two exercises

    Args:
        text: Exercise list string

    Returns:
        List of ExerciseEntry in the given order

    Raises:
        ValidationError: If the list is empty or any item is malformed
    """
    if not text or not text.strip():
        raise ValidationError("Exercise list cannot be empty")

    entries: list[ExerciseEntry] = []
    for item in (p.strip() for p in text.split(";")):
        if not item:
            continue

        name, sep, spec = item.rpartition(":")
        name = name.strip()
        if not sep or not name:
            raise ValidationError(
                f"Invalid exercise '{item}'. Use Name:SETSxREPS[@KG][/REST], "
                f"e.g. 'Back Squat:4x8-12@60/90'"
            )

        m = _EXERCISE_SPEC.match(spec.strip())
        if m is None:
            raise ValidationError(
                f"Invalid prescription '{spec.strip()}' for {name}. "
                f"Use SETSxREPS[@KG][/REST], e.g. 4x8-12@60/90"
            )

        sets = int(m.group("sets"))
        if sets < 1:
            raise ValidationError(f"Sets must be positive for {name}: {sets}")

        entries.append(
            ExerciseEntry(
                name=name,
                sets=sets,
                reps=re.sub(r"\s+", "", m.group("reps")),
                rest_seconds=int(m.group("rest")) if m.group("rest") else _DEFAULT_REST_SECONDS,
                weight_kg=float(m.group("weight")) if m.group("weight") else None,
            )
        )

    if not entries:
        raise ValidationError("No exercises found in exercise list")

    return entries
