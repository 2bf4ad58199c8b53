"""
YAML → CatalogExercise loader.

Loads the exercise catalog from a YAML file holding a list of records.
JSON is a subset of YAML, so catalogs exported as JSON load unchanged.

Records may use snake_case keys (``name``, ``workout_type``, ...) or the
column names of the spreadsheet export the catalog originally came from
(``Exercise Name``, ``Workout Type``, ``Primary Muscle``, ...).

The bundled catalog lives in ``src/workout_planner/data/exercises.yaml``.
User override: place ``exercises.yaml`` in the app directory
(``~/.workout-planner`` or ``$WORKOUT_PLANNER_HOME``); it replaces the
bundled catalog entirely.

Usage (internal, called by catalog.py):
    from .loader import load_catalog
    exercises = load_catalog()
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from ..engine.config_loader import get_app_dir
from .base import CatalogExercise


class CatalogError(Exception):
    """Raised when the exercise catalog cannot be read."""

    pass


# canonical field -> accepted keys, first match wins
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("name", "Exercise Name"),
    "workout_type": ("workout_type", "Workout Type"),
    "equipment": ("equipment", "Equipment"),
    "primary_muscle": ("primary_muscle", "Primary Muscle"),
    "exercise_type": ("exercise_type", "Type"),
    "secondary_muscles": ("secondary_muscles", "Secondary Muscles"),
}

_REQUIRED_FIELDS: frozenset[str] = frozenset(
    {"name", "workout_type", "equipment", "primary_muscle"}
)


def _pick(d: dict, canonical: str):
    for key in _FIELD_ALIASES[canonical]:
        if key in d and d[key] is not None:
            return d[key]
    return None


def exercise_from_dict(d: dict) -> CatalogExercise:
    """Convert a raw dict (from YAML/JSON) to a CatalogExercise.

    Raises ValueError if a required field is absent or a field has the wrong shape.
    """
    values = {canonical: _pick(d, canonical) for canonical in _FIELD_ALIASES}
    missing = sorted(f for f in _REQUIRED_FIELDS if not values[f])
    if missing:
        raise ValueError(f"CatalogExercise missing fields: {missing}")

    secondary = values["secondary_muscles"] or ()
    if isinstance(secondary, str):
        secondary = tuple(s.strip() for s in secondary.split(",") if s.strip())
    elif not isinstance(secondary, (list, tuple)):
        raise ValueError(
            f"secondary_muscles must be a list or comma-separated string, got {secondary!r}"
        )

    return CatalogExercise(
        name=str(values["name"]).strip(),
        workout_type=str(values["workout_type"]),
        equipment=str(values["equipment"]),
        primary_muscle=str(values["primary_muscle"]),
        exercise_type=str(values["exercise_type"] or "compound").lower(),
        secondary_muscles=tuple(secondary),
    )


def get_bundled_catalog_path() -> Path:
    """Return the path to the bundled exercises.yaml."""
    # loader.py lives at src/workout_planner/core/exercises/loader.py
    return Path(__file__).parent.parent.parent / "data" / "exercises.yaml"


def get_user_catalog_path() -> Path | None:
    """Return <app dir>/exercises.yaml if it exists, else None."""
    p = get_app_dir() / "exercises.yaml"
    return p if p.exists() else None


def default_catalog_path() -> Path:
    """User catalog when present, bundled catalog otherwise."""
    return get_user_catalog_path() or get_bundled_catalog_path()


def load_catalog(path: str | Path | None = None) -> list[CatalogExercise]:
    """Return the catalog records stored at ``path`` (default: see module doc).

    Malformed records are skipped with a warning.  Duplicate names keep the
    first occurrence.

    Raises:
        CatalogError: If the file is missing, unreadable, or not a list.
    """
    path = Path(path) if path is not None else default_catalog_path()

    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f"Cannot read exercise catalog {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise CatalogError(f"Cannot parse exercise catalog {path}: {exc}") from exc

    # A mapping with an "exercises" key is accepted as well as a bare list.
    if isinstance(data, dict):
        data = data.get("exercises")
    if not isinstance(data, list):
        raise CatalogError(f"Exercise catalog {path} must contain a list of records")

    result: list[CatalogExercise] = []
    seen: set[str] = set()
    for i, raw in enumerate(data, 1):
        if not isinstance(raw, dict):
            warnings.warn(
                f"workout-planner: skipping catalog record #{i}: not a mapping",
                stacklevel=2,
            )
            continue
        try:
            ex = exercise_from_dict(raw)
        except ValueError as exc:
            warnings.warn(
                f"workout-planner: skipping catalog record #{i}: {exc}",
                stacklevel=2,
            )
            continue
        if ex.name in seen:
            continue
        seen.add(ex.name)
        result.append(ex)

    return result
