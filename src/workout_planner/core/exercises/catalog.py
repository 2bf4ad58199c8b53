"""
Exercise catalog providers and category matching.

The planner only talks to the catalog through the CatalogProvider
protocol, so the bundled YAML file, a user file, or an in-memory list can
be swapped freely.  Category and equipment matching are loose substring
matches against the catalog's free-text tags; both live here so that the
catalog's tagging scheme can change without touching the scheduler.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol, Sequence

from ..config import EQUIPMENT_ALIASES, SESSION_CATEGORY_TAGS
from .base import CatalogExercise
from .loader import load_catalog

EquipmentFilter = str | Sequence[str]


class CatalogProvider(Protocol):
    """Anything that can asynchronously supply the exercise catalog."""

    async def fetch_exercises(self) -> list[CatalogExercise]: ...


class FileCatalogProvider:
    """
    Catalog read from a YAML/JSON file, loaded once on first fetch.

    Raises CatalogError from fetch_exercises() if the file cannot be read.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self._exercises: list[CatalogExercise] | None = None

    async def fetch_exercises(self) -> list[CatalogExercise]:
        if self._exercises is None:
            self._exercises = load_catalog(self.path)
        return list(self._exercises)


class StaticCatalogProvider:
    """Catalog held in memory."""

    def __init__(self, exercises: Iterable[CatalogExercise]):
        self._exercises = list(exercises)

    async def fetch_exercises(self) -> list[CatalogExercise]:
        return list(self._exercises)


def matches_session_category(workout_type: str | None, session_type: str) -> bool:
    """
    Return True if a catalog workout-type tag suits the given session type.

    upper -> "Upper Body" | "Full Body" | "Push/Pull/Legs"
    lower -> "Lower Body" | "Full Body" | "Push/Pull/Legs"
    full  -> "Full Body"
    push/pull/legs -> "Push/Pull/Legs"

    Unknown session types match nothing.
    """
    if not workout_type:
        return False
    tags = SESSION_CATEGORY_TAGS.get(session_type, ())
    return any(tag in workout_type for tag in tags)


def filter_by_category(
    exercises: Iterable[CatalogExercise],
    session_type: str,
) -> list[CatalogExercise]:
    """Keep catalog entries whose workout-type tag suits ``session_type``."""
    return [ex for ex in exercises if matches_session_category(ex.workout_type, session_type)]


def normalize_equipment_filter(equipment: EquipmentFilter | None) -> EquipmentFilter:
    """Collapse an equipment list to the "all" sentinel when it contains "all"."""
    if equipment is None:
        return "all"
    if isinstance(equipment, str):
        return "all" if equipment.lower() == "all" else [equipment]
    items = list(equipment)
    if not items or any(e.lower() == "all" for e in items):
        return "all"
    return items


def matches_equipment(equipment: str, equipment_filter: EquipmentFilter) -> bool:
    """Case-insensitive substring match of a catalog equipment tag against a filter."""
    if equipment_filter == "all":
        return True
    filters = [equipment_filter] if isinstance(equipment_filter, str) else equipment_filter
    tag = equipment.lower()
    for f in filters:
        needle = f.lower()
        needle = EQUIPMENT_ALIASES.get(needle, needle)
        if needle in tag:
            return True
    return False


def filter_by_equipment(
    exercises: Iterable[CatalogExercise],
    equipment_filter: EquipmentFilter,
) -> list[CatalogExercise]:
    """Keep catalog entries usable with the available equipment."""
    return [ex for ex in exercises if matches_equipment(ex.equipment, equipment_filter)]
