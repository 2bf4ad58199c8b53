"""
Session populators.

A populator fills one session skeleton with content.  The planner keeps a
mapping of session type -> populator; types with no populator bound are
passed through unchanged.

Populators never raise for data problems: a catalog that cannot be read or
has nothing usable for the session produces a session with an empty (or
null) payload and a human-readable ``population_error``.
"""

import logging
import random
from dataclasses import dataclass, replace
from typing import Protocol

from .config import (
    HIIT_BASE_DURATION_MINUTES,
    HIIT_CATEGORY_TAG,
    HIIT_EXERCISES_PER_ROUND,
    HIIT_INTERVALS,
    STANDARD_SESSION_TYPES,
)
from .exercises.catalog import (
    CatalogProvider,
    EquipmentFilter,
    filter_by_category,
    filter_by_equipment,
)
from .models import GeneratedSession, Session, StrengthSession
from .selection import generate_standard_workout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopulationContext:
    """Everything a populator may need besides the session itself."""

    experience_level: str
    goal: str
    week_number: int
    equipment_filter: EquipmentFilter
    seed: str
    is_deload_week: bool = False


class SessionPopulator(Protocol):
    """Fills a session skeleton; returns a new session, never mutates its input."""

    async def populate(self, session: Session, context: PopulationContext) -> Session: ...


class StandardWorkoutPopulator:
    """Builds the exercise list of upper/lower/full/push/pull/legs sessions."""

    def __init__(self, catalog: CatalogProvider, config: dict | None = None):
        self.catalog = catalog
        self.config = config

    async def populate(self, session: Session, context: PopulationContext) -> Session:
        if not isinstance(session, StrengthSession):
            logger.debug("Standard populator skipping %s session", session.session_type)
            return session

        try:
            catalog = await self.catalog.fetch_exercises()
        except Exception as exc:  # any provider failure marks the session
            return _failed_strength(session, f"Failed to generate exercises: {exc}")

        usable = filter_by_equipment(
            filter_by_category(catalog, session.session_type),
            context.equipment_filter,
        )
        if not usable:
            return _failed_strength(
                session,
                f"No catalog exercises match a {session.session_type} session"
                f" with equipment {_describe_equipment(context.equipment_filter)}",
            )

        exercises = generate_standard_workout(
            usable,
            session.session_type,
            experience_level=context.experience_level,
            goal=context.goal,
            rng=random.Random(context.seed),
            config=self.config,
        )
        if not exercises:
            return _failed_strength(
                session, f"Exercise selection returned nothing for {session.session_type}"
            )

        return replace(session, exercises=exercises, population_error=None)


def apply_hiit_progression(week_number: int, base: dict | None = None) -> dict:
    """
    Adjust HIIT parameters for the given plan week.

    Week 1-2: learning pace, 80% duration
    Week 3-4: moderate intensity
    Week 5-6: +10% duration
    Week 7-8: high intensity, +10% duration, 80% rest
    Week 9+:  every 4th week is a deload (70% duration, 120% rest),
              other weeks as 7-8.

    Args:
        week_number: 1-based plan week
        base: Optional {"intensity", "duration" (minutes), "rest_ratio"}

    Returns:
        Dict with intensity, duration, rest_ratio, week_number
    """
    base = base or {}
    intensity = base.get("intensity", "moderate")
    duration = base.get("duration", HIIT_BASE_DURATION_MINUTES)
    rest_ratio = base.get("rest_ratio", 1.0)

    if week_number <= 2:
        intensity, duration = "learning", duration * 0.8
    elif week_number <= 4:
        intensity = "moderate"
    elif week_number <= 6:
        intensity, duration = "moderate", duration * 1.1
    elif week_number <= 8 or week_number % 4 != 0:
        intensity, duration, rest_ratio = "high", duration * 1.1, rest_ratio * 0.8
    else:
        intensity, duration, rest_ratio = "moderate", duration * 0.7, rest_ratio * 1.2

    return {
        "intensity": intensity,
        "duration": round(duration),
        "rest_ratio": rest_ratio,
        "week_number": week_number,
    }


class HiitPopulator:
    """Builds an interval-session payload for ``hiit`` sessions."""

    WARMUP = ["Jumping Jacks", "Arm Circles", "Leg Swings"]
    COOLDOWN = ["Standing Quad Stretch", "Hamstring Stretch", "Child's Pose"]
    PHASE_SECONDS = 300

    def __init__(self, catalog: CatalogProvider):
        self.catalog = catalog

    async def populate(self, session: Session, context: PopulationContext) -> Session:
        if not isinstance(session, GeneratedSession):
            return session

        try:
            catalog = await self.catalog.fetch_exercises()
        except Exception as exc:  # any provider failure marks the session
            return _failed_generated(session, f"Failed to generate HIIT session: {exc}")

        pool = filter_by_equipment(
            [ex for ex in catalog if HIIT_CATEGORY_TAG in ex.workout_type],
            context.equipment_filter,
        )
        if not pool:
            return _failed_generated(session, "No HIIT exercises available in the catalog")

        protocol = apply_hiit_progression(context.week_number)
        work, rest, rounds = HIIT_INTERVALS.get(
            context.experience_level, HIIT_INTERVALS["intermediate"]
        )
        rest = round(rest * protocol["rest_ratio"])
        rng = random.Random(context.seed)
        picked = rng.sample(pool, min(HIIT_EXERCISES_PER_ROUND, len(pool)))
        main_seconds = rounds * len(picked) * (work + rest)

        payload = {
            "protocol": protocol,
            "warmup": {"exercises": list(self.WARMUP), "duration_seconds": self.PHASE_SECONDS},
            "main_workout": {
                "exercises": [ex.name for ex in picked],
                "rounds": rounds,
                "work_seconds": work,
                "rest_seconds": rest,
            },
            "cooldown": {"exercises": list(self.COOLDOWN), "duration_seconds": self.PHASE_SECONDS},
            "total_duration": main_seconds + 2 * self.PHASE_SECONDS,
        }
        return replace(session, session_data=payload, population_error=None)


def default_populators(
    catalog: CatalogProvider,
    config: dict | None = None,
    with_hiit: bool = False,
) -> dict[str, SessionPopulator]:
    """Populator map for the standard types, optionally with HIIT content."""
    standard = StandardWorkoutPopulator(catalog, config)
    populators: dict[str, SessionPopulator] = {t: standard for t in sorted(STANDARD_SESSION_TYPES)}
    if with_hiit:
        populators["hiit"] = HiitPopulator(catalog)
    return populators


def _failed_strength(session: StrengthSession, message: str) -> StrengthSession:
    logger.warning("Session %s (%s): %s", session.id, session.session_type, message)
    return replace(session, exercises=[], population_error=message)


def _failed_generated(session: GeneratedSession, message: str) -> GeneratedSession:
    logger.warning("Session %s (%s): %s", session.id, session.session_type, message)
    return replace(session, session_data=None, population_error=message)


def _describe_equipment(equipment_filter: EquipmentFilter) -> str:
    if isinstance(equipment_filter, str):
        return equipment_filter
    return ", ".join(equipment_filter)
