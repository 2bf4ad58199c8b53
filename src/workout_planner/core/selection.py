"""
Exercise selection for standard resistance sessions.

Turns a pre-filtered slice of the catalog into an ordered exercise list:

1. Decide how many exercises the session gets (session type × experience).
2. Fill per-muscle quotas for the session type by random sampling.
3. Top up from any muscle group when the quotas fall short.
4. Order the result into agonist/antagonist supersets.
5. Attach sets/reps/rest from the goal and exercise type.

Sampling uses the ``random.Random`` passed in, so a seeded generator gives
the same workout for the same catalog every time.
"""

import logging
import random

from .config import (
    DEFAULT_EXERCISE_COUNT,
    FULL_BODY_MUSCLES,
    MUSCLE_QUOTAS,
    OPPOSING_MUSCLES,
    REP_RANGES,
    REST_SECONDS,
    SETS_BY_EXERCISE_TYPE,
)
from .exercises.base import CatalogExercise
from .exercises.catalog import EquipmentFilter, filter_by_equipment
from .models import ExerciseEntry

logger = logging.getLogger(__name__)


def get_optimal_exercise_count(
    session_type: str,
    experience_level: str = "intermediate",
    config: dict | None = None,
) -> int:
    """
    Number of exercises for a session.

    Args:
        session_type: upper, lower, full, push, pull or legs
        experience_level: beginner, intermediate or advanced
        config: Planner config (load_planner_config()); None = built-in table

    Returns:
        Exercise count (DEFAULT_EXERCISE_COUNT for unknown combinations)
    """
    if config is None:
        from .engine.config_loader import default_planner_config
        config = default_planner_config()
    counts = config.get("exercise_counts", {}).get(experience_level, {})
    return int(counts.get(session_type, DEFAULT_EXERCISE_COUNT))


def muscle_quotas(session_type: str, target_count: int) -> list[tuple[str, int]]:
    """
    Return the (muscle group, count) quotas filled in order for a session.

    push/pull/legs/upper use fixed quotas.  lower gives ~40% to quads,
    ~30% to hamstrings, one glute exercise and the rest to core.  full
    splits the count evenly over chest, lats, quads and hamstrings with the
    remainder going to core.
    """
    if session_type in MUSCLE_QUOTAS:
        return list(MUSCLE_QUOTAS[session_type])

    if session_type == "lower":
        quads = min(4, int(target_count * 0.4))
        hams = min(3, int(target_count * 0.3))
        core = max(1, target_count - quads - hams - 1)
        return [("Quads", quads), ("Hamstrings", hams), ("Glutes", 1), ("Core", core)]

    if session_type == "full":
        per_muscle = target_count // 4
        remainder = target_count - per_muscle * 4
        quotas = [(m, per_muscle) for m in FULL_BODY_MUSCLES]
        if remainder > 0:
            quotas.append(("Core", remainder))
        return quotas

    logger.warning("No muscle quotas for session type %r", session_type)
    return []


def group_by_muscle(exercises: list[CatalogExercise]) -> dict[str, list[CatalogExercise]]:
    """Group catalog entries by primary muscle group, preserving catalog order."""
    groups: dict[str, list[CatalogExercise]] = {}
    for ex in exercises:
        groups.setdefault(ex.muscle_group, []).append(ex)
    return groups


def _sample_muscle(
    by_muscle: dict[str, list[CatalogExercise]],
    muscle: str,
    count: int,
    current: list[CatalogExercise],
    rng: random.Random,
) -> list[CatalogExercise]:
    """Pick ``count`` exercises for ``muscle`` that are not already in ``current``."""
    taken = {ex.name for ex in current}
    available = [ex for ex in by_muscle.get(muscle, []) if ex.name not in taken]

    if len(available) < count:
        logger.debug(
            "Insufficient exercises for %s: available %d, requested %d",
            muscle, len(available), count,
        )
        return available

    return rng.sample(available, count)


def pick_exercises(
    exercises: list[CatalogExercise],
    session_type: str,
    target_count: int,
    rng: random.Random,
) -> list[CatalogExercise]:
    """Fill muscle quotas, then trim or top up to exactly ``target_count`` where possible."""
    by_muscle = group_by_muscle(exercises)
    workout: list[CatalogExercise] = []

    for muscle, count in muscle_quotas(session_type, target_count):
        if count > 0:
            workout.extend(_sample_muscle(by_muscle, muscle, count, workout, rng))

    if len(workout) > target_count:
        return workout[:target_count]

    # Top up from random muscle groups; stop at the first group that is exhausted.
    muscles = sorted(by_muscle)
    while len(workout) < target_count and muscles:
        filler = _sample_muscle(by_muscle, rng.choice(muscles), 1, workout, rng)
        if not filler:
            break
        workout.append(filler[0])

    return workout


def pair_exercises(exercises: list[CatalogExercise]) -> list[CatalogExercise]:
    """
    Order exercises into supersets.

    Each exercise is paired with the first remaining exercise working the
    opposing muscle; failing that, with one working a different muscle;
    failing that, with the next one.  An odd exercise out goes last.
    """
    paired: list[CatalogExercise] = []
    remaining = list(exercises)

    while len(remaining) >= 2:
        first = remaining.pop(0)
        muscle = first.muscle_group
        opposing = OPPOSING_MUSCLES.get(muscle)

        best = -1
        if opposing:
            best = next(
                (i for i, ex in enumerate(remaining) if opposing in ex.primary_muscle), -1
            )
        if best == -1:
            best = next(
                (i for i, ex in enumerate(remaining) if muscle not in ex.primary_muscle), -1
            )
        if best == -1:
            best = 0

        paired.extend([first, remaining.pop(best)])

    paired.extend(remaining)
    return paired


def to_exercise_entries(
    paired: list[CatalogExercise],
    goal: str = "general_fitness",
    config: dict | None = None,
) -> list[ExerciseEntry]:
    """
    Build ExerciseEntry prescriptions from a superset-ordered list.

    Consecutive pairs share a superset tag ("A", "B", ...); a trailing
    unpaired exercise has none.
    """
    rep_ranges = (config or {}).get("rep_ranges", REP_RANGES)
    rest_table = (config or {}).get("rest_seconds", REST_SECONDS)
    reps = str(rep_ranges.get(goal, REP_RANGES["general_fitness"]))
    rest = int(rest_table.get(goal, REST_SECONDS["general_fitness"]))
    paired_len = len(paired) - len(paired) % 2

    entries: list[ExerciseEntry] = []
    for i, ex in enumerate(paired):
        entries.append(
            ExerciseEntry(
                name=ex.name,
                sets=SETS_BY_EXERCISE_TYPE.get(ex.exercise_type, 3),
                reps=reps,
                rest_seconds=rest,
                weight_kg=None,
                superset_group=chr(ord("A") + i // 2) if i < paired_len else None,
            )
        )
    return entries


def generate_standard_workout(
    exercises: list[CatalogExercise],
    session_type: str,
    equipment_filter: EquipmentFilter = "all",
    experience_level: str = "intermediate",
    goal: str = "general_fitness",
    rng: random.Random | None = None,
    config: dict | None = None,
) -> list[ExerciseEntry]:
    """
    Generate the exercise list for one standard session.

    Args:
        exercises: Catalog entries already filtered to the session's category
        session_type: upper, lower, full, push, pull or legs
        equipment_filter: "all" or a list of equipment names
        experience_level: beginner, intermediate or advanced
        goal: Plan goal (drives reps and rest)
        rng: Random generator; pass a seeded one for reproducible output
        config: Planner config overrides (exercise counts, rep ranges, rest)

    Returns:
        Superset-ordered ExerciseEntry list (empty if nothing is usable)
    """
    usable = filter_by_equipment(exercises, equipment_filter)
    if not usable:
        logger.warning("No usable exercises for %s session", session_type)
        return []

    rng = rng or random.Random()
    target = get_optimal_exercise_count(session_type, experience_level, config)
    picked = pick_exercises(usable, session_type, target, rng)
    return to_exercise_entries(pair_exercises(picked), goal, config)
