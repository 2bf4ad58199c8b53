"""
Plan generation for workout-planner.

Generates deterministic multi-week training plans from user preferences:
split selection, training weekdays, a repeating session-type pattern,
deload weeks every 4th week, and exercise population with one selection
per (session type, training block) so that loads can progress on the same
exercises week over week.
"""

import copy
import logging
import math
import uuid
from dataclasses import replace
from datetime import date, datetime, timedelta

from .config import (
    APPEND_MIN_LENGTH,
    DEFAULT_PATTERN,
    DEFAULT_TRAINING_DAYS,
    DELOAD_FREQUENCY_WEEKS,
    FALLBACK_TRAINING_DAYS_KEY,
    HIIT_SPLICE_INDEX,
    HIIT_SPLICE_MIN_LENGTH,
    PLAN_TEMPLATES,
    SPLIT_PATTERNS,
    STANDARD_SESSION_TYPES,
    UNDULATING_MIN_DAYS,
    VOLUME_PROGRESSION,
)
from .exercises.catalog import CatalogProvider, FileCatalogProvider, normalize_equipment_filter
from .models import (
    GeneratedSession,
    Periodization,
    Plan,
    PlanPreferences,
    Session,
    SplitType,
    StrengthSession,
    new_session,
    to_iso_date,
    validate_plan_ranges,
    validate_preferred_days,
)
from .populators import PopulationContext, SessionPopulator, default_populators

logger = logging.getLogger(__name__)


# =============================================================================
# Ids and timestamps
# =============================================================================


def generate_plan_id() -> str:
    return f"plan_{uuid.uuid4().hex[:12]}"


def generate_session_id() -> str:
    return f"session_{uuid.uuid4().hex[:12]}"


def timestamp() -> str:
    """Current local time as an ISO string (seconds precision)."""
    return datetime.now().isoformat(timespec="seconds")


def sunday_based_weekday(d: date) -> int:
    """Weekday with 0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


# =============================================================================
# Split, training days, pattern, deloads
# =============================================================================


def determine_split_type(days_per_week: int, experience_level: str) -> SplitType:
    """
    Choose the weekly split.

    ≤3 days or beginner -> full_body; 4-5 days -> upper_lower; 6-7 -> ppl.
    """
    if days_per_week <= 3 or experience_level == "beginner":
        return "full_body"
    if days_per_week in (4, 5):
        return "upper_lower"
    return "ppl"


def calculate_training_days(
    days_per_week: int,
    preferred_days: list[int] | None = None,
) -> list[int]:
    """
    Return the weekdays to train on (0=Sunday .. 6=Saturday).

    Preferred days win whenever their count equals days_per_week; no
    spacing checks are made.  Otherwise an even-spread default is used,
    falling back to the 3-day default for an unknown count.
    """
    if preferred_days and len(preferred_days) == days_per_week:
        return list(preferred_days)
    return list(
        DEFAULT_TRAINING_DAYS.get(days_per_week, DEFAULT_TRAINING_DAYS[FALLBACK_TRAINING_DAYS_KEY])
    )


def generate_session_pattern(
    split_type: str,
    session_types: list[str],
    experience_level: str,
) -> list[str]:
    """
    Build the repeating list of session types for a plan.

    The list is cycled over the training days, so its length need not match
    days_per_week.

    1. Any standard type requested -> base pattern from the split.
    2. Not a beginner: hiit is spliced in at index 3 when the base has at
       least 4 entries; otherwise cardio is appended when it has at least 3.
    3. stretch is appended when the pattern has at least 3 entries.
    4. No standard type -> hiit, cardio, stretch (those requested, in order).
    5. Still empty -> [full, full, full].
    """
    requested = set(session_types)
    include_standard = bool(requested & STANDARD_SESSION_TYPES)
    include_hiit = "hiit" in requested
    include_cardio = "cardio" in requested
    include_stretch = "stretch" in requested

    pattern: list[str] = []

    if include_standard:
        pattern = list(SPLIT_PATTERNS.get(split_type, []))

    if pattern:
        if experience_level != "beginner" and (include_hiit or include_cardio):
            if len(pattern) >= HIIT_SPLICE_MIN_LENGTH and include_hiit:
                pattern.insert(HIIT_SPLICE_INDEX, "hiit")
            elif len(pattern) >= APPEND_MIN_LENGTH and include_cardio:
                pattern.append("cardio")

        if include_stretch and len(pattern) >= APPEND_MIN_LENGTH:
            pattern.append("stretch")
    else:
        if include_hiit:
            pattern.append("hiit")
        if include_cardio:
            pattern.append("cardio")
        if include_stretch:
            pattern.append("stretch")

    if not pattern:
        pattern = list(DEFAULT_PATTERN)

    return pattern


def calculate_deload_weeks(duration_days: int) -> list[int]:
    """
    Deload every 4th week: [4, 8, ...] up to floor(duration / 7).

    Examples: 28 -> [4]; 90 -> [4, 8, 12]; 21 -> [].
    """
    total_weeks = duration_days // 7
    return list(range(DELOAD_FREQUENCY_WEEKS, total_weeks + 1, DELOAD_FREQUENCY_WEEKS))


def periodization_for(duration_days: int) -> Periodization:
    return Periodization(
        style="undulating" if duration_days >= UNDULATING_MIN_DAYS else "linear",
        deload_frequency=DELOAD_FREQUENCY_WEEKS,
        volume_progression=VOLUME_PROGRESSION,
    )


# =============================================================================
# Weeks and training blocks
# =============================================================================


def week_number_for_index(index: int, days_per_week: int) -> int:
    """1-based plan week of the session at position ``index``."""
    return index // days_per_week + 1


def block_number_for_week(week_number: int, deload_weeks: list[int]) -> int:
    """1 + number of deload weeks strictly before ``week_number``."""
    return 1 + sum(1 for w in deload_weeks if w < week_number)


def block_bounds(
    week_number: int,
    deload_weeks: list[int],
    duration_days: int,
) -> tuple[int, int]:
    """
    Exclusive week bounds (low, high) of the block holding ``week_number``.

    A block is the run of weeks strictly between the nearest deload weeks
    (or plan start/end).  A deload week is its own single-week block.
    """
    if week_number in deload_weeks:
        return week_number - 1, week_number + 1
    low = max((w for w in deload_weeks if w < week_number), default=0)
    high = min(
        (w for w in deload_weeks if w > week_number),
        default=math.ceil(duration_days / 7) + 1,
    )
    return low, high


# =============================================================================
# Schedule
# =============================================================================


def generate_session_schedule(
    start_date: "date | str",
    duration_days: int,
    days_per_week: int,
    split_type: str,
    session_types: list[str],
    preferred_days: list[int] | None = None,
    experience_level: str = "intermediate",
) -> list[Session]:
    """
    Lay out unpopulated sessions over the plan's calendar days.

    Walks every day in [start, start + duration); each training weekday
    receives the next entry of the session pattern.

    Returns:
        Sessions in date order, status "planned", no payload
    """
    start = date.fromisoformat(to_iso_date(start_date))
    training_days = set(calculate_training_days(days_per_week, preferred_days))
    pattern = generate_session_pattern(split_type, session_types, experience_level)

    sessions: list[Session] = []
    cursor = 0
    for offset in range(duration_days):
        day = start + timedelta(days=offset)
        if sunday_based_weekday(day) not in training_days:
            continue
        sessions.append(
            new_session(
                generate_session_id(),
                day.isoformat(),
                pattern[cursor % len(pattern)],
            )
        )
        cursor += 1

    return sessions


# =============================================================================
# Population
# =============================================================================


def plan_seed(source: "PlanPreferences | Plan") -> str:
    """
    Seed string shared by every selection in a plan.

    Built from the plan inputs only, so regenerating with the same
    preferences reproduces the same exercises.
    """
    return "|".join(
        [
            source.goal,
            source.experience_level,
            str(source.days_per_week),
            str(source.duration_days),
            source.start_date,
            ",".join(source.session_types),
            ",".join(source.equipment_available),
        ]
    )


def _block_seed(base_seed: str, session_type: str, block: int) -> str:
    return f"{base_seed}:{session_type}:block{block}"


def _copy_content(target: Session, source: Session, is_deload_week: bool) -> Session:
    """Give ``target`` a value copy of ``source``'s payload."""
    if isinstance(target, StrengthSession):
        return replace(
            target,
            exercises=copy.deepcopy(source.exercises),
            population_error=source.population_error,
            is_deload_week=is_deload_week,
        )
    if isinstance(target, GeneratedSession):
        return replace(
            target,
            session_data=copy.deepcopy(source.session_data),
            population_error=source.population_error,
            is_deload_week=is_deload_week,
        )
    return replace(target, is_deload_week=is_deload_week)


async def populate_sessions(
    sessions: list[Session],
    *,
    days_per_week: int,
    deload_weeks: list[int],
    experience_level: str,
    goal: str,
    equipment_available: list[str],
    seed: str,
    populators: dict[str, SessionPopulator],
) -> list[Session]:
    """
    Populate sessions, reusing one selection per (session type, block).

    Precondition: ``sessions`` is in chronological order.  The first session
    of a (type, block) pair primes the cache; later ones get deep copies.
    Sessions are awaited one at a time, never concurrently.

    Raises:
        ValueError: If sessions are not sorted by date.
    """
    for prev, cur in zip(sessions, sessions[1:]):
        if cur.date < prev.date:
            raise ValueError(
                f"Sessions must be in chronological order: {cur.id} ({cur.date}) "
                f"follows {prev.id} ({prev.date})"
            )

    equipment_filter = normalize_equipment_filter(equipment_available)
    cache: dict[tuple[str, int], Session] = {}
    populated: list[Session] = []

    for index, session in enumerate(sessions):
        week = week_number_for_index(index, days_per_week)
        is_deload = week in deload_weeks
        block = block_number_for_week(week, deload_weeks)
        key = (session.session_type, block)

        populator = populators.get(session.session_type)
        if populator is None:
            populated.append(replace(session, is_deload_week=is_deload))
            continue

        if key in cache:
            logger.debug("Reusing %s block %d selection for %s", key[0], block, session.id)
            populated.append(_copy_content(session, cache[key], is_deload))
            continue

        context = PopulationContext(
            experience_level=experience_level,
            goal=goal,
            week_number=week,
            equipment_filter=equipment_filter,
            seed=_block_seed(seed, session.session_type, block),
            is_deload_week=is_deload,
        )
        result = await populator.populate(session, context)
        result = replace(result, is_deload_week=is_deload)
        cache[key] = result
        populated.append(result)

    return populated


def validate_session(session: Session) -> tuple[bool, list[str]]:
    """
    Check that a session is ready to be trained.

    Returns:
        (is_valid, errors)
    """
    errors: list[str] = []

    if session.population_error:
        errors.append(session.population_error)

    if isinstance(session, StrengthSession) and not session.exercises:
        errors.append(f"Standard workout session ({session.session_type}) missing exercises")

    return not errors, errors


def collect_validation_warnings(sessions: list[Session]) -> list[str]:
    """One "Session N (type): errors" line per invalid session."""
    warnings_: list[str] = []
    for i, session in enumerate(sessions, 1):
        ok, errors = validate_session(session)
        if not ok:
            warnings_.append(f"Session {i} ({session.session_type}): {', '.join(errors)}")
    return warnings_


def _resolve_populators(
    catalog: CatalogProvider | None,
    populators: dict[str, SessionPopulator] | None,
    config: dict | None,
) -> dict[str, SessionPopulator]:
    if populators is not None:
        return populators
    return default_populators(catalog or FileCatalogProvider(), config)


async def generate_workout_plan(
    preferences: PlanPreferences,
    catalog: CatalogProvider | None = None,
    populators: dict[str, SessionPopulator] | None = None,
    config: dict | None = None,
) -> Plan:
    """
    Generate a complete, populated workout plan.

    Args:
        preferences: Validated user preferences
        catalog: Exercise catalog (default: user or bundled YAML file)
        populators: Session type -> populator; default binds the standard
            types to StandardWorkoutPopulator over ``catalog``
        config: Planner config overrides (see load_planner_config)

    Returns:
        Plan; sessions that could not be populated carry a
        population_error and are listed in plan.validation_warnings

    Raises:
        ValueError: If days_per_week or duration_days is out of range.
    """
    validate_plan_ranges(preferences.days_per_week, preferences.duration_days)
    populators = _resolve_populators(catalog, populators, config)

    split_type = determine_split_type(preferences.days_per_week, preferences.experience_level)
    skeletons = generate_session_schedule(
        preferences.start_date,
        preferences.duration_days,
        preferences.days_per_week,
        split_type,
        preferences.session_types,
        preferences.preferred_days,
        preferences.experience_level,
    )
    deload_weeks = calculate_deload_weeks(preferences.duration_days)

    sessions = await populate_sessions(
        skeletons,
        days_per_week=preferences.days_per_week,
        deload_weeks=deload_weeks,
        experience_level=preferences.experience_level,
        goal=preferences.goal,
        equipment_available=preferences.equipment_available,
        seed=plan_seed(preferences),
        populators=populators,
    )

    validation_warnings = collect_validation_warnings(sessions)
    if validation_warnings:
        logger.warning(
            "%d session(s) failed validation: %s",
            len(validation_warnings), "; ".join(validation_warnings),
        )

    start = date.fromisoformat(preferences.start_date)
    now = timestamp()
    return Plan(
        id=generate_plan_id(),
        name=preferences.plan_name,
        start_date=preferences.start_date,
        end_date=(start + timedelta(days=preferences.duration_days)).isoformat(),
        duration_days=preferences.duration_days,
        goal=preferences.goal,
        experience_level=preferences.experience_level,
        days_per_week=preferences.days_per_week,
        split_type=split_type,
        session_types=list(preferences.session_types),
        equipment_available=list(preferences.equipment_available),
        sessions=sessions,
        deload_weeks=deload_weeks,
        periodization=periodization_for(preferences.duration_days),
        created=now,
        modified=now,
        active=True,
        validation_warnings=validation_warnings,
    )


async def populate_plan(
    plan: Plan,
    catalog: CatalogProvider | None = None,
    populators: dict[str, SessionPopulator] | None = None,
    config: dict | None = None,
) -> Plan:
    """Re-run population for every session of an existing plan."""
    populators = _resolve_populators(catalog, populators, config)
    sessions = await populate_sessions(
        plan.sessions,
        days_per_week=plan.days_per_week,
        deload_weeks=plan.deload_weeks,
        experience_level=plan.experience_level,
        goal=plan.goal,
        equipment_available=plan.equipment_available,
        seed=plan_seed(plan),
        populators=populators,
    )
    return replace(
        plan,
        sessions=sessions,
        validation_warnings=collect_validation_warnings(sessions),
        modified=timestamp(),
    )


async def repopulate_session(
    plan: Plan,
    session_id: str,
    catalog: CatalogProvider | None = None,
    populators: dict[str, SessionPopulator] | None = None,
    config: dict | None = None,
) -> Plan:
    """
    Populate a single session again, e.g. after a failed catalog fetch.

    Uses the seed of the session's (type, block) pair, so a repaired session
    matches its block siblings when the catalog is unchanged.  Unknown ids
    and types without a populator leave the plan untouched.
    """
    index = plan.session_index(session_id)
    if index < 0:
        return plan

    session = plan.sessions[index]
    populators = _resolve_populators(catalog, populators, config)
    populator = populators.get(session.session_type)
    if populator is None:
        return plan

    week = week_number_for_index(index, plan.days_per_week)
    block = block_number_for_week(week, plan.deload_weeks)
    context = PopulationContext(
        experience_level=plan.experience_level,
        goal=plan.goal,
        week_number=week,
        equipment_filter=normalize_equipment_filter(plan.equipment_available),
        seed=_block_seed(plan_seed(plan), session.session_type, block),
        is_deload_week=week in plan.deload_weeks,
    )
    refreshed = await populator.populate(replace(session, population_error=None), context)

    sessions = list(plan.sessions)
    sessions[index] = refreshed
    return replace(
        plan,
        sessions=sessions,
        validation_warnings=collect_validation_warnings(sessions),
        modified=timestamp(),
    )


# =============================================================================
# Plan-level helpers
# =============================================================================


def customize_plan(
    plan: Plan,
    *,
    name: str | None = None,
    days_per_week: int | None = None,
    duration_days: int | None = None,
    session_types: list[str] | None = None,
    preferred_days: list[int] | None = None,
) -> Plan:
    """
    Return a copy of ``plan`` with new settings.

    Changing days_per_week, duration_days, session_types or preferred_days
    rebuilds the schedule as unpopulated skeletons (run populate_plan()
    afterwards) and recomputes split, end date and deload weeks.

    Raises:
        ValueError: If the new days_per_week or duration_days is out of range,
            or preferred_days repeats or leaves the 0-6 range.
    """
    changes: dict = {"modified": timestamp()}
    if name:
        changes["name"] = name

    if any(v is not None for v in (days_per_week, duration_days, session_types, preferred_days)):
        days = days_per_week if days_per_week is not None else plan.days_per_week
        duration = duration_days if duration_days is not None else plan.duration_days
        types = list(session_types) if session_types is not None else list(plan.session_types)
        validate_plan_ranges(days, duration)
        if preferred_days is not None:
            validate_preferred_days(preferred_days)

        split_type = determine_split_type(days, plan.experience_level)
        start = date.fromisoformat(plan.start_date)
        changes.update(
            days_per_week=days,
            duration_days=duration,
            session_types=types,
            split_type=split_type,
            end_date=(start + timedelta(days=duration)).isoformat(),
            deload_weeks=calculate_deload_weeks(duration),
            periodization=periodization_for(duration),
            sessions=generate_session_schedule(
                start, duration, days, split_type, types, preferred_days, plan.experience_level
            ),
            validation_warnings=[],
        )

    return replace(plan, **changes)


def get_recommended_plan_template(goal: str, experience_level: str) -> dict:
    """
    Recommended days/session types for a goal and experience level.

    Unknown combinations fall back to intermediate general fitness.
    """
    template = PLAN_TEMPLATES.get(experience_level, {}).get(goal)
    if template is None:
        template = PLAN_TEMPLATES["intermediate"]["general_fitness"]
    return copy.deepcopy(template)
