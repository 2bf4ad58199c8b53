"""
Tests for plan generation.

Covers split/day/pattern/deload helpers, the session schedule, and the
populated plan produced by generate_workout_plan().  Hand-computed expected
values are given in docstrings.

Calendar used throughout: 2026-01-05 is a Monday.
"""

import asyncio
from dataclasses import replace

import pytest

from workout_planner.core.exercises import StaticCatalogProvider, load_catalog
from workout_planner.core.exercises.catalog import FileCatalogProvider
from workout_planner.core.models import GeneratedSession, PlanPreferences, StrengthSession
from workout_planner.core.planner import (
    block_bounds,
    block_number_for_week,
    calculate_deload_weeks,
    calculate_training_days,
    customize_plan,
    determine_split_type,
    generate_session_pattern,
    generate_session_schedule,
    generate_workout_plan,
    get_recommended_plan_template,
    populate_sessions,
    repopulate_session,
    validate_session,
    week_number_for_index,
)
from workout_planner.core.populators import default_populators

MONDAY = "2026-01-05"


# ===========================================================================
# Helpers
# ===========================================================================

def _catalog() -> StaticCatalogProvider:
    return StaticCatalogProvider(load_catalog())


def _prefs(**overrides) -> PlanPreferences:
    base = dict(
        goal="hypertrophy",
        experience_level="intermediate",
        days_per_week=3,
        duration_days=28,
        start_date=MONDAY,
        session_types=["full"],
    )
    base.update(overrides)
    return PlanPreferences(**base)


def _generate(prefs: PlanPreferences, catalog=None, populators=None):
    return asyncio.run(
        generate_workout_plan(prefs, catalog=catalog or _catalog(), populators=populators)
    )


def _names(session) -> list[str]:
    return [e.name for e in session.exercises]


# ===========================================================================
# Split, training days, pattern
# ===========================================================================

class TestSplitAndDays:

    @pytest.mark.parametrize(
        "days, level, expected",
        [
            (2, "advanced", "full_body"),
            (3, "advanced", "full_body"),
            (4, "beginner", "full_body"),
            (4, "intermediate", "upper_lower"),
            (5, "advanced", "upper_lower"),
            (6, "intermediate", "ppl"),
            (7, "advanced", "ppl"),
        ],
    )
    def test_split_type(self, days, level, expected):
        assert determine_split_type(days, level) == expected

    def test_default_training_days(self):
        assert calculate_training_days(2) == [1, 4]
        assert calculate_training_days(3) == [1, 3, 5]
        assert calculate_training_days(7) == [0, 1, 2, 3, 4, 5, 6]

    def test_preferred_days_win_when_count_matches(self):
        assert calculate_training_days(3, [0, 2, 4]) == [0, 2, 4]

    def test_preferred_days_ignored_when_count_differs(self):
        assert calculate_training_days(3, [1, 2]) == [1, 3, 5]

    def test_unknown_count_falls_back_to_three_days(self):
        assert calculate_training_days(9) == [1, 3, 5]


class TestSessionPattern:

    def test_hiit_spliced_into_upper_lower(self):
        """upper_lower base has 4 entries -> hiit inserted at index 3."""
        pattern = generate_session_pattern("upper_lower", ["upper", "lower", "hiit"], "intermediate")
        assert pattern == ["upper", "lower", "upper", "hiit", "lower"]

    def test_hiit_not_spliced_into_three_entry_pattern(self):
        pattern = generate_session_pattern("full_body", ["full", "hiit"], "intermediate")
        assert pattern == ["full", "full", "full"]

    def test_cardio_appended_to_full_body(self):
        pattern = generate_session_pattern("full_body", ["full", "cardio"], "intermediate")
        assert pattern == ["full", "full", "full", "cardio"]

    def test_hiit_wins_over_cardio(self):
        """Only one conditioning session is added: hiit when it fits, else cardio."""
        pattern = generate_session_pattern("ppl", ["push", "hiit", "cardio"], "advanced")
        assert pattern == ["push", "pull", "legs", "hiit", "push", "pull", "legs"]

    def test_beginner_gets_no_conditioning(self):
        pattern = generate_session_pattern(
            "full_body", ["full", "cardio", "stretch"], "beginner"
        )
        assert pattern == ["full", "full", "full", "stretch"]

    def test_stretch_appended_after_conditioning(self):
        pattern = generate_session_pattern(
            "upper_lower", ["upper", "hiit", "stretch"], "intermediate"
        )
        assert pattern == ["upper", "lower", "upper", "hiit", "lower", "stretch"]

    def test_non_standard_only(self):
        pattern = generate_session_pattern("full_body", ["stretch", "hiit"], "intermediate")
        assert pattern == ["hiit", "stretch"]

    def test_nothing_usable_defaults_to_full(self):
        assert generate_session_pattern("full_body", ["yoga"], "intermediate") == [
            "full", "full", "full",
        ]


# ===========================================================================
# Deloads and blocks
# ===========================================================================

class TestDeloadsAndBlocks:

    @pytest.mark.parametrize(
        "duration, expected",
        [(1, []), (21, []), (28, [4]), (56, [4, 8]), (90, [4, 8, 12])],
    )
    def test_deload_weeks(self, duration, expected):
        """floor(duration / 7) weeks; every 4th is a deload."""
        assert calculate_deload_weeks(duration) == expected

    def test_week_number_for_index(self):
        """3 sessions/week: indices 0-2 -> week 1, 3 -> week 2."""
        assert week_number_for_index(0, 3) == 1
        assert week_number_for_index(2, 3) == 1
        assert week_number_for_index(3, 3) == 2

    def test_block_number(self):
        """Deload week 4 still belongs to block 1; week 5 starts block 2."""
        assert block_number_for_week(1, [4, 8]) == 1
        assert block_number_for_week(4, [4, 8]) == 1
        assert block_number_for_week(5, [4, 8]) == 2
        assert block_number_for_week(9, [4, 8]) == 3

    def test_block_bounds(self):
        """Exclusive bounds; plan end bound is ceil(duration / 7) + 1."""
        assert block_bounds(2, [4], 28) == (0, 4)
        assert block_bounds(6, [4, 8], 60) == (4, 8)
        assert block_bounds(10, [4, 8], 60) == (8, 10)  # ceil(60/7)+1 = 10

    def test_deload_week_is_its_own_block(self):
        assert block_bounds(4, [4, 8], 60) == (3, 5)


# ===========================================================================
# Schedule
# ===========================================================================

class TestSchedule:

    def test_session_count_two_weeks(self):
        """3 days/week from a Monday over 14 days -> Mon/Wed/Fri x 2 = 6 sessions."""
        sessions = generate_session_schedule(MONDAY, 14, 3, "full_body", ["full"])
        assert [s.date for s in sessions] == [
            "2026-01-05", "2026-01-07", "2026-01-09",
            "2026-01-12", "2026-01-14", "2026-01-16",
        ]

    def test_pattern_cycles_over_training_days(self):
        sessions = generate_session_schedule(
            MONDAY, 14, 4, "upper_lower", ["upper", "lower", "hiit"], experience_level="advanced"
        )
        # pattern: upper, lower, upper, hiit, lower
        assert [s.session_type for s in sessions] == [
            "upper", "lower", "upper", "hiit", "lower",
            "upper", "lower", "upper",
        ]

    def test_skeletons_are_unpopulated(self):
        sessions = generate_session_schedule(MONDAY, 7, 2, "full_body", ["full", "cardio"])
        assert all(s.status == "planned" for s in sessions)
        assert all(s.exercises is None and s.session_data is None for s in sessions)
        assert len({s.id for s in sessions}) == len(sessions)

    def test_sunday_preferred_day(self):
        """Preferred Sun/Tue over one week from Monday: Tue 6th, Sun 11th."""
        sessions = generate_session_schedule(MONDAY, 7, 2, "full_body", ["full"], [0, 2])
        assert [s.date for s in sessions] == ["2026-01-06", "2026-01-11"]

    def test_short_plan_without_training_day(self):
        """One-day plan starting on a Sunday has no training day for 3 days/week."""
        assert generate_session_schedule("2026-01-04", 1, 3, "full_body", ["full"]) == []


# ===========================================================================
# Full generation
# ===========================================================================

class TestGenerateWorkoutPlan:

    def test_plan_metadata(self):
        """28 days from 2026-01-05 -> ends 2026-02-02; deload [4]; linear."""
        plan = _generate(_prefs())
        assert plan.end_date == "2026-02-02"
        assert plan.split_type == "full_body"
        assert plan.deload_weeks == [4]
        assert plan.periodization.style == "linear"
        assert plan.active is True
        assert plan.validation_warnings == []
        assert len(plan.sessions) == 12

    def test_long_plan_is_undulating(self):
        plan = _generate(_prefs(duration_days=56))
        assert plan.periodization.style == "undulating"
        assert plan.deload_weeks == [4, 8]

    def test_deterministic(self):
        """Same preferences and catalog -> same dates, types and exercises."""
        a = _generate(_prefs(days_per_week=4, session_types=["upper", "lower"]))
        b = _generate(_prefs(days_per_week=4, session_types=["upper", "lower"]))
        assert [(s.date, s.session_type) for s in a.sessions] == [
            (s.date, s.session_type) for s in b.sessions
        ]
        assert [_names(s) for s in a.sessions] == [_names(s) for s in b.sessions]

    def test_block_reuse(self):
        """
        4 days/week, 42 days, upper/lower -> 24 sessions, deload [4].

        Pattern upper, lower, upper, lower; upper at even indices.
        Week 1 (idx 0) and week 2 (idx 4) share block 1 -> equal lists.
        Week 5 (idx 16) is block 2.
        """
        plan = _generate(_prefs(days_per_week=4, duration_days=42, session_types=["upper", "lower"]))
        assert len(plan.sessions) == 24
        assert plan.deload_weeks == [4]

        week1, week2 = plan.sessions[0], plan.sessions[4]
        assert week1.session_type == week2.session_type == "upper"
        assert week1.exercises == week2.exercises
        assert week1.exercises is not week2.exercises
        assert week1.exercises[0] is not week2.exercises[0]

        assert block_number_for_week(week_number_for_index(12, 4), plan.deload_weeks) == 1
        assert block_number_for_week(week_number_for_index(16, 4), plan.deload_weeks) == 2

    def test_deload_flags(self):
        plan = _generate(_prefs(days_per_week=4, duration_days=42, session_types=["upper", "lower"]))
        flagged = [i for i, s in enumerate(plan.sessions) if s.is_deload_week]
        assert flagged == [12, 13, 14, 15]

    def test_exercises_have_prescriptions(self):
        plan = _generate(_prefs(goal="strength"))
        first = plan.sessions[0].exercises
        assert len(first) == 8  # intermediate full body
        assert all(e.reps == "4-6" and e.rest_seconds == 180 for e in first)
        assert len({e.name for e in first}) == len(first)

    def test_exercises_and_payload_are_exclusive(self):
        populators = default_populators(_catalog(), with_hiit=True)
        plan = _generate(
            _prefs(days_per_week=5, session_types=["upper", "lower", "hiit", "stretch"]),
            populators=populators,
        )
        types = {s.session_type for s in plan.sessions}
        assert types == {"upper", "lower", "hiit", "stretch"}

        for s in plan.sessions:
            assert not (s.exercises is not None and s.session_data is not None)
            if isinstance(s, StrengthSession):
                assert s.exercises and s.session_data is None
            elif s.session_type == "hiit":
                assert isinstance(s, GeneratedSession)
                assert s.session_data["main_workout"]["exercises"]
            else:
                assert s.exercises is None and s.session_data is None

    def test_unbound_type_passes_through(self):
        plan = _generate(_prefs(session_types=["full", "cardio"]))
        cardio = [s for s in plan.sessions if s.session_type == "cardio"]
        assert cardio
        assert all(s.session_data is None and s.population_error is None for s in cardio)
        assert plan.validation_warnings == []

    def test_equipment_filter_limits_selection(self):
        bodyweight = {ex.name for ex in load_catalog() if ex.equipment == "Bodyweight"}
        plan = _generate(_prefs(equipment_available=["bodyweight"]))
        for s in plan.sessions:
            assert set(_names(s)) <= bodyweight


class TestInputRejection:

    @pytest.mark.parametrize("days", [1, 8])
    def test_days_per_week_out_of_range(self, days):
        with pytest.raises(ValueError, match="Days per week"):
            _prefs(days_per_week=days)

    @pytest.mark.parametrize("duration", [0, 91])
    def test_duration_out_of_range(self, duration):
        with pytest.raises(ValueError, match="Duration"):
            _prefs(duration_days=duration)

    def test_repeated_preferred_days(self):
        """[1, 1, 3] would train on 2 weekdays while weeks are counted in 3s."""
        with pytest.raises(ValueError, match="must not repeat"):
            _prefs(preferred_days=[1, 1, 3])

    @pytest.mark.parametrize("days", [[-1, 2, 4], [1, 3, 7]])
    def test_preferred_days_out_of_range(self, days):
        with pytest.raises(ValueError, match="preferred_days"):
            _prefs(preferred_days=days)

    def test_generation_revalidates_mutated_preferences(self):
        prefs = _prefs()
        prefs.days_per_week = 8
        with pytest.raises(ValueError, match="Days per week"):
            _generate(prefs)

    def test_unsorted_sessions_rejected(self):
        sessions = generate_session_schedule(MONDAY, 14, 3, "full_body", ["full"])
        with pytest.raises(ValueError, match="chronological"):
            asyncio.run(
                populate_sessions(
                    list(reversed(sessions)),
                    days_per_week=3,
                    deload_weeks=[],
                    experience_level="intermediate",
                    goal="general_fitness",
                    equipment_available=["all"],
                    seed="x",
                    populators=default_populators(_catalog()),
                )
            )


class TestPopulationFailures:

    def test_empty_catalog_marks_every_session(self):
        plan = _generate(_prefs(duration_days=14), catalog=StaticCatalogProvider([]))
        assert len(plan.sessions) == 6
        for s in plan.sessions:
            assert s.exercises == []
            assert "No catalog exercises match" in s.population_error
        assert len(plan.validation_warnings) == 6
        assert plan.validation_warnings[0].startswith("Session 1 (full): ")

    def test_unreadable_catalog(self, tmp_path):
        plan = _generate(
            _prefs(duration_days=7),
            catalog=FileCatalogProvider(tmp_path / "missing.yaml"),
        )
        assert all("Failed to generate exercises" in s.population_error for s in plan.sessions)

    def test_undecodable_catalog(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_bytes(b"- name: \xff\xfe bad\n")
        plan = _generate(_prefs(duration_days=14), catalog=FileCatalogProvider(path))
        assert len(plan.sessions) == 6
        for s in plan.sessions:
            assert s.exercises == []
            assert s.population_error.startswith("Failed to generate exercises: ")
            assert "catalog.yaml" in s.population_error

    def test_failing_provider_marks_sessions(self):
        class DownCatalog:
            async def fetch_exercises(self):
                raise RuntimeError("catalog service down")

        plan = _generate(_prefs(duration_days=7), catalog=DownCatalog())
        assert all(
            s.population_error == "Failed to generate exercises: catalog service down"
            for s in plan.sessions
        )
        assert len(plan.validation_warnings) == len(plan.sessions)

    def test_validate_session(self):
        plan = _generate(_prefs(duration_days=7))
        ok, errors = validate_session(plan.sessions[0])
        assert ok and errors == []

        broken = replace(plan.sessions[0], exercises=[])
        ok, errors = validate_session(broken)
        assert not ok
        assert errors == ["Standard workout session (full) missing exercises"]


# ===========================================================================
# Plan-level helpers
# ===========================================================================

class TestRepopulateAndCustomize:

    def test_repopulate_restores_block_selection(self):
        plan = _generate(_prefs())
        broken = replace(plan.sessions[1], exercises=[], population_error="catalog down")
        damaged = replace(plan, sessions=[plan.sessions[0], broken, *plan.sessions[2:]])

        repaired = asyncio.run(repopulate_session(damaged, broken.id, catalog=_catalog()))
        assert repaired.sessions[1].population_error is None
        assert repaired.sessions[1].exercises == plan.sessions[0].exercises
        assert repaired.validation_warnings == []

    def test_repopulate_unknown_id_is_noop(self):
        plan = _generate(_prefs(duration_days=7))
        assert asyncio.run(repopulate_session(plan, "nope", catalog=_catalog())) is plan

    def test_customize_rebuilds_schedule(self):
        """4 days/week over 60 days -> upper_lower, deloads [4, 8], ends 2026-03-06."""
        plan = _generate(_prefs())
        changed = customize_plan(
            plan, days_per_week=4, duration_days=60, session_types=["upper", "lower"]
        )
        assert changed.split_type == "upper_lower"
        assert changed.deload_weeks == [4, 8]
        assert changed.end_date == "2026-03-06"
        assert changed.periodization.style == "undulating"
        assert all(s.exercises is None for s in changed.sessions)
        assert plan.days_per_week == 3  # input untouched

    def test_customize_name_only_keeps_sessions(self):
        plan = _generate(_prefs(duration_days=7))
        renamed = customize_plan(plan, name="Winter block")
        assert renamed.name == "Winter block"
        assert renamed.sessions is plan.sessions

    def test_customize_rejects_bad_range(self):
        plan = _generate(_prefs(duration_days=7))
        with pytest.raises(ValueError):
            customize_plan(plan, days_per_week=8)

    def test_customize_rejects_repeated_preferred_days(self):
        plan = _generate(_prefs(duration_days=7))
        with pytest.raises(ValueError, match="must not repeat"):
            customize_plan(plan, preferred_days=[1, 1, 3])

    def test_recommended_template(self):
        assert get_recommended_plan_template("strength", "beginner")["days_per_week"] == 3
        assert get_recommended_plan_template("hypertrophy", "advanced")["session_types"] == [
            "push", "pull", "legs",
        ]

    def test_unknown_template_falls_back(self):
        template = get_recommended_plan_template("powerlifting", "expert")
        assert template == get_recommended_plan_template("general_fitness", "intermediate")
