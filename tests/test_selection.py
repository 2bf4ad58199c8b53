"""
Tests for the exercise catalog, catalog matching and exercise selection.

Counts and quotas are hand-computed from the tables in core/config.py.
"""

import random

import pytest

from workout_planner.core.engine.config_loader import load_planner_config
from workout_planner.core.exercises import (
    CatalogError,
    CatalogExercise,
    filter_by_category,
    filter_by_equipment,
    load_catalog,
    matches_session_category,
)
from workout_planner.core.exercises.catalog import matches_equipment, normalize_equipment_filter
from workout_planner.core.selection import (
    generate_standard_workout,
    get_optimal_exercise_count,
    muscle_quotas,
    pair_exercises,
    to_exercise_entries,
)


def _ex(name: str, muscle: str, exercise_type: str = "compound", equipment: str = "Barbell"):
    return CatalogExercise(
        name=name,
        workout_type="Upper Body, Lower Body, Full Body",
        equipment=equipment,
        primary_muscle=muscle,
        exercise_type=exercise_type,
    )


# ===========================================================================
# Catalog loading
# ===========================================================================

class TestCatalogLoader:

    def test_bundled_catalog(self):
        catalog = load_catalog()
        names = [ex.name for ex in catalog]
        assert len(catalog) >= 50
        assert len(names) == len(set(names))
        assert any("HIIT" in ex.workout_type for ex in catalog)

    def test_spreadsheet_style_keys(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "- Exercise Name: Zercher Squat\n"
            "  Workout Type: Lower Body\n"
            "  Equipment: Barbell\n"
            "  Primary Muscle: Quads\n"
            "  Type: Compound\n"
            "  Secondary Muscles: Glutes, Core\n"
        )
        (ex,) = load_catalog(path)
        assert ex.name == "Zercher Squat"
        assert ex.exercise_type == "compound"
        assert ex.secondary_muscles == ("Glutes", "Core")

    def test_malformed_record_skipped_with_warning(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "exercises:\n"
            "  - name: Push-Up\n"
            "    workout_type: Upper Body\n"
            "    equipment: Bodyweight\n"
            "    primary_muscle: Chest\n"
            "  - name: Mystery\n"
        )
        with pytest.warns(UserWarning, match="skipping catalog record #2"):
            catalog = load_catalog(path)
        assert [ex.name for ex in catalog] == ["Push-Up"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(CatalogError, match="Cannot read"):
            load_catalog(tmp_path / "nope.yaml")

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text("name: just one\n")
        with pytest.raises(CatalogError, match="list of records"):
            load_catalog(path)

    def test_bad_secondary_muscles_skipped(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "- name: Push-Up\n"
            "  workout_type: Upper Body\n"
            "  equipment: Bodyweight\n"
            "  primary_muscle: Chest\n"
            "  secondary_muscles: [Triceps]\n"
            "- name: Odd Row\n"
            "  workout_type: Upper Body\n"
            "  equipment: Cable\n"
            "  primary_muscle: Lats\n"
            "  secondary_muscles: 5\n"
        )
        with pytest.warns(UserWarning, match="skipping catalog record #2: secondary_muscles"):
            catalog = load_catalog(path)
        assert [ex.name for ex in catalog] == ["Push-Up"]
        assert catalog[0].secondary_muscles == ("Triceps",)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_bytes(b"- name: \xff\xfe bad\n")
        with pytest.raises(CatalogError, match="exercise catalog"):
            load_catalog(path)

    def test_muscle_group_strips_detail(self):
        assert _ex("BSS", "Quads (Vastus Lateralis)").muscle_group == "Quads"


# ===========================================================================
# Matching
# ===========================================================================

class TestMatching:

    @pytest.mark.parametrize(
        "tag, session_type, expected",
        [
            ("Upper Body, Push/Pull/Legs", "upper", True),
            ("Push/Pull/Legs", "lower", True),
            ("Lower Body", "upper", False),
            ("Full Body", "full", True),
            ("Upper Body", "full", False),
            ("Push/Pull/Legs", "pull", True),
            ("HIIT", "hiit", False),
            (None, "upper", False),
        ],
    )
    def test_session_category(self, tag, session_type, expected):
        assert matches_session_category(tag, session_type) is expected

    def test_normalize_equipment_filter(self):
        assert normalize_equipment_filter(None) == "all"
        assert normalize_equipment_filter([]) == "all"
        assert normalize_equipment_filter(["Dumbbells", "all"]) == "all"
        assert normalize_equipment_filter("Barbell") == ["Barbell"]
        assert normalize_equipment_filter(["Barbell"]) == ["Barbell"]

    def test_equipment_matching(self):
        assert matches_equipment("Dumbbells", "all")
        assert matches_equipment("Dumbbells", ["dumbbells"])
        assert matches_equipment("Cable", ["Cable Machine"])
        assert not matches_equipment("Barbell", ["dumbbell", "kettlebell"])

    def test_filter_chain(self):
        catalog = load_catalog()
        usable = filter_by_equipment(filter_by_category(catalog, "full"), ["kettlebell"])
        assert [ex.name for ex in usable] == ["Kettlebell Deadlift"]


# ===========================================================================
# Selection policy
# ===========================================================================

class TestExerciseCount:

    @pytest.mark.parametrize(
        "session_type, level, expected",
        [
            ("full", "beginner", 6),
            ("push", "beginner", 7),
            ("upper", "intermediate", 8),
            ("full", "advanced", 9),
            ("legs", "advanced", 10),
            ("zumba", "intermediate", 8),
        ],
    )
    def test_counts(self, session_type, level, expected):
        assert get_optimal_exercise_count(session_type, level) == expected

    def test_config_override(self, tmp_path):
        cfg_path = tmp_path / "planner.yaml"
        cfg_path.write_text("exercise_counts:\n  beginner:\n    full: 5\n")
        cfg = load_planner_config(cfg_path)
        assert get_optimal_exercise_count("full", "beginner", cfg) == 5
        assert get_optimal_exercise_count("upper", "beginner", cfg) == 6

    def test_broken_config_falls_back(self, tmp_path):
        cfg_path = tmp_path / "planner.yaml"
        cfg_path.write_text("exercise_counts: [unclosed\n")
        with pytest.warns(UserWarning, match="ignoring"):
            cfg = load_planner_config(cfg_path)
        assert cfg["rep_ranges"]["strength"] == "4-6"


class TestMuscleQuotas:

    def test_lower_intermediate(self):
        """8 -> quads int(3.2)=3, hams int(2.4)=2, glutes 1, core 8-3-2-1=2."""
        assert muscle_quotas("lower", 8) == [
            ("Quads", 3), ("Hamstrings", 2), ("Glutes", 1), ("Core", 2),
        ]

    def test_lower_beginner(self):
        """6 -> quads int(2.4)=2, hams int(1.8)=1, glutes 1, core 6-2-1-1=2."""
        assert muscle_quotas("lower", 6) == [
            ("Quads", 2), ("Hamstrings", 1), ("Glutes", 1), ("Core", 2),
        ]

    def test_full_with_remainder(self):
        """9 -> 2 per main muscle, 1 left for core."""
        assert muscle_quotas("full", 9) == [
            ("Chest", 2), ("Lats", 2), ("Quads", 2), ("Hamstrings", 2), ("Core", 1),
        ]

    def test_full_even(self):
        assert muscle_quotas("full", 8) == [
            ("Chest", 2), ("Lats", 2), ("Quads", 2), ("Hamstrings", 2),
        ]

    def test_fixed_quota(self):
        assert muscle_quotas("pull", 8) == [("Lats", 4), ("Biceps", 3), ("Traps", 1)]


class TestPairing:

    def test_opposing_muscle_preferred(self):
        a, b = _ex("Bench", "Chest"), _ex("Fly", "Chest")
        c, d = _ex("Row", "Lats"), _ex("Squat", "Quads")
        assert pair_exercises([a, b, c, d]) == [a, c, b, d]

    def test_odd_exercise_goes_last(self):
        a, b, c = _ex("Curl", "Biceps"), _ex("Squat", "Quads"), _ex("Pushdown", "Triceps")
        assert pair_exercises([a, b, c]) == [a, c, b]

    def test_entries_superset_groups(self):
        paired = [
            _ex("Bench", "Chest"),
            _ex("Row", "Lats"),
            _ex("Curl", "Biceps", exercise_type="isolation"),
        ]
        entries = to_exercise_entries(paired, goal="strength")
        assert [e.superset_group for e in entries] == ["A", "A", None]
        assert [e.sets for e in entries] == [4, 4, 3]
        assert all(e.reps == "4-6" and e.rest_seconds == 180 for e in entries)
        assert all(e.weight_kg is None for e in entries)


class TestGenerateStandardWorkout:

    def test_seeded_selection_is_reproducible(self):
        usable = filter_by_category(load_catalog(), "full")
        a = generate_standard_workout(usable, "full", rng=random.Random("seed"))
        b = generate_standard_workout(usable, "full", rng=random.Random("seed"))
        assert a == b
        assert len(a) == 8
        assert len({e.name for e in a}) == 8

    def test_quota_muscles_covered(self):
        """Full body draws 2 each from chest, lats, quads and hamstrings."""
        catalog = load_catalog()
        by_name = {ex.name: ex for ex in catalog}
        entries = generate_standard_workout(
            filter_by_category(catalog, "full"), "full", rng=random.Random(7)
        )
        muscles = sorted(by_name[e.name].muscle_group for e in entries)
        assert muscles == ["Chest", "Chest", "Hamstrings", "Hamstrings", "Lats", "Lats", "Quads", "Quads"]

    def test_equipment_filter(self):
        catalog = filter_by_category(load_catalog(), "upper")
        entries = generate_standard_workout(
            catalog, "upper", equipment_filter=["Dumbbells"], rng=random.Random(1)
        )
        dumbbell = {ex.name for ex in catalog if ex.equipment == "Dumbbells"}
        assert entries
        assert {e.name for e in entries} <= dumbbell

    def test_nothing_usable(self):
        assert generate_standard_workout([], "upper", rng=random.Random(1)) == []
