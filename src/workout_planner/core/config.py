"""
Configuration constants for the workout plan generator.

All adjustable parameters are centralized here for easy tuning.
Values marked as overridable can be changed per user through
``planner.yaml`` (see engine/config_loader.py).
"""

from typing import Final

# =============================================================================
# INPUT RANGES
# =============================================================================

MIN_DAYS_PER_WEEK: Final[int] = 2
MAX_DAYS_PER_WEEK: Final[int] = 7
MIN_DURATION_DAYS: Final[int] = 1
MAX_DURATION_DAYS: Final[int] = 90

GOALS: Final[tuple[str, ...]] = ("strength", "hypertrophy", "fat_loss", "general_fitness")
EXPERIENCE_LEVELS: Final[tuple[str, ...]] = ("beginner", "intermediate", "advanced")
SESSION_STATUSES: Final[tuple[str, ...]] = ("planned", "in_progress", "completed", "skipped")

DEFAULT_PLAN_NAME: Final[str] = "My Workout Plan"
DEFAULT_DURATION_DAYS: Final[int] = 30
DEFAULT_DAYS_PER_WEEK: Final[int] = 3

# =============================================================================
# SESSION TYPES
# =============================================================================

STANDARD_SESSION_TYPES: Final[frozenset[str]] = frozenset(
    {"upper", "lower", "full", "push", "pull", "legs"}
)
CONDITIONING_SESSION_TYPES: Final[frozenset[str]] = frozenset({"hiit", "cardio"})
RECOVERY_SESSION_TYPES: Final[frozenset[str]] = frozenset({"stretch"})

# =============================================================================
# SCHEDULING
# =============================================================================

# Weekdays are 0=Sunday .. 6=Saturday.
DEFAULT_TRAINING_DAYS: Final[dict[int, list[int]]] = {
    2: [1, 4],                  # Mon, Thu
    3: [1, 3, 5],               # Mon, Wed, Fri
    4: [1, 2, 4, 5],            # Mon, Tue, Thu, Fri
    5: [1, 2, 3, 4, 5],         # Mon-Fri
    6: [1, 2, 3, 4, 5, 6],      # Mon-Sat
    7: [0, 1, 2, 3, 4, 5, 6],   # every day
}
FALLBACK_TRAINING_DAYS_KEY: Final[int] = 3

SPLIT_PATTERNS: Final[dict[str, list[str]]] = {
    "full_body": ["full", "full", "full"],
    "upper_lower": ["upper", "lower", "upper", "lower"],
    "ppl": ["push", "pull", "legs", "push", "pull", "legs"],
}
DEFAULT_PATTERN: Final[list[str]] = ["full", "full", "full"]

HIIT_SPLICE_INDEX: Final[int] = 3       # hiit inserted here ...
HIIT_SPLICE_MIN_LENGTH: Final[int] = 4  # ... once the base pattern is this long
APPEND_MIN_LENGTH: Final[int] = 3       # cardio / stretch appended from this length

# =============================================================================
# PERIODIZATION
# =============================================================================

DELOAD_FREQUENCY_WEEKS: Final[int] = 4
UNDULATING_MIN_DAYS: Final[int] = 56
VOLUME_PROGRESSION: Final[str] = "10% weekly increase"

# =============================================================================
# EXERCISE SELECTION (overridable: exercise_counts, rep_ranges, rest_seconds)
# =============================================================================

EXERCISE_COUNTS: Final[dict[str, dict[str, int]]] = {
    "beginner":     {"full": 6, "upper": 6, "lower": 6, "push": 7, "pull": 7, "legs": 7},
    "intermediate": {"full": 8, "upper": 8, "lower": 8, "push": 8, "pull": 8, "legs": 8},
    "advanced":     {"full": 9, "upper": 10, "lower": 10, "push": 10, "pull": 10, "legs": 10},
}
DEFAULT_EXERCISE_COUNT: Final[int] = 8

# Fixed (muscle, count) quotas; "lower" and "full" are derived from the
# target count in selection.py.
MUSCLE_QUOTAS: Final[dict[str, list[tuple[str, int]]]] = {
    "push":  [("Chest", 3), ("Delts", 2), ("Triceps", 3)],
    "pull":  [("Lats", 4), ("Biceps", 3), ("Traps", 1)],
    "legs":  [("Quads", 3), ("Hamstrings", 3), ("Glutes", 1), ("Calves", 1)],
    "upper": [("Chest", 3), ("Lats", 3), ("Biceps", 1), ("Triceps", 1)],
}
FULL_BODY_MUSCLES: Final[tuple[str, ...]] = ("Chest", "Lats", "Quads", "Hamstrings")

OPPOSING_MUSCLES: Final[dict[str, str]] = {
    "Chest": "Lats",
    "Lats": "Chest",
    "Quads": "Hamstrings",
    "Hamstrings": "Quads",
    "Biceps": "Triceps",
    "Triceps": "Biceps",
    "Shoulders": "Lats",
}

SETS_BY_EXERCISE_TYPE: Final[dict[str, int]] = {
    "compound": 4,
    "isolation": 3,
    "accessory": 3,
}

REP_RANGES: Final[dict[str, str]] = {
    "strength": "4-6",
    "hypertrophy": "8-12",
    "fat_loss": "12-15",
    "general_fitness": "8-12",
}

REST_SECONDS: Final[dict[str, int]] = {
    "strength": 180,
    "hypertrophy": 90,
    "fat_loss": 60,
    "general_fitness": 90,
}

SESSION_CATEGORY_TAGS: Final[dict[str, tuple[str, ...]]] = {
    "upper": ("Upper Body", "Full Body", "Push/Pull/Legs"),
    "lower": ("Lower Body", "Full Body", "Push/Pull/Legs"),
    "full":  ("Full Body",),
    "push":  ("Push/Pull/Legs",),
    "pull":  ("Push/Pull/Legs",),
    "legs":  ("Push/Pull/Legs",),
}

EQUIPMENT_ALIASES: Final[dict[str, str]] = {
    "cable machine": "cable",
    "dumbbells": "dumbbell",
}

# =============================================================================
# HIIT
# =============================================================================

HIIT_CATEGORY_TAG: Final[str] = "HIIT"
HIIT_BASE_DURATION_MINUTES: Final[int] = 25
HIIT_MIN_SPACING_HOURS: Final[int] = 48
HIIT_EXERCISES_PER_ROUND: Final[int] = 5

# (work_seconds, rest_seconds, rounds)
HIIT_INTERVALS: Final[dict[str, tuple[int, int, int]]] = {
    "beginner": (20, 40, 3),
    "intermediate": (30, 30, 4),
    "advanced": (40, 20, 5),
}

# =============================================================================
# SCHEDULE BALANCE
# =============================================================================

BALANCE_HIGH_INTENSITY_MIN_PCT: Final[float] = 50.0
BALANCE_HIGH_INTENSITY_MAX_PCT: Final[float] = 70.0

# =============================================================================
# PLAN TEMPLATES (experience -> goal)
# =============================================================================

PLAN_TEMPLATES: Final[dict[str, dict[str, dict]]] = {
    "beginner": {
        "strength": {
            "days_per_week": 3,
            "session_types": ["full"],
            "description": "3x/week full body - Each muscle 3x/week for strength adaptation",
            "volume_per_muscle_group": 9,
            "rep_range": "6-12 reps",
        },
        "hypertrophy": {
            "days_per_week": 3,
            "session_types": ["full"],
            "description": "3x/week full body - Building foundation with moderate volume",
            "volume_per_muscle_group": 12,
            "rep_range": "8-12 reps",
        },
        "fat_loss": {
            "days_per_week": 4,
            "session_types": ["full", "hiit"],
            "description": "3x/week strength + 1-2x/week HIIT for metabolic stress",
            "volume_per_muscle_group": 10,
            "rep_range": "10-15 reps",
        },
        "general_fitness": {
            "days_per_week": 3,
            "session_types": ["full", "cardio", "stretch"],
            "description": "Balanced fitness with variety and recovery",
            "volume_per_muscle_group": 9,
            "rep_range": "8-12 reps",
        },
    },
    "intermediate": {
        "strength": {
            "days_per_week": 4,
            "session_types": ["upper", "lower"],
            "description": "4x/week upper/lower - Each muscle 2x/week, strength focus",
            "volume_per_muscle_group": 12,
            "rep_range": "4-8 reps",
        },
        "hypertrophy": {
            "days_per_week": 4,
            "session_types": ["upper", "lower"],
            "description": "4-5x/week upper/lower - Optimal volume for muscle growth",
            "volume_per_muscle_group": 16,
            "rep_range": "6-12 reps",
        },
        "fat_loss": {
            "days_per_week": 5,
            "session_types": ["upper", "lower", "hiit"],
            "description": "4x/week strength + HIIT for fat loss with muscle preservation",
            "volume_per_muscle_group": 14,
            "rep_range": "8-15 reps",
        },
        "general_fitness": {
            "days_per_week": 4,
            "session_types": ["full", "hiit", "stretch"],
            "description": "Well-rounded fitness with strength, conditioning, and mobility",
            "volume_per_muscle_group": 12,
            "rep_range": "8-12 reps",
        },
    },
    "advanced": {
        "strength": {
            "days_per_week": 5,
            "session_types": ["upper", "lower"],
            "description": "5x/week upper/lower - High frequency for advanced strength",
            "volume_per_muscle_group": 16,
            "rep_range": "1-6 reps (strength), 6-12 reps (hypertrophy blocks)",
        },
        "hypertrophy": {
            "days_per_week": 6,
            "session_types": ["push", "pull", "legs"],
            "description": "6x/week PPL - Maximum volume and specialization",
            "volume_per_muscle_group": 20,
            "rep_range": "6-12 reps",
        },
        "fat_loss": {
            "days_per_week": 6,
            "session_types": ["upper", "lower", "hiit"],
            "description": "5x/week strength + HIIT - Advanced fat loss protocol",
            "volume_per_muscle_group": 16,
            "rep_range": "8-15 reps",
        },
        "general_fitness": {
            "days_per_week": 5,
            "session_types": ["full", "hiit", "stretch"],
            "description": "Advanced balanced training with recovery modalities",
            "volume_per_muscle_group": 14,
            "rep_range": "6-12 reps",
        },
    },
}
