"""
Base types for the exercise catalog.

CatalogExercise is one read-only record from the exercise catalog.  The
``workout_type`` tag is free text (e.g. "Upper Body, Push/Pull/Legs") and
is matched by substring, not by enum.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogExercise:
    """One exercise available for selection."""

    name: str                 # e.g. "Barbell Bench Press"
    workout_type: str         # e.g. "Upper Body, Push/Pull/Legs"
    equipment: str            # e.g. "Barbell", "Dumbbells", "Bodyweight"
    primary_muscle: str       # e.g. "Chest", "Quads (Vastus Lateralis)"
    exercise_type: str = "compound"   # "compound" | "isolation" | "accessory"
    secondary_muscles: tuple[str, ...] = field(default_factory=tuple)

    @property
    def muscle_group(self) -> str:
        """Primary muscle without any parenthesised detail ("Quads (VL)" -> "Quads")."""
        return self.primary_muscle.split("(")[0].strip()
