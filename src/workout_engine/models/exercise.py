"""Exercise definitions and their level progression.

An exercise always carries at least one level. Level edits return a new
Exercise; removing the last remaining level is a no-op.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime

from workout_engine.exceptions import ValidationError
from workout_engine.models.enums import ExerciseType
from workout_engine.utils import new_record_id, utc_now


@dataclass(frozen=True)
class Exercise:
    """A single exercise with its ordered difficulty levels.

    Level order is progression order: the first level is the easiest and
    is used to seed sets when nothing better is known.
    """

    id: str
    name: str
    exercise_type: ExerciseType
    target_muscle: str
    levels: tuple[str, ...]
    secondary_muscle: str = ""
    created_at: datetime | None = None

    @property
    def first_level(self) -> str:
        return self.levels[0]

    def has_level(self, level: str) -> bool:
        return level in self.levels


# ---------------------------------------------------------------------------
# Level editing
# ---------------------------------------------------------------------------


def add_level(exercise: Exercise, level_name: str) -> Exercise:
    """Append a level. Blank names are ignored."""
    name = (level_name or "").strip()
    if not name:
        return exercise
    return dataclasses.replace(exercise, levels=exercise.levels + (name,))


def remove_level(exercise: Exercise, index: int) -> Exercise:
    """Remove the level at *index*, never dropping below one level."""
    if len(exercise.levels) <= 1 or not 0 <= index < len(exercise.levels):
        return exercise
    levels = exercise.levels[:index] + exercise.levels[index + 1:]
    return dataclasses.replace(exercise, levels=levels)


def update_level(exercise: Exercise, index: int, new_name: str) -> Exercise:
    """Rename the level at *index*. Blank names and bad indexes are ignored."""
    name = (new_name or "").strip()
    if not name or not 0 <= index < len(exercise.levels):
        return exercise
    levels = list(exercise.levels)
    levels[index] = name
    return dataclasses.replace(exercise, levels=tuple(levels))


# ---------------------------------------------------------------------------
# Validation and construction
# ---------------------------------------------------------------------------


def parse_exercise_type(value: ExerciseType | str | None) -> ExerciseType | None:
    """Return the ExerciseType for *value*, or None if it names no type."""
    if isinstance(value, ExerciseType):
        return value
    try:
        return ExerciseType(value)
    except (TypeError, ValueError):
        return None


def validate_exercise(
    name: str | None,
    exercise_type: ExerciseType | str | None,
    target_muscle: str | None,
    levels: list[str] | tuple[str, ...] | None,
) -> list[str]:
    """Collect every problem with an exercise definition.

    Returns:
        Human-readable messages; empty when the definition is valid.
    """
    errors: list[str] = []

    if not name or not name.strip():
        errors.append("Exercise name is required")

    if parse_exercise_type(exercise_type) is None:
        errors.append("Valid exercise type is required")

    if not target_muscle or not target_muscle.strip():
        errors.append("Target muscle is required")

    if not levels:
        errors.append("At least one exercise level is required")
    elif any(not level or not level.strip() for level in levels):
        errors.append("All exercise levels must have names")

    return errors


def build_exercise(
    name: str,
    exercise_type: ExerciseType | str,
    target_muscle: str,
    levels: list[str] | tuple[str, ...],
    secondary_muscle: str = "",
    exercise_id: str | None = None,
    created_at: datetime | None = None,
) -> Exercise:
    """Validate the inputs and build an Exercise.

    Raises:
        ValidationError: With every problem found; nothing is built.
    """
    errors = validate_exercise(name, exercise_type, target_muscle, levels)
    if errors:
        raise ValidationError(errors)

    return Exercise(
        id=exercise_id or new_record_id(),
        name=name.strip(),
        exercise_type=parse_exercise_type(exercise_type),  # type: ignore[arg-type]
        target_muscle=target_muscle.strip(),
        levels=tuple(level.strip() for level in levels),
        secondary_muscle=(secondary_muscle or "").strip(),
        created_at=created_at or utc_now(),
    )
