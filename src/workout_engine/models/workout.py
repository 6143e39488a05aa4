"""Workout routines: an ordered list of exercise references.

A workout does not own its exercises. ``muscles_covered`` is a cache that
is only ever written by :func:`with_muscles_covered`.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from workout_engine.exceptions import ValidationError
from workout_engine.models.enums import DAYS_OF_WEEK, ExerciseType
from workout_engine.models.exercise import Exercise
from workout_engine.utils import new_record_id, utc_now


@dataclass(frozen=True)
class Workout:
    """A named routine referencing exercises by id, in performance order."""

    id: str
    name: str
    exercise_ids: tuple[str, ...]
    recommended_day: str = ""
    muscles_covered: tuple[str, ...] = field(default_factory=tuple)
    created_at: datetime | None = None


def compute_muscles_covered(
    workout: Workout, exercises: Iterable[Exercise]
) -> tuple[str, ...]:
    """Muscles trained by the workout, in first-seen order.

    Target muscle first, then the secondary muscle if set. Exercise ids the
    workout references but *exercises* does not contain are ignored.
    """
    by_id = {ex.id: ex for ex in exercises}
    muscles: list[str] = []
    for exercise_id in workout.exercise_ids:
        exercise = by_id.get(exercise_id)
        if exercise is None:
            continue
        for muscle in (exercise.target_muscle, exercise.secondary_muscle):
            if muscle and muscle not in muscles:
                muscles.append(muscle)
    return tuple(muscles)


def with_muscles_covered(workout: Workout, exercises: Iterable[Exercise]) -> Workout:
    """Return *workout* with ``muscles_covered`` recomputed."""
    return dataclasses.replace(
        workout, muscles_covered=compute_muscles_covered(workout, exercises)
    )


def exercise_count_by_type(
    workout: Workout, exercises: Iterable[Exercise]
) -> dict[ExerciseType, int]:
    """Count the workout's exercises per ExerciseType (all types present)."""
    counts = {t: 0 for t in ExerciseType}
    by_id = {ex.id: ex for ex in exercises}
    for exercise_id in workout.exercise_ids:
        exercise = by_id.get(exercise_id)
        if exercise is not None:
            counts[exercise.exercise_type] += 1
    return counts


def validate_workout(
    name: str | None,
    exercise_ids: list[str] | tuple[str, ...] | None,
    recommended_day: str | None = "",
) -> list[str]:
    """Collect every problem with a workout definition."""
    errors: list[str] = []
    if not name or not name.strip():
        errors.append("Workout name is required")
    if not exercise_ids:
        errors.append("At least one exercise is required")
    if recommended_day and recommended_day not in DAYS_OF_WEEK:
        errors.append(f"Recommended day must be one of {', '.join(DAYS_OF_WEEK)}")
    return errors


def build_workout(
    name: str,
    exercise_ids: list[str] | tuple[str, ...],
    exercises: Iterable[Exercise] = (),
    recommended_day: str = "",
    workout_id: str | None = None,
    created_at: datetime | None = None,
) -> Workout:
    """Validate the inputs and build a Workout with muscles computed.

    Raises:
        ValidationError: With every problem found; nothing is built.
    """
    errors = validate_workout(name, exercise_ids, recommended_day)
    if errors:
        raise ValidationError(errors)

    workout = Workout(
        id=workout_id or new_record_id(),
        name=name.strip(),
        exercise_ids=tuple(exercise_ids),
        recommended_day=recommended_day or "",
        created_at=created_at or utc_now(),
    )
    return with_muscles_covered(workout, exercises)
