"""Exercise and workout definitions: validated create/update/delete.

Validation happens before anything is written; an invalid definition
raises ValidationError and the stored collections are untouched. Storage
failures come back as None/False, never as assumed success.
"""

from __future__ import annotations

import logging
from typing import Protocol, TypeVar

from workout_engine.models.enums import ExerciseType
from workout_engine.models.exercise import Exercise, build_exercise
from workout_engine.models.workout import Workout, build_workout, with_muscles_covered

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DefinitionCollection(Protocol[T]):
    def get_all(self) -> list[T]:
        ...

    def get_by_id(self, record_id: str) -> T | None:
        ...

    def add(self, record: T) -> bool:
        ...

    def update(self, record_id: str, record: T) -> bool:
        ...

    def delete(self, record_id: str) -> bool:
        ...


class ExerciseLibrary:
    """Definitions service over the exercises and workouts collections."""

    def __init__(
        self,
        exercises: DefinitionCollection[Exercise],
        workouts: DefinitionCollection[Workout],
    ) -> None:
        self.exercises = exercises
        self.workouts = workouts

    # ------------------------------------------------------------------
    # Exercises
    # ------------------------------------------------------------------

    def create_exercise(
        self,
        name: str,
        exercise_type: ExerciseType | str,
        target_muscle: str,
        levels: list[str] | tuple[str, ...],
        secondary_muscle: str = "",
    ) -> Exercise | None:
        """Validate and store a new exercise. None if the write failed."""
        exercise = build_exercise(
            name, exercise_type, target_muscle, levels, secondary_muscle
        )
        if not self.exercises.add(exercise):
            return None
        logger.info("Created exercise %s (%s)", exercise.id, exercise.name)
        return exercise

    def update_exercise(
        self,
        exercise_id: str,
        name: str,
        exercise_type: ExerciseType | str,
        target_muscle: str,
        levels: list[str] | tuple[str, ...],
        secondary_muscle: str = "",
    ) -> Exercise | None:
        """Replace an exercise's definition, keeping its id and creation time.

        Returns None if the exercise does not exist or the write failed.
        Workouts' ``muscles_covered`` is not refreshed here; call
        :meth:`refresh_muscles_covered` for the workouts that need it.
        """
        existing = self.exercises.get_by_id(exercise_id)
        if existing is None:
            return None
        exercise = build_exercise(
            name,
            exercise_type,
            target_muscle,
            levels,
            secondary_muscle,
            exercise_id=exercise_id,
            created_at=existing.created_at,
        )
        if not self.exercises.update(exercise_id, exercise):
            return None
        return exercise

    def save_exercise(self, exercise: Exercise) -> bool:
        """Store an already-built exercise (e.g. after level edits)."""
        return self.exercises.update(exercise.id, exercise)

    def delete_exercise(self, exercise_id: str) -> bool:
        return self.exercises.delete(exercise_id)

    def exercises_by_type(self, exercise_type: ExerciseType) -> list[Exercise]:
        return [e for e in self.exercises.get_all() if e.exercise_type == exercise_type]

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def create_workout(
        self,
        name: str,
        exercise_ids: list[str] | tuple[str, ...],
        recommended_day: str = "",
    ) -> Workout | None:
        workout = build_workout(
            name,
            exercise_ids,
            self.exercises.get_all(),
            recommended_day=recommended_day,
        )
        if not self.workouts.add(workout):
            return None
        logger.info("Created workout %s (%s)", workout.id, workout.name)
        return workout

    def update_workout(
        self,
        workout_id: str,
        name: str,
        exercise_ids: list[str] | tuple[str, ...],
        recommended_day: str = "",
    ) -> Workout | None:
        existing = self.workouts.get_by_id(workout_id)
        if existing is None:
            return None
        workout = build_workout(
            name,
            exercise_ids,
            self.exercises.get_all(),
            recommended_day=recommended_day,
            workout_id=workout_id,
            created_at=existing.created_at,
        )
        if not self.workouts.update(workout_id, workout):
            return None
        return workout

    def delete_workout(self, workout_id: str) -> bool:
        return self.workouts.delete(workout_id)

    def refresh_muscles_covered(self, workout_id: str) -> Workout | None:
        """Recompute and store a workout's muscles from current exercises."""
        workout = self.workouts.get_by_id(workout_id)
        if workout is None:
            return None
        refreshed = with_muscles_covered(workout, self.exercises.get_all())
        if refreshed == workout:
            return workout
        if not self.workouts.update(workout_id, refreshed):
            return None
        return refreshed

    def resolve_exercises(self, workout: Workout) -> list[Exercise]:
        """The workout's exercises in workout order; missing ids are skipped."""
        by_id = {e.id: e for e in self.exercises.get_all()}
        resolved: list[Exercise] = []
        for exercise_id in workout.exercise_ids:
            exercise = by_id.get(exercise_id)
            if exercise is None:
                logger.warning(
                    "Workout %s references missing exercise %s", workout.id, exercise_id
                )
                continue
            resolved.append(exercise)
        return resolved

    def workouts_using(self, exercise_id: str) -> list[Workout]:
        return [w for w in self.workouts.get_all() if exercise_id in w.exercise_ids]
