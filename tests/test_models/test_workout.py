"""Tests for workouts: muscles covered, type counts, validation."""

from __future__ import annotations

import pytest

from workout_engine.exceptions import ValidationError
from workout_engine.models.enums import ExerciseType
from workout_engine.models.workout import (
    Workout,
    build_workout,
    compute_muscles_covered,
    exercise_count_by_type,
    validate_workout,
    with_muscles_covered,
)
from workout_engine.sample_data import sample_workouts


class TestMusclesCovered:
    def test_first_seen_order_target_then_secondary(self, upper_body, exercises) -> None:
        assert compute_muscles_covered(upper_body, exercises) == (
            "Shoulders",
            "Chest",
            "Arms",
            "Legs",
            "Glutes",
        )

    def test_unknown_exercise_ids_ignored(self, exercises) -> None:
        workout = Workout(id="w", name="W", exercise_ids=("missing", "pu"))
        assert compute_muscles_covered(workout, exercises) == ("Chest", "Arms")

    def test_no_duplicates(self, push_ups) -> None:
        workout = Workout(id="w", name="W", exercise_ids=("pu", "pu"))
        assert compute_muscles_covered(workout, [push_ups]) == ("Chest", "Arms")

    def test_with_muscles_covered_returns_copy(self, upper_body, exercises) -> None:
        refreshed = with_muscles_covered(upper_body, exercises)
        assert upper_body.muscles_covered == ()
        assert refreshed.muscles_covered[0] == "Shoulders"

    def test_sample_workouts_have_muscles(self) -> None:
        for workout in sample_workouts():
            assert workout.muscles_covered


class TestExerciseCountByType:
    def test_counts_every_type(self, upper_body, exercises) -> None:
        counts = exercise_count_by_type(upper_body, exercises)
        assert counts == {
            ExerciseType.WARMUP: 1,
            ExerciseType.STRETCHING: 0,
            ExerciseType.MAIN: 2,
        }


class TestValidation:
    def test_name_and_exercises_required(self) -> None:
        assert validate_workout(" ", []) == [
            "Workout name is required",
            "At least one exercise is required",
        ]

    def test_unknown_day_rejected(self) -> None:
        errors = validate_workout("Legs", ["sq"], "Someday")
        assert len(errors) == 1
        assert errors[0].startswith("Recommended day must be one of")

    def test_blank_day_allowed(self) -> None:
        assert validate_workout("Legs", ["sq"], "") == []

    def test_build_computes_muscles(self, exercises) -> None:
        workout = build_workout("Legs", ["sq"], exercises, recommended_day="Friday")
        assert workout.muscles_covered == ("Legs", "Glutes")
        assert workout.exercise_ids == ("sq",)
        assert workout.created_at is not None

    def test_build_invalid_raises(self) -> None:
        with pytest.raises(ValidationError):
            build_workout("", ["sq"])
