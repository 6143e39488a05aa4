"""Data models for the workout engine."""

from workout_engine.models.enums import (
    DAYS_OF_WEEK,
    MUSCLE_GROUPS,
    ExerciseType,
    SessionState,
    TimerState,
)
from workout_engine.models.exercise import (
    Exercise,
    add_level,
    build_exercise,
    remove_level,
    update_level,
    validate_exercise,
)
from workout_engine.models.profile import UserProfile, rename_profile
from workout_engine.models.session import (
    ExerciseSessionData,
    Improvement,
    SetData,
    WorkoutSession,
    exercise_improvement,
    improvement_percentage,
    session_volume,
    total_reps,
)
from workout_engine.models.workout import (
    Workout,
    build_workout,
    compute_muscles_covered,
    exercise_count_by_type,
    validate_workout,
    with_muscles_covered,
)

__all__ = [
    "DAYS_OF_WEEK",
    "MUSCLE_GROUPS",
    "Exercise",
    "ExerciseSessionData",
    "ExerciseType",
    "Improvement",
    "SessionState",
    "SetData",
    "TimerState",
    "UserProfile",
    "Workout",
    "WorkoutSession",
    "add_level",
    "build_exercise",
    "build_workout",
    "compute_muscles_covered",
    "exercise_count_by_type",
    "exercise_improvement",
    "improvement_percentage",
    "remove_level",
    "rename_profile",
    "session_volume",
    "total_reps",
    "update_level",
    "validate_exercise",
    "validate_workout",
    "with_muscles_covered",
]
