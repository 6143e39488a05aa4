"""Workout engine: exercise definitions, session tracking and progression."""

from workout_engine.exceptions import (
    PreconditionError,
    SessionNotSavedError,
    SessionStateError,
    ValidationError,
    WorkoutEngineError,
)
from workout_engine.history import SessionHistory
from workout_engine.library import ExerciseLibrary
from workout_engine.rest_timer import RestTimer
from workout_engine.session_engine import SessionEngine, SessionSummary

__all__ = [
    "ExerciseLibrary",
    "PreconditionError",
    "RestTimer",
    "SessionEngine",
    "SessionHistory",
    "SessionNotSavedError",
    "SessionStateError",
    "SessionSummary",
    "ValidationError",
    "WorkoutEngineError",
]
