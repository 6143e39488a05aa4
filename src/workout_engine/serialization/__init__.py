"""Serialization module: convert entities to and from stored records."""

from workout_engine.serialization.records import (
    exercise_from_record,
    exercise_to_record,
    profile_from_record,
    profile_to_record,
    session_from_record,
    session_to_record,
    workout_from_record,
    workout_to_record,
)

__all__ = [
    "exercise_from_record",
    "exercise_to_record",
    "profile_from_record",
    "profile_to_record",
    "session_from_record",
    "session_to_record",
    "workout_from_record",
    "workout_to_record",
]
