"""Plain-record serialization for the persisted collections.

Converts entities to and from JSON-compatible dicts using the camelCase
field names the collections have always been stored with.

Session history holds two shapes of per-exercise record:

* current: ``{"exerciseId": ..., "sets": [{"reps": 10, "level": ...}, ...]}``
* legacy:  ``{"exerciseId": ..., "sets": 3, "reps": 10}`` (scalar counts)

Both are read; legacy records are expanded into ``sets`` copies of a
SetData with the scalar rep count and no level. Records are always
written in the current shape.

All functions are pure (no I/O).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from workout_engine.models.enums import FALLBACK_LEVEL, ExerciseType
from workout_engine.models.exercise import Exercise, parse_exercise_type
from workout_engine.models.profile import (
    DEFAULT_PROFILE_ID,
    DEFAULT_PROFILE_NAME,
    UserProfile,
)
from workout_engine.models.session import ExerciseSessionData, SetData, WorkoutSession
from workout_engine.models.workout import Workout
from workout_engine.utils import coerce_reps

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------


def format_timestamp(value: datetime | None) -> str | None:
    """ISO-8601 string for *value*; naive datetimes are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed) or epoch milliseconds."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            logger.warning("Unreadable timestamp %r", value)
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            logger.warning("Unreadable timestamp %r", value)
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Exercises and workouts
# ---------------------------------------------------------------------------


def exercise_to_record(exercise: Exercise) -> dict:
    return {
        "id": exercise.id,
        "name": exercise.name,
        "type": exercise.exercise_type.value,
        "targetMuscle": exercise.target_muscle,
        "secondaryMuscle": exercise.secondary_muscle,
        "levels": list(exercise.levels),
        "createdAt": format_timestamp(exercise.created_at),
    }


def exercise_from_record(record: dict) -> Exercise:
    """Build an Exercise from a stored record.

    Stored data predates level validation in places: an empty level list
    reads back as a single standard level, an unknown type as Main.
    """
    exercise_type = parse_exercise_type(record.get("type"))
    if exercise_type is None:
        logger.debug("Exercise %s has unknown type %r", record.get("id"), record.get("type"))
        exercise_type = ExerciseType.MAIN

    levels = tuple(
        str(level).strip() for level in record.get("levels") or () if str(level).strip()
    )
    return Exercise(
        id=str(record["id"]),
        name=record.get("name") or "",
        exercise_type=exercise_type,
        target_muscle=record.get("targetMuscle") or "",
        levels=levels or (FALLBACK_LEVEL,),
        secondary_muscle=record.get("secondaryMuscle") or "",
        created_at=parse_timestamp(record.get("createdAt")),
    )


def workout_to_record(workout: Workout) -> dict:
    return {
        "id": workout.id,
        "name": workout.name,
        "exercises": list(workout.exercise_ids),
        "musclesCovered": list(workout.muscles_covered),
        "recommendedDay": workout.recommended_day,
        "createdAt": format_timestamp(workout.created_at),
    }


def workout_from_record(record: dict) -> Workout:
    return Workout(
        id=str(record["id"]),
        name=record.get("name") or "",
        exercise_ids=tuple(str(eid) for eid in record.get("exercises") or ()),
        recommended_day=record.get("recommendedDay") or "",
        muscles_covered=tuple(record.get("musclesCovered") or ()),
        created_at=parse_timestamp(record.get("createdAt")),
    )


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


def set_to_record(set_data: SetData) -> dict:
    return {
        "reps": set_data.reps,
        "level": set_data.level,
        "completed": set_data.completed,
        "completedAt": format_timestamp(set_data.completed_at),
    }


def set_from_record(record: dict) -> SetData:
    return SetData(
        reps=coerce_reps(record.get("reps")),
        level=record.get("level") or "",
        completed=bool(record.get("completed")),
        completed_at=parse_timestamp(record.get("completedAt")),
    )


def exercise_data_to_record(data: ExerciseSessionData) -> dict:
    """Persisted shape of one exercise's performance; no baseline."""
    return {
        "exerciseId": data.exercise_id,
        "sets": [set_to_record(s) for s in data.sets],
        "completed": data.completed,
        "completedAt": format_timestamp(data.completed_at),
    }


def is_legacy_exercise_record(record: dict) -> bool:
    """True for the old scalar shape where ``sets`` is a count."""
    sets = record.get("sets")
    return not isinstance(sets, list) and sets is not None


def exercise_data_from_record(record: dict) -> ExerciseSessionData:
    """Read either record shape into the current ExerciseSessionData."""
    if is_legacy_exercise_record(record):
        count = coerce_reps(record.get("sets"))
        reps = coerce_reps(record.get("reps"))
        logger.debug(
            "Normalizing legacy record for exercise %s: %d x %d",
            record.get("exerciseId"),
            count,
            reps,
        )
        sets = tuple(SetData(reps=reps) for _ in range(count))
    else:
        sets = tuple(
            set_from_record(s) for s in record.get("sets") or () if isinstance(s, dict)
        )

    return ExerciseSessionData(
        exercise_id=str(record.get("exerciseId", "")),
        sets=sets,
        completed=bool(record.get("completed")),
        completed_at=parse_timestamp(record.get("completedAt")),
    )


def session_to_record(session: WorkoutSession) -> dict:
    return {
        "id": session.id,
        "workoutId": session.workout_id,
        "date": format_timestamp(session.date),
        "exercises": [exercise_data_to_record(d) for d in session.exercises],
        "duration": session.duration,
        "completed": session.completed,
        "createdAt": format_timestamp(session.created_at),
    }


def session_from_record(record: dict) -> WorkoutSession:
    """Build a WorkoutSession; an unreadable date sorts as the oldest."""
    return WorkoutSession(
        id=str(record["id"]),
        workout_id=str(record.get("workoutId", "")),
        date=parse_timestamp(record.get("date")) or _EPOCH,
        exercises=tuple(
            exercise_data_from_record(r)
            for r in record.get("exercises") or ()
            if isinstance(r, dict)
        ),
        duration=coerce_reps(record.get("duration")),
        completed=bool(record.get("completed")),
        created_at=parse_timestamp(record.get("createdAt")),
    )


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


def profile_to_record(profile: UserProfile) -> dict:
    return {
        "id": profile.id,
        "name": profile.name,
        "createdAt": format_timestamp(profile.created_at),
    }


def profile_from_record(record: dict) -> UserProfile:
    return UserProfile(
        id=str(record.get("id") or DEFAULT_PROFILE_ID),
        name=record.get("name") or DEFAULT_PROFILE_NAME,
        created_at=parse_timestamp(record.get("createdAt")),
    )
