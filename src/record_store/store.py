"""RecordStore: the four persisted collections behind one object.

Usage:
    store = RecordStore.open("~/.workout_tracker")
    store.initialize_sample_data()
    workout = store.workouts.get_by_id("1")
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from record_store.backends import JsonFileBackend, MemoryBackend, StorageBackend
from record_store.collection import Collection, SessionCollection
from record_store.exceptions import StorageError
from workout_engine.models.exercise import Exercise
from workout_engine.models.profile import UserProfile
from workout_engine.models.workout import Workout
from workout_engine.sample_data import sample_exercises, sample_workouts
from workout_engine.serialization import (
    exercise_from_record,
    exercise_to_record,
    profile_from_record,
    profile_to_record,
    session_from_record,
    session_to_record,
    workout_from_record,
    workout_to_record,
)
from workout_engine.utils import utc_now

logger = logging.getLogger(__name__)

EXERCISES_KEY = "workout_tracker_exercises"
WORKOUTS_KEY = "workout_tracker_workouts"
SESSIONS_KEY = "workout_tracker_sessions"
USER_PROFILE_KEY = "workout_tracker_user_profile"


class ProfileStore:
    """The single user profile, stored as one object."""

    def __init__(
        self,
        backend: StorageBackend,
        key: str = USER_PROFILE_KEY,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._backend = backend
        self.key = key
        self._clock = clock

    def get(self) -> UserProfile:
        """The stored profile, or a fresh default one."""
        try:
            data = self._backend.load(self.key)
        except StorageError as exc:
            logger.error("Error loading profile: %s", exc)
            data = None
        if not isinstance(data, dict):
            return UserProfile(created_at=self._clock())
        return profile_from_record(data)

    def update(self, profile: UserProfile) -> bool:
        try:
            self._backend.save(self.key, profile_to_record(profile))
        except StorageError as exc:
            logger.error("Error saving profile: %s", exc)
            return False
        return True

    def clear(self) -> bool:
        try:
            self._backend.remove(self.key)
        except StorageError as exc:
            logger.error("Error clearing profile: %s", exc)
            return False
        return True


class RecordStore:
    """Facade over the exercises, workouts, sessions and profile collections."""

    def __init__(
        self,
        backend: StorageBackend,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.backend = backend
        self.exercises: Collection[Exercise] = Collection(
            backend, EXERCISES_KEY, exercise_to_record, exercise_from_record
        )
        self.workouts: Collection[Workout] = Collection(
            backend, WORKOUTS_KEY, workout_to_record, workout_from_record
        )
        self.sessions = SessionCollection(
            backend, SESSIONS_KEY, session_to_record, session_from_record
        )
        self.profile = ProfileStore(backend, USER_PROFILE_KEY, clock=clock)

    @classmethod
    def open(cls, data_dir: Path | str) -> RecordStore:
        """Store backed by JSON files in *data_dir*."""
        return cls(JsonFileBackend(data_dir))

    @classmethod
    def in_memory(cls) -> RecordStore:
        return cls(MemoryBackend())

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def clear_all(self) -> bool:
        """Remove every collection, profile included."""
        results = [
            self.exercises.clear(),
            self.workouts.clear(),
            self.sessions.clear(),
            self.profile.clear(),
        ]
        return all(results)

    def initialize_sample_data(self) -> bool:
        """Seed exercises and workouts, only where the collection is empty.

        A collection whose stored data cannot be read is left untouched.
        Returns False if any collection was unreadable or a seeding write
        failed.
        """
        exercises = sample_exercises()
        seeded_exercises = _seed(self.exercises, exercises)
        seeded_workouts = _seed(self.workouts, sample_workouts(exercises))
        return seeded_exercises and seeded_workouts

    def reset_to_sample_data(self) -> bool:
        """Drop exercises, workouts and sessions, then seed the samples."""
        cleared = all(
            [self.exercises.clear(), self.workouts.clear(), self.sessions.clear()]
        )
        if not cleared:
            return False
        ok = self.initialize_sample_data()
        if ok:
            logger.info("Reset to sample data complete")
        return ok


def _seed(collection: Collection, records: list) -> bool:
    try:
        empty = collection.is_empty()
    except StorageError as exc:
        logger.error("Not seeding %s, existing data unreadable: %s", collection.key, exc)
        return False
    if not empty:
        return True
    if not collection.save_all(records):
        return False
    logger.info("Sample data loaded into %s", collection.key)
    return True
