"""Typed collections over a storage backend.

Every write is a read-modify-write of the whole collection. Mutating
operations work on the raw stored records so a record this version cannot
decode is carried through untouched instead of being dropped.

Results follow a boolean contract: writes return False on failure
(storage error or unknown id) and never raise.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

from record_store.backends import StorageBackend
from record_store.exceptions import StorageError
from workout_engine.models.session import WorkoutSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Collection(Generic[T]):
    """An ordered collection of records stored under one backend key."""

    def __init__(
        self,
        backend: StorageBackend,
        key: str,
        encode: Callable[[T], dict],
        decode: Callable[[dict], T],
    ) -> None:
        self._backend = backend
        self.key = key
        self._encode = encode
        self._decode = decode

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all(self) -> list[T]:
        """All decodable records in stored order; [] if the read fails."""
        try:
            raw = self._load_raw()
        except StorageError as exc:
            logger.error("Error loading %s: %s", self.key, exc)
            return []
        return self._decode_all(raw)

    def get_by_id(self, record_id: str) -> T | None:
        for record in self.get_all():
            if getattr(record, "id", None) == record_id:
                return record
        return None

    def is_empty(self) -> bool:
        """True if nothing, or an empty list, is stored under this key.

        Unlike ``get_all`` this tells a missing collection apart from an
        unreadable one.

        Raises:
            StorageError: If the stored data cannot be read.
        """
        return not self._load_raw()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save_all(self, records: list[T]) -> bool:
        """Replace the whole collection with *records*."""
        return self._save_raw([self._encode(r) for r in records])

    def add(self, record: T) -> bool:
        """Append *record*. Refuses to write if the current data is unreadable."""
        try:
            raw = self._load_raw()
        except StorageError as exc:
            logger.error("Not adding to %s, existing data unreadable: %s", self.key, exc)
            return False
        raw.append(self._encode(record))
        return self._save_raw(raw)

    def update(self, record_id: str, record: T) -> bool:
        """Replace the record with *record_id*. False if absent."""
        try:
            raw = self._load_raw()
        except StorageError as exc:
            logger.error("Not updating %s, existing data unreadable: %s", self.key, exc)
            return False
        for index, item in enumerate(raw):
            if _raw_id(item) == record_id:
                raw[index] = self._encode(record)
                return self._save_raw(raw)
        logger.info("Update of %s: no record with id %s", self.key, record_id)
        return False

    def delete(self, record_id: str) -> bool:
        """Remove the record with *record_id*. False if absent."""
        try:
            raw = self._load_raw()
        except StorageError as exc:
            logger.error("Not deleting from %s, existing data unreadable: %s", self.key, exc)
            return False
        remaining = [item for item in raw if _raw_id(item) != record_id]
        if len(remaining) == len(raw):
            logger.info("Delete from %s: no record with id %s", self.key, record_id)
            return False
        return self._save_raw(remaining)

    def clear(self) -> bool:
        try:
            self._backend.remove(self.key)
        except StorageError as exc:
            logger.error("Error clearing %s: %s", self.key, exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load_raw(self) -> list[Any]:
        data = self._backend.load(self.key)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(
                f"Expected a list for {self.key}, got {type(data).__name__}",
                key=self.key,
            )
        return data

    def _save_raw(self, raw: list[Any]) -> bool:
        try:
            self._backend.save(self.key, raw)
        except StorageError as exc:
            logger.error("Error saving %s: %s", self.key, exc)
            return False
        return True

    def _decode_all(self, raw: list[Any]) -> list[T]:
        records: list[T] = []
        for item in raw:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object entry in %s", self.key)
                continue
            try:
                records.append(self._decode(item))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable record in %s: %s", self.key, exc)
        return records


class SessionCollection(Collection[WorkoutSession]):
    """Session history with workout-scoped lookups."""

    def get_by_workout_id(self, workout_id: str) -> list[WorkoutSession]:
        return [s for s in self.get_all() if s.workout_id == workout_id]

    def get_latest_by_workout_id(self, workout_id: str) -> WorkoutSession | None:
        """Most recent session of *workout_id*; equal dates go to the highest id."""
        sessions = self.get_by_workout_id(workout_id)
        if not sessions:
            return None
        return max(sessions, key=lambda s: (s.date, s.id))


def _raw_id(item: Any) -> str | None:
    if isinstance(item, dict) and item.get("id") is not None:
        return str(item["id"])
    return None
