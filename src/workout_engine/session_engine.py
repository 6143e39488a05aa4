"""SessionEngine: runs one live workout session from start to save.

Lifecycle: UNINITIALIZED -> ACTIVE -> FINALIZED (or ABANDONED on exit).
Everything between start and finalize lives in memory; only finalize
writes, and only a confirmed write moves the engine to FINALIZED.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Protocol

from workout_engine.exceptions import (
    PreconditionError,
    SessionNotSavedError,
    SessionStateError,
    ValidationError,
)
from workout_engine.history import SessionHistory
from workout_engine.models.enums import DEFAULT_SET_COUNT, SessionState
from workout_engine.models.exercise import Exercise
from workout_engine.models.session import (
    ExerciseSessionData,
    Improvement,
    SetData,
    WorkoutSession,
    completed_exercise_count,
    completion_percentage,
    exercise_improvement,
    total_reps,
)
from workout_engine.models.workout import Workout
from workout_engine.rest_timer import RestTimer
from workout_engine.utils import coerce_reps, new_record_id, round_half_up, utc_now

logger = logging.getLogger(__name__)


class SessionSink(Protocol):
    """Where finalized sessions go (e.g. SessionCollection). True on success."""

    def add(self, session: WorkoutSession) -> bool:
        ...


@dataclass(frozen=True)
class SessionSummary:
    """Running statistics for the active session."""

    completion_percentage: int
    total_volume: int
    completed_exercises: int
    total_exercises: int
    elapsed_minutes: int
    improvements: tuple[Improvement, ...]


class SessionEngine:
    """Orchestrates seeding, set tracking, statistics and persistence.

    Usage:
        engine = SessionEngine(SessionHistory(store.sessions), store.sessions)
        engine.start(workout, library.resolve_exercises(workout))
        engine.set_reps("1", 0, 12)
        engine.complete_exercise("1")
        saved = engine.finalize()
    """

    def __init__(
        self,
        history: SessionHistory,
        sink: SessionSink,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_record_id,
        rest_timer: RestTimer | None = None,
        default_set_count: int = DEFAULT_SET_COUNT,
    ) -> None:
        self.history = history
        self.sink = sink
        self.rest_timer = rest_timer
        self._clock = clock
        self._id_factory = id_factory
        self._default_set_count = default_set_count

        self._state = SessionState.UNINITIALIZED
        self._workout: Workout | None = None
        self._session: WorkoutSession | None = None
        self._exercises: list[Exercise] = []
        self._data: list[ExerciseSessionData] = []
        self._current_index = 0
        self._started_at: datetime | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def workout(self) -> Workout | None:
        return self._workout

    @property
    def session(self) -> WorkoutSession | None:
        """The session shell (id, workout, start date) once started."""
        return self._session

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def exercises(self) -> tuple[Exercise, ...]:
        return tuple(self._exercises)

    @property
    def exercise_data(self) -> tuple[ExerciseSessionData, ...]:
        return tuple(self._data)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_exercise(self) -> Exercise | None:
        if 0 <= self._current_index < len(self._exercises):
            return self._exercises[self._current_index]
        return None

    def data_for(self, exercise_id: str) -> ExerciseSessionData:
        return self._data[self._index_of(exercise_id)]

    def exercise(self, exercise_id: str) -> Exercise:
        return self._exercises[self._index_of(exercise_id)]

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def start(self, workout: Workout, exercises: Iterable[Exercise]) -> WorkoutSession:
        """Seed every exercise from history and make the session active.

        *exercises* are the resolved definitions; they are arranged in the
        workout's order and any that the workout does not reference are left
        out.

        Raises:
            SessionStateError: If this engine already ran a session.
            PreconditionError: If none of the workout's exercises resolved.
        """
        if self._state != SessionState.UNINITIALIZED:
            raise SessionStateError(f"Session already {self._state.name.lower()}")

        by_id = {ex.id: ex for ex in exercises}
        ordered = [by_id[eid] for eid in workout.exercise_ids if eid in by_id]
        if not ordered:
            raise PreconditionError(f"Workout {workout.name!r} has no exercises to track")

        now = self._clock()
        previous = self.history.latest_session_for_workout(workout.id)
        self._data = [self._seed_exercise(ex, previous) for ex in ordered]
        self._exercises = ordered
        self._workout = workout
        self._started_at = now
        self._current_index = 0
        self._session = WorkoutSession(
            id=self._id_factory(),
            workout_id=workout.id,
            date=now,
            created_at=now,
        )
        self._state = SessionState.ACTIVE
        logger.info(
            "Started session %s for workout %s (%d exercises, previous=%s)",
            self._session.id,
            workout.id,
            len(ordered),
            previous.id if previous else None,
        )
        return self._session

    def _seed_exercise(
        self, exercise: Exercise, previous: WorkoutSession | None
    ) -> ExerciseSessionData:
        previous_record = previous.exercise_data(exercise.id) if previous else None
        previous_sets = previous_record.sets if previous_record else ()

        default_level = exercise.first_level
        if previous_sets and exercise.has_level(previous_sets[-1].level):
            default_level = previous_sets[-1].level

        count = len(previous_sets) if previous_sets else self._default_set_count
        sets = tuple(
            SetData(
                reps=self.history.last_reps_for_exercise_set_level(
                    exercise.id, position, default_level
                ),
                level=default_level,
            )
            for position in range(count)
        )
        return ExerciseSessionData(
            exercise_id=exercise.id,
            sets=sets,
            previous_sets=previous_sets,
        )

    # ------------------------------------------------------------------
    # Set mutation
    # ------------------------------------------------------------------

    def set_reps(self, exercise_id: str, set_index: int, reps: object) -> SetData:
        """Overwrite a set's reps. Non-numeric or negative input becomes 0."""
        index, data = self._editable(exercise_id)
        current = self._set_at(data, set_index)
        updated = dataclasses.replace(current, reps=coerce_reps(reps))
        self._replace_set(index, set_index, updated)
        return updated

    def set_level(self, exercise_id: str, set_index: int, level: str) -> SetData:
        """Move a set to another level and reload its reps from history.

        Any reps typed in for the set are replaced by the last reps recorded
        at this position for the new level (0 if there are none).

        Raises:
            ValidationError: If *level* is not defined on the exercise.
        """
        index, data = self._editable(exercise_id)
        exercise = self._exercises[index]
        if not exercise.has_level(level):
            raise ValidationError([f"{exercise.name} has no level {level!r}"])
        current = self._set_at(data, set_index)
        updated = dataclasses.replace(
            current,
            level=level,
            reps=self.history.last_reps_for_exercise_set_level(
                exercise_id, set_index, level
            ),
        )
        self._replace_set(index, set_index, updated)
        return updated

    def add_set(self, exercise_id: str) -> SetData:
        """Append an empty set at the exercise's first level."""
        index, data = self._editable(exercise_id)
        new_set = SetData(reps=0, level=self._exercises[index].first_level)
        self._data[index] = dataclasses.replace(data, sets=data.sets + (new_set,))
        return new_set

    def remove_set(self, exercise_id: str, set_index: int) -> None:
        """Remove one set; the last remaining set cannot be removed."""
        index, data = self._editable(exercise_id)
        self._set_at(data, set_index)
        if len(data.sets) <= 1:
            raise PreconditionError("An exercise needs at least one set")
        sets = data.sets[:set_index] + data.sets[set_index + 1:]
        self._data[index] = dataclasses.replace(data, sets=sets)

    def complete_set(self, exercise_id: str, set_index: int) -> SetData:
        """Mark one set as performed, stamping the time."""
        index, data = self._editable(exercise_id)
        current = self._set_at(data, set_index)
        updated = dataclasses.replace(
            current, completed=True, completed_at=self._clock()
        )
        self._replace_set(index, set_index, updated)
        return updated

    # ------------------------------------------------------------------
    # Exercise completion and cursor
    # ------------------------------------------------------------------

    def complete_exercise(self, exercise_id: str) -> ExerciseSessionData:
        """Mark an exercise done and move the cursor to the next open one.

        Raises:
            PreconditionError: If none of its sets has any reps.
        """
        index, data = self._editable(exercise_id)
        if not any(s.reps > 0 for s in data.sets):
            raise PreconditionError(
                f"Enter reps for {self._exercises[index].name} before completing it"
            )
        updated = dataclasses.replace(data, completed=True, completed_at=self._clock())
        self._data[index] = updated
        self._advance_cursor(index)
        logger.info(
            "Completed exercise %s (%d/%d)",
            exercise_id,
            completed_exercise_count(self._data),
            len(self._data),
        )
        return updated

    def select_exercise(self, index: int) -> Exercise:
        """Point the cursor at the exercise at *index* (workout order)."""
        self._require_active()
        if not 0 <= index < len(self._exercises):
            raise IndexError(f"No exercise at position {index}")
        self._current_index = index
        return self._exercises[index]

    def _advance_cursor(self, completed_index: int) -> None:
        count = len(self._data)
        for offset in range(1, count + 1):
            candidate = (completed_index + offset) % count
            if not self._data[candidate].completed:
                self._current_index = candidate
                return

    # ------------------------------------------------------------------
    # Derived statistics
    # ------------------------------------------------------------------

    def completion_percentage(self) -> int:
        return completion_percentage(self._data, len(self._exercises))

    def total_volume(self) -> int:
        """Reps across every set of every exercise, finished or not."""
        return sum(total_reps(d.sets) for d in self._data)

    def improvement(self, exercise_id: str) -> Improvement:
        return exercise_improvement(self.data_for(exercise_id))

    def improvements(self) -> tuple[Improvement, ...]:
        return tuple(exercise_improvement(d) for d in self._data)

    def elapsed_minutes(self) -> int:
        if self._started_at is None:
            return 0
        elapsed = (self._clock() - self._started_at).total_seconds()
        return round_half_up(elapsed / 60)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            completion_percentage=self.completion_percentage(),
            total_volume=self.total_volume(),
            completed_exercises=completed_exercise_count(self._data),
            total_exercises=len(self._exercises),
            elapsed_minutes=self.elapsed_minutes(),
            improvements=self.improvements(),
        )

    # ------------------------------------------------------------------
    # Finalization
    # ------------------------------------------------------------------

    def finalize(self) -> WorkoutSession:
        """Persist the session and close it.

        Raises:
            SessionStateError: If the session is not active.
            PreconditionError: If no exercise has been completed.
            SessionNotSavedError: If the store rejected the write. The
                session stays active so the caller can retry.
        """
        session = self._require_active()
        if completed_exercise_count(self._data) == 0:
            raise PreconditionError(
                "Complete at least one exercise before finishing the session"
            )

        snapshot = dataclasses.replace(
            session,
            exercises=tuple(
                dataclasses.replace(d, previous_sets=()) for d in self._data
            ),
            duration=self.elapsed_minutes(),
            completed=True,
        )

        if not self.sink.add(snapshot):
            logger.error("Session %s was not saved", snapshot.id)
            raise SessionNotSavedError(snapshot.id)

        self._session = snapshot
        self._state = SessionState.FINALIZED
        self._close_timer()
        logger.info(
            "Finalized session %s: %d min, volume %d",
            snapshot.id,
            snapshot.duration,
            self.total_volume(),
        )
        return snapshot

    def abandon(self) -> None:
        """Leave the active session without saving anything."""
        self._require_active()
        self._state = SessionState.ABANDONED
        self._close_timer()
        logger.info("Abandoned session %s", self._session.id if self._session else None)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_active(self) -> WorkoutSession:
        if self._state != SessionState.ACTIVE or self._session is None:
            raise SessionStateError(
                f"Session is {self._state.name.lower()}, not active"
            )
        return self._session

    def _index_of(self, exercise_id: str) -> int:
        for index, data in enumerate(self._data):
            if data.exercise_id == exercise_id:
                return index
        raise KeyError(f"Exercise {exercise_id} is not part of this session")

    def _editable(self, exercise_id: str) -> tuple[int, ExerciseSessionData]:
        self._require_active()
        index = self._index_of(exercise_id)
        data = self._data[index]
        if data.completed:
            raise PreconditionError(
                f"{self._exercises[index].name} is already completed"
            )
        return index, data

    @staticmethod
    def _set_at(data: ExerciseSessionData, set_index: int) -> SetData:
        if not 0 <= set_index < len(data.sets):
            raise IndexError(f"No set at position {set_index}")
        return data.sets[set_index]

    def _replace_set(self, index: int, set_index: int, new_set: SetData) -> None:
        data = self._data[index]
        sets = data.sets[:set_index] + (new_set,) + data.sets[set_index + 1:]
        self._data[index] = dataclasses.replace(data, sets=sets)

    def _close_timer(self) -> None:
        if self.rest_timer is not None:
            self.rest_timer.close()
