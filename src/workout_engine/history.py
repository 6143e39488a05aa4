"""History queries over the log of persisted sessions.

The log is read fresh on every query and never modified. Levels are
compared by exact string equality; different levels of the same exercise
are separate difficulty tiers and their rep counts are never mixed.

Rep lookups are global: an exercise that appears in several workouts
pools its history across all of them.
"""

from __future__ import annotations

from typing import Protocol

from workout_engine.models.session import ExerciseSessionData, SetData, WorkoutSession


class SessionSource(Protocol):
    """Anything that can list persisted sessions (e.g. SessionCollection)."""

    def get_all(self) -> list[WorkoutSession]:
        ...


def _recency_key(session: WorkoutSession) -> tuple:
    # Equal dates fall back to the highest id.
    return (session.date, session.id)


class SessionHistory:
    """Answers temporal questions about past sessions.

    Usage:
        history = SessionHistory(store.sessions)
        reps = history.last_reps_for_exercise_set_level("1", 0, "Standard")
    """

    def __init__(self, source: SessionSource) -> None:
        self._source = source

    def sessions(self) -> list[WorkoutSession]:
        return list(self._source.get_all())

    # ------------------------------------------------------------------
    # Workout-scoped
    # ------------------------------------------------------------------

    def latest_session_for_workout(self, workout_id: str) -> WorkoutSession | None:
        """The most recent session of *workout_id*, or None."""
        candidates = [s for s in self.sessions() if s.workout_id == workout_id]
        if not candidates:
            return None
        return max(candidates, key=_recency_key)

    def previous_sets(self, workout_id: str, exercise_id: str) -> tuple[SetData, ...]:
        """Sets recorded for *exercise_id* in the workout's latest session."""
        latest = self.latest_session_for_workout(workout_id)
        if latest is None:
            return ()
        data = latest.exercise_data(exercise_id)
        return data.sets if data is not None else ()

    # ------------------------------------------------------------------
    # Exercise-scoped (all workouts)
    # ------------------------------------------------------------------

    def sessions_with_exercise(self, exercise_id: str) -> list[WorkoutSession]:
        """Sessions that recorded *exercise_id*, newest first."""
        matching = [
            s for s in self.sessions() if s.exercise_data(exercise_id) is not None
        ]
        return sorted(matching, key=_recency_key, reverse=True)

    def latest_record_for_exercise(self, exercise_id: str) -> ExerciseSessionData | None:
        for session in self.sessions_with_exercise(exercise_id):
            return session.exercise_data(exercise_id)
        return None

    def max_reps_for_exercise_level(self, exercise_id: str, level: str) -> int:
        """Best single set ever recorded for *exercise_id* at *level*; 0 if none."""
        best = 0
        for session in self.sessions():
            for data in session.exercises:
                if data.exercise_id != exercise_id:
                    continue
                for set_data in data.sets:
                    if set_data.level == level and set_data.reps > best:
                        best = set_data.reps
        return best

    def last_reps_for_exercise_set_level(
        self, exercise_id: str, set_position: int, level: str
    ) -> int:
        """Reps of the most recent set at *set_position* done at *level*.

        Sessions are scanned newest first. A session whose record has no set
        at *set_position*, or whose set there has a different level, is
        skipped entirely. Returns 0 when no session qualifies.
        """
        if set_position < 0:
            return 0
        for session in self.sessions_with_exercise(exercise_id):
            data = session.exercise_data(exercise_id)
            if data is None or set_position >= len(data.sets):
                continue
            candidate = data.sets[set_position]
            if candidate.level == level:
                return candidate.reps
        return 0
