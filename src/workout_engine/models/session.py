"""Session records: per-set performance, per-exercise data, whole sessions.

SetData and ExerciseSessionData are what the session engine edits while a
session is live. WorkoutSession is the persisted snapshot; once stored it
is never edited again.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from workout_engine.utils import round_half_up


@dataclass(frozen=True)
class SetData:
    """One set of an exercise. ``reps == 0`` means not performed yet."""

    reps: int = 0
    level: str = ""
    completed: bool = False
    completed_at: datetime | None = None


@dataclass(frozen=True)
class ExerciseSessionData:
    """Performance for one exercise within a session.

    ``previous_sets`` is the read-only baseline from the workout's previous
    session. It is engine bookkeeping and is not persisted.
    """

    exercise_id: str
    sets: tuple[SetData, ...] = field(default_factory=tuple)
    previous_sets: tuple[SetData, ...] = field(default_factory=tuple)
    completed: bool = False
    completed_at: datetime | None = None


@dataclass(frozen=True)
class WorkoutSession:
    """One timed execution of a workout."""

    id: str
    workout_id: str
    date: datetime
    exercises: tuple[ExerciseSessionData, ...] = field(default_factory=tuple)
    duration: int = 0  # minutes
    completed: bool = False
    created_at: datetime | None = None

    def exercise_data(self, exercise_id: str) -> ExerciseSessionData | None:
        """Return the record for *exercise_id*, or None."""
        for data in self.exercises:
            if data.exercise_id == exercise_id:
                return data
        return None


# ---------------------------------------------------------------------------
# Derived values
# ---------------------------------------------------------------------------


def total_reps(sets: Iterable[SetData]) -> int:
    """Sum of reps across *sets*."""
    return sum(s.reps for s in sets)


def session_volume(session: WorkoutSession) -> int:
    """Total reps across every exercise of *session*, completed or not."""
    return sum(total_reps(data.sets) for data in session.exercises)


def completed_exercise_count(exercises: Iterable[ExerciseSessionData]) -> int:
    return sum(1 for data in exercises if data.completed)


def completion_percentage(exercises: Iterable[ExerciseSessionData], total: int) -> int:
    """Share of completed exercises, 0-100; 0 for an empty workout."""
    if total <= 0:
        return 0
    return round_half_up(100 * completed_exercise_count(exercises) / total)


def improvement_percentage(current: int, previous: int) -> int:
    """Percentage change of total reps against the previous session.

    A previous total of 0 counts as 100% improvement when anything was
    done now, 0% otherwise.
    """
    if previous == 0:
        return 100 if current > 0 else 0
    return round_half_up(100 * (current - previous) / previous)


@dataclass(frozen=True)
class Improvement:
    """Current vs previous total reps for one exercise."""

    exercise_id: str
    current_volume: int
    previous_volume: int

    @property
    def improved(self) -> bool:
        return self.current_volume > self.previous_volume

    @property
    def percentage(self) -> int:
        return improvement_percentage(self.current_volume, self.previous_volume)


def exercise_improvement(data: ExerciseSessionData) -> Improvement:
    """Compare an exercise's current sets against its baseline."""
    return Improvement(
        exercise_id=data.exercise_id,
        current_volume=total_reps(data.sets),
        previous_volume=total_reps(data.previous_sets),
    )
