"""Shared test fixtures: exercises, workouts, a memory-backed store, a fake clock."""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from record_store import MemoryBackend, RecordStore
from workout_engine.models.enums import ExerciseType
from workout_engine.models.exercise import Exercise
from workout_engine.models.session import ExerciseSessionData, SetData, WorkoutSession
from workout_engine.models.workout import Workout
from workout_engine.sample_data import sample_exercises

START = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Sequential ids: s001, s002, ..."""
    counter = itertools.count(1)
    return lambda: f"s{next(counter):03d}"


@pytest.fixture
def push_ups() -> Exercise:
    """Push-ups with two levels: Standard, Decline."""
    return Exercise(
        id="pu",
        name="Push-ups",
        exercise_type=ExerciseType.MAIN,
        target_muscle="Chest",
        secondary_muscle="Arms",
        levels=("Standard", "Decline"),
    )


@pytest.fixture
def squats() -> Exercise:
    return Exercise(
        id="sq",
        name="Squats",
        exercise_type=ExerciseType.MAIN,
        target_muscle="Legs",
        secondary_muscle="Glutes",
        levels=("Standard", "Jump"),
    )


@pytest.fixture
def arm_circles() -> Exercise:
    return Exercise(
        id="ac",
        name="Arm Circles",
        exercise_type=ExerciseType.WARMUP,
        target_muscle="Shoulders",
        levels=("Standard",),
    )


@pytest.fixture
def upper_body(push_ups, squats, arm_circles) -> Workout:
    """Arm circles, push-ups, squats; in that order."""
    return Workout(
        id="w1",
        name="Upper Body",
        exercise_ids=(arm_circles.id, push_ups.id, squats.id),
        recommended_day="Monday",
    )


@pytest.fixture
def exercises(push_ups, squats, arm_circles) -> list[Exercise]:
    return [push_ups, squats, arm_circles]


@pytest.fixture
def samples() -> list[Exercise]:
    return sample_exercises()


@pytest.fixture
def store(clock) -> RecordStore:
    """Empty RecordStore on an in-memory backend."""
    return RecordStore(MemoryBackend(), clock=clock)


@pytest.fixture
def make_session() -> Callable[..., WorkoutSession]:
    """Factory: make_session("a", "w1", date, {"pu": [(10, "Standard"), ...]})."""

    def _make(
        session_id: str,
        workout_id: str,
        date: datetime,
        records: dict[str, list[tuple[int, str]]],
        duration: int = 30,
        completed: bool = True,
    ) -> WorkoutSession:
        exercises = tuple(
            ExerciseSessionData(
                exercise_id=exercise_id,
                sets=tuple(SetData(reps=reps, level=level) for reps, level in sets),
                completed=True,
            )
            for exercise_id, sets in records.items()
        )
        return WorkoutSession(
            id=session_id,
            workout_id=workout_id,
            date=date,
            exercises=exercises,
            duration=duration,
            completed=completed,
        )

    return _make
