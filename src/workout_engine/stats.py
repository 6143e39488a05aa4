"""Statistics over session history: per-workout, overall, and progress.

Volume is total reps. Averages and rates are rounded half-up to whole
numbers. Progress uses pandas for the per-session table and a numpy
least-squares line for the trend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from workout_engine.models.enums import RECENT_SESSIONS_LIMIT
from workout_engine.models.exercise import Exercise
from workout_engine.models.session import WorkoutSession, session_volume
from workout_engine.models.workout import Workout
from workout_engine.utils import round_half_up

PROGRESS_COLUMNS = ["date", "session_id", "level", "sets", "total_reps", "best_set"]


@dataclass(frozen=True)
class WorkoutStats:
    """Aggregates for the sessions of one workout."""

    total_sessions: int
    completed_sessions: int
    average_duration: int  # minutes
    total_volume: int
    completion_rate: int  # percent
    last_session: WorkoutSession | None = None


@dataclass(frozen=True)
class OverallStats:
    total_workouts: int
    total_exercises: int
    total_sessions: int
    completed_sessions: int
    average_duration: int
    total_volume: int
    completion_rate: int


def _by_recency(sessions: Iterable[WorkoutSession]) -> list[WorkoutSession]:
    return sorted(sessions, key=lambda s: (s.date, s.id), reverse=True)


def _rate(part: int, whole: int) -> int:
    return round_half_up(100 * part / whole) if whole else 0


def workout_stats(sessions: Iterable[WorkoutSession], workout_id: str) -> WorkoutStats:
    """Statistics for every stored session of *workout_id*."""
    mine = [s for s in sessions if s.workout_id == workout_id]
    if not mine:
        return WorkoutStats(0, 0, 0, 0, 0, None)

    completed = sum(1 for s in mine if s.completed)
    total_duration = sum(s.duration for s in mine)
    return WorkoutStats(
        total_sessions=len(mine),
        completed_sessions=completed,
        average_duration=round_half_up(total_duration / len(mine)),
        total_volume=sum(session_volume(s) for s in mine),
        completion_rate=_rate(completed, len(mine)),
        last_session=_by_recency(mine)[0],
    )


def overall_stats(
    sessions: Sequence[WorkoutSession],
    workouts: Sequence[Workout],
    exercises: Sequence[Exercise],
) -> OverallStats:
    completed = sum(1 for s in sessions if s.completed)
    total_duration = sum(s.duration for s in sessions)
    return OverallStats(
        total_workouts=len(workouts),
        total_exercises=len(exercises),
        total_sessions=len(sessions),
        completed_sessions=completed,
        average_duration=(
            round_half_up(total_duration / len(sessions)) if sessions else 0
        ),
        total_volume=sum(session_volume(s) for s in sessions),
        completion_rate=_rate(completed, len(sessions)),
    )


def recent_sessions(
    sessions: Iterable[WorkoutSession], limit: int = RECENT_SESSIONS_LIMIT
) -> list[WorkoutSession]:
    """The *limit* most recent sessions, newest first."""
    return _by_recency(sessions)[:limit]


# ---------------------------------------------------------------------------
# Exercise progress
# ---------------------------------------------------------------------------


def exercise_progress(
    sessions: Iterable[WorkoutSession], exercise_id: str
) -> pd.DataFrame:
    """One row per (session, level) in which *exercise_id* was recorded.

    Columns: date, session_id, level, sets, total_reps, best_set; oldest
    first. Empty (with the same columns) when there is no history.
    """
    rows = []
    for session in sessions:
        data = session.exercise_data(exercise_id)
        if data is None:
            continue
        for set_data in data.sets:
            rows.append(
                {
                    "date": session.date,
                    "session_id": session.id,
                    "level": set_data.level,
                    "reps": set_data.reps,
                }
            )
    if not rows:
        return pd.DataFrame(columns=PROGRESS_COLUMNS)

    frame = pd.DataFrame(rows)
    grouped = (
        frame.groupby(["date", "session_id", "level"], sort=True)["reps"]
        .agg(sets="count", total_reps="sum", best_set="max")
        .reset_index()
    )
    return grouped[PROGRESS_COLUMNS]


def rep_trend(
    sessions: Iterable[WorkoutSession],
    exercise_id: str,
    level: str | None = None,
) -> float:
    """Change in total reps per session, from a least-squares line.

    Only sets at *level* count when it is given. Returns 0.0 with fewer
    than two sessions of data.
    """
    frame = exercise_progress(sessions, exercise_id)
    if level is not None:
        frame = frame[frame["level"] == level]
    if frame.empty:
        return 0.0

    per_session = frame.groupby(["date", "session_id"], sort=True)["total_reps"].sum()
    if len(per_session) < 2:
        return 0.0

    x = np.arange(len(per_session), dtype=np.float64)
    y = per_session.to_numpy(dtype=np.float64)
    slope, _intercept = np.polyfit(x, y, 1)
    return float(slope)
