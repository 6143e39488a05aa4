"""Utility helpers bridging the Streamlit UI and the workout engine.

Pure functions for formatting sets, durations, dates and improvement
figures. Nothing here touches Streamlit or storage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from workout_engine.models.enums import ExerciseType
from workout_engine.models.session import Improvement, SetData, WorkoutSession

# ---------------------------------------------------------------------------
# Display constants
# ---------------------------------------------------------------------------

TYPE_COLORS: dict[ExerciseType, str] = {
    ExerciseType.WARMUP: "#FFE0B2",
    ExerciseType.STRETCHING: "#C8E6C9",
    ExerciseType.MAIN: "#BBDEFB",
}

TYPE_ICONS: dict[ExerciseType, str] = {
    ExerciseType.WARMUP: "🔥",
    ExerciseType.STRETCHING: "🧘",
    ExerciseType.MAIN: "💪",
}

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(minutes: int) -> str:
    """Format a session length. e.g. 45 -> '45m', 65 -> '1h 5m'."""
    minutes = max(0, int(minutes))
    if minutes < 60:
        return f"{minutes}m"
    return f"{minutes // 60}h {minutes % 60}m"


def format_date(value: datetime | None) -> str:
    """Format a session date as e.g. 'Oct 19, 2026'."""
    if value is None:
        return "--"
    return f"{value:%b} {value.day}, {value.year}"


def format_set(set_data: SetData) -> str:
    """'12 @ Decline', or just the reps for a set with no level."""
    if set_data.level:
        return f"{set_data.reps} @ {set_data.level}"
    return str(set_data.reps)


def format_sets(sets: Iterable[SetData]) -> str:
    """Comma-joined sets; '--' when there are none."""
    parts = [format_set(s) for s in sets]
    return ", ".join(parts) if parts else "--"


def format_improvement(improvement: Improvement) -> str:
    """Signed percentage against the previous session. e.g. '+50%', '-20%'.

    '--' when neither session has any reps for the exercise.
    """
    if improvement.current_volume == 0 and improvement.previous_volume == 0:
        return "--"
    return f"{improvement.percentage:+d}%"


def progress_label(completed: int, total: int, percentage: int) -> str:
    """e.g. '2/5 exercises (40%)'."""
    return f"{completed}/{total} exercises ({percentage}%)"


def session_caption(session: WorkoutSession, workout_name: str) -> str:
    """One-line summary of a stored session for history lists."""
    return f"{format_date(session.date)} | {workout_name} | {format_duration(session.duration)}"
