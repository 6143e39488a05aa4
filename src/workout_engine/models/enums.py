"""Enumerations and constants for the workout engine.

Collection defaults and rest timer limits live here so the engine,
the record store, and the UI all agree on them.
"""

from enum import Enum, IntEnum, auto


class ExerciseType(str, Enum):
    """Exercise category. Values are the persisted strings."""

    WARMUP = "Warmup"
    STRETCHING = "Stretching"
    MAIN = "Main"


class SessionState(IntEnum):
    """Lifecycle of a live session. No transition back from FINALIZED."""

    UNINITIALIZED = auto()
    ACTIVE = auto()
    FINALIZED = auto()
    ABANDONED = auto()


class TimerState(IntEnum):
    """Rest timer states. A paused timer is IDLE with its remaining count kept."""

    IDLE = auto()
    RUNNING = auto()
    FINISHED = auto()


MUSCLE_GROUPS = (
    "Chest",
    "Back",
    "Shoulders",
    "Arms",
    "Core",
    "Legs",
    "Glutes",
    "Full Body",
    "Cardio",
)

DAYS_OF_WEEK = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# ---------------------------------------------------------------------------
# Session seeding
# ---------------------------------------------------------------------------
# Sets offered for an exercise with no record in the previous session
DEFAULT_SET_COUNT = 3

# Level given on read to a stored exercise that lists none
FALLBACK_LEVEL = "Standard"

# ---------------------------------------------------------------------------
# Rest timer
# ---------------------------------------------------------------------------
REST_MIN_SECONDS = 10
REST_MAX_SECONDS = 300
REST_DEFAULT_SECONDS = 90
TICK_INTERVAL_SECONDS = 1

# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------
RECENT_SESSIONS_LIMIT = 5
