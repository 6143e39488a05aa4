"""Custom exception hierarchy for the workout engine."""

from __future__ import annotations


class WorkoutEngineError(Exception):
    """Base exception for all workout_engine errors."""


class ValidationError(WorkoutEngineError):
    """A definition is missing required fields.

    All problems are collected up front so the caller can show them together.
    """

    def __init__(self, messages: list[str] | tuple[str, ...]) -> None:
        self.messages = tuple(messages)
        super().__init__("; ".join(self.messages) or "Invalid input")


class PreconditionError(WorkoutEngineError):
    """Operation rejected because its precondition does not hold.

    State is left unchanged when this is raised.
    """


class SessionStateError(PreconditionError):
    """Operation is not valid in the session's current lifecycle state."""


class SessionNotSavedError(WorkoutEngineError):
    """A finalized session could not be persisted; the session stays active."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} could not be saved")
        self.session_id = session_id
