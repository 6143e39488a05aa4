"""Rest timer: a countdown between sets.

States are IDLE, RUNNING and FINISHED; pausing returns to IDLE with the
remaining count kept. The timer does not keep time itself: a tick source
(or the host calling :meth:`RestTimer.tick`) delivers one tick per second
while it runs.

Every start opens a new tick generation. Pause, reset, finish and close
cancel the scheduled job, and a tick that still arrives from an older
generation is ignored, so a late callback can never decrement a timer
that has since been paused or reset.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Protocol

from workout_engine.exceptions import PreconditionError
from workout_engine.models.enums import (
    REST_DEFAULT_SECONDS,
    REST_MAX_SECONDS,
    REST_MIN_SECONDS,
    TimerState,
)

logger = logging.getLogger(__name__)


class TickHandle(Protocol):
    def cancel(self) -> None:
        ...


class TickSource(Protocol):
    """Calls *callback* once per second until the returned handle is cancelled."""

    def schedule(self, callback: Callable[[], None]) -> TickHandle:
        ...


def validate_duration(seconds: int) -> int:
    """Return *seconds* if it is an allowed rest duration.

    Raises:
        ValueError: Outside REST_MIN_SECONDS..REST_MAX_SECONDS.
    """
    if not REST_MIN_SECONDS <= seconds <= REST_MAX_SECONDS:
        raise ValueError(
            f"Rest duration must be between {REST_MIN_SECONDS} and "
            f"{REST_MAX_SECONDS} seconds, got {seconds}"
        )
    return seconds


def clamp_duration(seconds: int) -> int:
    return max(REST_MIN_SECONDS, min(REST_MAX_SECONDS, seconds))


def format_timer(seconds: int) -> str:
    """Render a countdown as ``MM:SS``. e.g. 90 -> '01:30'."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class RestTimer:
    """Countdown state machine with a one-shot notification on finish.

    Usage:
        timer = RestTimer(90, notify=play_alert, tick_source=ticker)
        timer.start()
        ...
        timer.close()  # on session exit
    """

    def __init__(
        self,
        duration_s: int = REST_DEFAULT_SECONDS,
        notify: Callable[[], None] | None = None,
        tick_source: TickSource | None = None,
    ) -> None:
        self._duration = validate_duration(duration_s)
        self._remaining = self._duration
        self._state = TimerState.IDLE
        self._notify = notify
        self._tick_source = tick_source
        self._handle: TickHandle | None = None
        self._generation = 0
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def duration(self) -> int:
        return self._duration

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def is_running(self) -> bool:
        return self._state == TimerState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state == TimerState.FINISHED

    @property
    def is_paused(self) -> bool:
        return self._state == TimerState.IDLE and 0 < self._remaining < self._duration

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_duration(self, seconds: int) -> None:
        """Configure the duration and reload the countdown.

        Raises:
            PreconditionError: While the timer is running.
            ValueError: If *seconds* is out of range.
        """
        with self._lock:
            if self._state == TimerState.RUNNING:
                raise PreconditionError("Cannot change rest duration while the timer runs")
            self._duration = validate_duration(seconds)
            self._remaining = self._duration
            self._state = TimerState.IDLE

    def start(self) -> None:
        """Run the countdown. A finished timer starts over from its duration."""
        with self._lock:
            if self._state == TimerState.RUNNING:
                return
            if self._state == TimerState.FINISHED or self._remaining <= 0:
                self._remaining = self._duration
            self._state = TimerState.RUNNING
            self._generation += 1
            self._schedule(self._generation)

    def pause(self) -> None:
        """Stop counting, keeping the remaining seconds."""
        with self._lock:
            if self._state != TimerState.RUNNING:
                return
            self._cancel()
            self._state = TimerState.IDLE

    def reset(self) -> None:
        """Stop and reload the configured duration."""
        with self._lock:
            self._cancel()
            self._state = TimerState.IDLE
            self._remaining = self._duration

    def close(self) -> None:
        """Release the tick source; used when the session is left."""
        self.reset()

    def tick(self) -> bool:
        """Advance one second. Returns False if the timer was not running."""
        return self._advance()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _advance(self, generation: int | None = None) -> bool:
        # The notification runs after the lock is released.
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            if self._state != TimerState.RUNNING:
                return False
            self._remaining = max(0, self._remaining - 1)
            if self._remaining > 0:
                return True
            self._cancel()
            self._state = TimerState.FINISHED
        self._fire_notification()
        return True

    def _schedule(self, generation: int) -> None:
        if self._tick_source is None:
            return

        def _on_tick() -> None:
            self._advance(generation)

        self._handle = self._tick_source.schedule(_on_tick)

    def _cancel(self) -> None:
        # Invalidate ticks already in flight, then drop the job.
        self._generation += 1
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    def _fire_notification(self) -> None:
        if self._notify is None:
            return
        try:
            self._notify()
        except Exception:
            logger.warning("Rest timer notification failed", exc_info=True)
