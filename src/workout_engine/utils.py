"""Small shared helpers: clock, record ids, rounding, and rep coercion."""

from __future__ import annotations

import math
import time
import uuid
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Timezone-aware current instant in UTC."""
    return datetime.now(timezone.utc)


def new_record_id() -> str:
    """Return a new record id that sorts by creation time.

    Millisecond timestamp prefix, random suffix so two ids minted in the
    same millisecond never collide.
    """
    return f"{int(time.time() * 1000):013d}-{uuid.uuid4().hex[:8]}"


def coerce_reps(value: object) -> int:
    """Convert user input to a non-negative rep count.

    Anything that is not a number (or a numeric string) becomes 0, as do
    negative values. Floats are truncated.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return max(0, int(value))
    if isinstance(value, str):
        text = value.strip()
        try:
            return max(0, int(text))
        except ValueError:
            try:
                return coerce_reps(float(text))
            except ValueError:
                return 0
    return 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity.

    Built-in ``round`` uses banker's rounding, which would turn 12.5% into 12.
    """
    return math.floor(value + 0.5)
