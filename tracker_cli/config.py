"""Environment-variable-based configuration for the tracker CLI."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from workout_engine.models.enums import REST_DEFAULT_SECONDS
from workout_engine.rest_timer import clamp_duration

logger = logging.getLogger(__name__)


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
        return default


DATA_DIR: Path = Path(
    os.environ.get("WORKOUT_TRACKER_DATA_DIR", "~/.workout_tracker")
).expanduser()
REST_SECONDS: int = clamp_duration(
    _int_env("WORKOUT_TRACKER_REST_SECONDS", REST_DEFAULT_SECONDS)
)
LOG_LEVEL: str = os.environ.get("WORKOUT_TRACKER_LOG_LEVEL", "INFO").upper()
