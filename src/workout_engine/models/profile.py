"""The single local user's profile."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import datetime

from workout_engine.exceptions import ValidationError

DEFAULT_PROFILE_ID = "user_1"
DEFAULT_PROFILE_NAME = "Workout Tracker User"


@dataclass(frozen=True)
class UserProfile:
    id: str = DEFAULT_PROFILE_ID
    name: str = DEFAULT_PROFILE_NAME
    created_at: datetime | None = None


def rename_profile(profile: UserProfile, name: str) -> UserProfile:
    """Return *profile* with a new display name.

    Raises:
        ValidationError: If the trimmed name is empty.
    """
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError(["Name cannot be empty"])
    return dataclasses.replace(profile, name=trimmed)
