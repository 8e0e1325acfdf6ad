from __future__ import annotations

from typing import Tuple

from pydantic import BaseModel, ConfigDict, field_validator

DURATION_OPTIONS: Tuple[int, ...] = (10, 15, 20, 30)


class PlaybackSettings(BaseModel):
    """User-selected preview length; drives auto-advance and the seek clamp."""

    model_config = ConfigDict(validate_assignment=True)

    duration: int = 30

    @field_validator("duration")
    @classmethod
    def _validate_duration(cls, value: int) -> int:
        if value not in DURATION_OPTIONS:
            raise ValueError(f"duration must be one of {DURATION_OPTIONS}")
        return value


__all__ = ["PlaybackSettings", "DURATION_OPTIONS"]
