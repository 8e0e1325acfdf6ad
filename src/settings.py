#!/usr/bin/env python
"""
Centralized configuration schema for the preview player.

Merges defaults from config.Config with optional runtime overrides and
validates them once, so the app factory and the player share one view of
credentials, endpoints and timing.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config


class AppSettings(BaseModel):
    """Application-wide settings for the proxy and the player."""

    model_config = ConfigDict(extra="ignore")

    # Spotify credentials
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None

    # Upstream endpoints
    token_url: str = "https://accounts.spotify.com/api/token"
    api_base_url: str = "https://api.spotify.com/v1"
    token_expiry_margin_seconds: int = 60
    upstream_timeout_seconds: Optional[float] = None

    # HTTP surface
    cors_allowed_origins: List[str] = Field(default_factory=list)
    enable_rate_limiting: bool = False
    rate_limit_requests: int = 60
    rate_limit_window_seconds: int = 60

    # Player
    player_api_base_url: str = "http://localhost:5000"
    default_preview_duration: int = 30
    skip_delay_seconds: float = 0.5

    @field_validator("spotify_client_id", "spotify_client_secret", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("upstream_timeout_seconds", mode="before")
    @classmethod
    def _zero_disables_timeout(cls, value: object) -> Optional[float]:
        if value in (None, "", 0, "0"):
            return None
        try:
            timeout = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        return timeout if timeout > 0 else None

    @field_validator("token_expiry_margin_seconds", mode="before")
    @classmethod
    def _coerce_margin(cls, value: object) -> int:
        try:
            margin = int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 60
        return max(0, margin)

    @field_validator("skip_delay_seconds", mode="before")
    @classmethod
    def _coerce_skip_delay(cls, value: object) -> float:
        try:
            delay = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 0.5
        return max(0.0, delay)

    @property
    def credentials_configured(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret)


def load_app_settings(overrides: Optional[Dict[str, Any]] = None) -> AppSettings:
    """Load settings merging config defaults with optional runtime overrides."""
    data: Dict[str, Any] = {
        "spotify_client_id": Config.SPOTIFY_CLIENT_ID,
        "spotify_client_secret": Config.SPOTIFY_CLIENT_SECRET,
        "token_url": Config.SPOTIFY_TOKEN_URL,
        "api_base_url": Config.SPOTIFY_API_BASE_URL,
        "token_expiry_margin_seconds": Config.TOKEN_EXPIRY_MARGIN_SECONDS,
        "upstream_timeout_seconds": Config.UPSTREAM_TIMEOUT_SECONDS,
        "cors_allowed_origins": Config.CORS_ALLOWED_ORIGINS,
        "enable_rate_limiting": Config.ENABLE_RATE_LIMITING,
        "rate_limit_requests": Config.RATE_LIMIT_REQUESTS,
        "rate_limit_window_seconds": Config.RATE_LIMIT_WINDOW_SECONDS,
        "player_api_base_url": Config.PLAYER_API_BASE_URL,
        "default_preview_duration": Config.DEFAULT_PREVIEW_DURATION,
        "skip_delay_seconds": Config.SKIP_DELAY_SECONDS,
    }
    if overrides:
        data.update(overrides)
    return AppSettings.model_validate(data)


__all__ = [
    "AppSettings",
    "load_app_settings",
]
