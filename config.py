#!/usr/bin/env python
# config.py
import os
from typing import List

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


class Config:
    # Spotify API (client credentials flow)
    SPOTIFY_CLIENT_ID = os.environ.get('SPOTIFY_CLIENT_ID')
    SPOTIFY_CLIENT_SECRET = os.environ.get('SPOTIFY_CLIENT_SECRET')
    SPOTIFY_TOKEN_URL = os.getenv('SPOTIFY_TOKEN_URL', 'https://accounts.spotify.com/api/token')
    SPOTIFY_API_BASE_URL = os.getenv('SPOTIFY_API_BASE_URL', 'https://api.spotify.com/v1')

    # Seconds shaved off the upstream expires_in before a cached token is considered stale
    TOKEN_EXPIRY_MARGIN_SECONDS = _get_int('TOKEN_EXPIRY_MARGIN_SECONDS', 60)
    # 0 disables the timeout on outbound calls
    UPSTREAM_TIMEOUT_SECONDS = max(0, _get_int('UPSTREAM_TIMEOUT_SECONDS', 0))

    # HTTP surface
    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', 'http://localhost:3000')
    ENABLE_RATE_LIMITING = _get_bool('ENABLE_RATE_LIMITING', False)
    RATE_LIMIT_REQUESTS = _get_int('RATE_LIMIT_REQUESTS', 60)
    RATE_LIMIT_WINDOW_SECONDS = _get_int('RATE_LIMIT_WINDOW_SECONDS', 60)

    # Player (client side)
    PLAYER_API_BASE_URL = os.getenv('PLAYER_API_BASE_URL', 'http://localhost:5000')
    DEFAULT_PREVIEW_DURATION = _get_int('DEFAULT_PREVIEW_DURATION', 30)
    # Debounce before skipping a track that has no preview or failed to load
    SKIP_DELAY_SECONDS = _get_float('SKIP_DELAY_SECONDS', 0.5)

    # Runtime behavior
    # Turn Flask debug on/off from env; default off to avoid noisy console
    DEBUG = _get_bool('DEBUG', False)
    # Control console logging; when disabled, logs go only to file
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = _get_int('PORT', 5000)
