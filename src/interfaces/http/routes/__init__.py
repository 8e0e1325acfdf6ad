"""Route blueprints exposed via Flask."""

from .spotify import spotify_bp
from .health import health_bp

__all__ = [
    "spotify_bp",
    "health_bp",
]
