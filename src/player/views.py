"""
Presentation view-models for the player.

Pure functions: they take session/playlist data and return plain dicts a
renderer (template, terminal UI, JSON API) can draw directly. Actions are
left to the caller; views only say what is enabled.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from src.models.dto import Playlist, Track

from .engine import PlaybackSession
from .settings import DURATION_OPTIONS

PLACEHOLDER_ALBUM_IMAGE = "/placeholder-album.png"
NO_PREVIEW_BADGE = "No preview"


def format_duration(ms: int) -> str:
    """Milliseconds to ``m:ss``; ``format_duration(125000) == "2:05"``."""
    seconds = int(ms // 1000)
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes}:{remaining:02d}"


def format_time(seconds: float) -> str:
    """Seconds (possibly fractional) to ``m:ss``."""
    whole = int(seconds)
    minutes, remaining = divmod(whole, 60)
    return f"{minutes}:{remaining:02d}"


def _album_image(track: Track, preferred_index: int = 0) -> Optional[str]:
    images = track.album.images
    if len(images) > preferred_index:
        return images[preferred_index].url
    if images:
        return images[0].url
    return None


def playlist_input_view(loading: bool, error: Optional[str], url: str = "") -> dict:
    return {
        "placeholder": "https://open.spotify.com/playlist/...",
        "button_label": "Loading..." if loading else "Load Playlist",
        "disabled": loading,
        "submit_enabled": not loading and bool(url.strip()),
        "error": error,
    }


def current_track_view(track: Track, is_playing: bool) -> dict:
    return {
        "name": track.name,
        "artists": track.artist_names,
        "album": track.album.name,
        "duration": format_duration(track.duration_ms),
        "image_url": _album_image(track) or PLACEHOLDER_ALBUM_IMAGE,
        "is_playing": is_playing,
    }


def player_controls_view(session: PlaybackSession) -> dict:
    return {
        "is_playing": session.is_playing,
        "play_pause_label": "Pause" if session.is_playing else "Play",
        "can_go_next": session.current_track_index < session.track_count - 1,
        "can_go_previous": session.current_track_index > 0,
        "error": session.error,
    }


def progress_bar_view(session: PlaybackSession) -> dict:
    return {
        "progress": session.progress,
        "elapsed": format_time(session.current_time),
        "total": format_time(session.duration_cap),
    }


def seek_time_for_fraction(fraction: float, duration: float) -> float:
    """Maps a click position along the progress bar (0..1) to a seek time."""
    fraction = min(max(0.0, fraction), 1.0)
    return fraction * duration


def track_list_view(tracks: Sequence[Track], current_index: int) -> dict:
    rows: List[dict] = []
    for index, track in enumerate(tracks):
        has_preview = track.has_preview
        rows.append({
            "key": f"{track.id}-{index}",
            "index": index,
            "name": track.name,
            "artists": track.artist_names,
            # Third image is the smallest thumbnail the catalog returns
            "image_url": _album_image(track, preferred_index=2),
            "duration": format_duration(track.duration_ms),
            "is_current": index == current_index,
            "selectable": has_preview,
            "badge": None if has_preview else NO_PREVIEW_BADGE,
        })
    return {"title": "Playlist Tracks", "count": len(rows), "rows": rows}


def playback_settings_view(duration: int) -> dict:
    return {
        "title": "Playback Duration",
        "options": [
            {"value": value, "label": f"{value}s", "selected": value == duration}
            for value in DURATION_OPTIONS
        ],
    }


def playlist_summary_view(playlist: Playlist) -> dict:
    return {
        "name": playlist.name,
        "description": playlist.description or None,
        "owner": playlist.owner.display_name if playlist.owner else None,
        "total_tracks": playlist.tracks.total,
    }


__all__ = [
    "format_duration",
    "format_time",
    "playlist_input_view",
    "current_track_view",
    "player_controls_view",
    "progress_bar_view",
    "seek_time_for_fraction",
    "track_list_view",
    "playback_settings_view",
    "playlist_summary_view",
    "PLACEHOLDER_ALBUM_IMAGE",
    "NO_PREVIEW_BADGE",
]
