"""Builders for catalog payloads and DTOs used across tests."""

from typing import List, Optional

from src.models.dto import Playlist, Track

PLAYLIST_ID = "37i9dQZF1DXcBWIGoYBM5M"
PLAYLIST_URL = f"https://open.spotify.com/playlist/{PLAYLIST_ID}?si=abc"


def track_payload(index: int, preview: bool = True, duration_ms: int = 180_000) -> dict:
    return {
        "id": f"t{index}",
        "name": f"Track {index}",
        "artists": [
            {"id": f"a{index}", "name": f"Artist {index}", "uri": f"spotify:artist:a{index}",
             "href": f"https://api.spotify.com/v1/artists/a{index}"},
        ],
        "album": {
            "id": f"al{index}",
            "name": f"Album {index}",
            "images": [{"url": f"https://img/{index}/640.jpg", "height": 640, "width": 640}],
            "release_date": "2020-01-01",
            "uri": f"spotify:album:al{index}",
        },
        "duration_ms": duration_ms,
        "preview_url": f"https://p.scdn.co/mp3-preview/{index}" if preview else None,
        "uri": f"spotify:track:t{index}",
        "track_number": index + 1,
    }


def playlist_payload(previews: Optional[List[bool]] = None, playlist_id: str = PLAYLIST_ID,
                     name: str = "Today's Top Hits") -> dict:
    previews = previews if previews is not None else [True, True, True]
    return {
        "id": playlist_id,
        "name": name,
        "description": "The hottest tracks",
        "images": [{"url": "https://img/playlist.jpg", "height": None, "width": None}],
        "tracks": {
            "total": len(previews),
            "items": [
                {"added_at": "2024-01-01T00:00:00Z", "track": track_payload(i, preview=p)}
                for i, p in enumerate(previews)
            ],
        },
        "owner": {"display_name": "Spotify", "id": "spotify"},
        "uri": f"spotify:playlist:{playlist_id}",
    }


def make_playlist(previews: Optional[List[bool]] = None, **kwargs) -> Playlist:
    return Playlist.model_validate(playlist_payload(previews, **kwargs))


def make_tracks(previews: List[bool]) -> List[Track]:
    return [Track.model_validate(track_payload(i, preview=p)) for i, p in enumerate(previews)]
