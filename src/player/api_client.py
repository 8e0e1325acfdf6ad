# src/player/api_client.py
import logging
from typing import Optional

import requests
from pydantic import ValidationError

from src.models.dto import Playlist
from .errors import PlaylistLoadError

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to fetch playlist"


class PlaylistApiClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        """Client for the playlist proxy exposed by the Flask app."""
        self.base_url = base_url.rstrip('/')
        self._session = session or requests.Session()
        self._timeout = timeout

    def fetch_playlist(self, playlist_url: str) -> Playlist:
        """ Calls GET /api/spotify/playlist and parses the playlist document. """
        try:
            response = self._session.get(
                f"{self.base_url}/api/spotify/playlist",
                params={"url": playlist_url},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Playlist proxy unreachable: %s", exc)
            raise PlaylistLoadError(DEFAULT_ERROR_MESSAGE) from exc

        if not response.ok:
            raise PlaylistLoadError(self._error_message(response), status_code=response.status_code)

        try:
            return Playlist.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Playlist proxy returned an unreadable document: %s", exc)
            raise PlaylistLoadError(DEFAULT_ERROR_MESSAGE) from exc

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            return DEFAULT_ERROR_MESSAGE
        if isinstance(payload, dict) and payload.get('error'):
            return str(payload['error'])
        return DEFAULT_ERROR_MESSAGE


__all__ = ["PlaylistApiClient", "DEFAULT_ERROR_MESSAGE"]
