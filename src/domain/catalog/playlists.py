# src/domain/catalog/playlists.py
import logging
import re
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import requests

from src.observability.metrics import record_playlist_lookup
from .credentials import CredentialProvider
from .errors import InvalidUrlError, NotFoundError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://api.spotify.com/v1"

_PLAYLIST_URL_RE = re.compile(r"^https://open\.spotify\.com/playlist/[a-zA-Z0-9]+")


def is_valid_playlist_url(url: str) -> bool:
    """Checks the public playlist URL shape: https://open.spotify.com/playlist/<id>."""
    if not url:
        return False
    return bool(_PLAYLIST_URL_RE.match(url))


def extract_playlist_id(url: str) -> Optional[str]:
    """Returns the path segment following ``playlist``, ignoring query strings.

    >>> extract_playlist_id("https://open.spotify.com/playlist/37i9dQZF1DXcBWIGoYBM5M?si=abc")
    '37i9dQZF1DXcBWIGoYBM5M'
    """
    try:
        path = urlparse(url).path
    except ValueError:
        return None
    segments = path.split('/')
    try:
        index = segments.index('playlist')
    except ValueError:
        return None
    if index + 1 < len(segments) and segments[index + 1]:
        return segments[index + 1]
    return None


class PlaylistResolver:
    def __init__(self, credentials: CredentialProvider,
                 api_base_url: str = DEFAULT_API_BASE_URL,
                 timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """Resolves playlist URLs against the Web API using a shared credential provider."""
        self._credentials = credentials
        self._api_base_url = api_base_url.rstrip('/')
        self._timeout = timeout
        self._session = session or requests.Session()

    def resolve(self, raw_url: str) -> Dict[str, Any]:
        """ Validates the URL, extracts the ID and returns the playlist document unchanged. """
        if not is_valid_playlist_url(raw_url):
            raise InvalidUrlError("Invalid Spotify playlist URL")

        playlist_id = extract_playlist_id(raw_url)
        if not playlist_id:
            raise InvalidUrlError("Could not extract playlist ID from URL")

        return self.get_playlist_by_id(playlist_id)

    def get_playlist_by_id(self, playlist_id: str) -> Dict[str, Any]:
        token = self._credentials.get_token()
        url = f"{self._api_base_url}/playlists/{playlist_id}"
        try:
            response = self._session.get(
                url,
                headers={"Authorization": f"Bearer {token.value}"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            record_playlist_lookup("error")
            logger.error("Playlist request for %s failed: %s", playlist_id, exc)
            raise UpstreamError(f"Failed to fetch playlist: {exc}") from exc

        if response.status_code == 404:
            record_playlist_lookup("not_found")
            logger.info("Playlist %s not found upstream", playlist_id,
                        extra={"playlist_id": playlist_id, "outcome": "not_found"})
            raise NotFoundError("Playlist not found")
        if response.status_code == 401:
            # Bearer rejected before its cached expiry; the next lookup exchanges again
            self._credentials.invalidate()
        if not response.ok:
            record_playlist_lookup("error")
            logger.warning(
                "Playlist %s lookup returned %s %s", playlist_id, response.status_code, response.reason,
                extra={"playlist_id": playlist_id, "upstream_status": response.status_code},
            )
            raise UpstreamError(
                f"Failed to fetch playlist: {response.reason}",
                upstream_status=response.status_code,
            )

        record_playlist_lookup("success")
        return response.json()


__all__ = ["PlaylistResolver", "is_valid_playlist_url", "extract_playlist_id"]
