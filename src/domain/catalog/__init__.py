"""Catalog domain services (credentials, playlist resolution)."""

from .credentials import CredentialProvider, Token
from .errors import (
    CatalogError,
    ConfigurationError,
    InvalidUrlError,
    NotFoundError,
    UpstreamAuthError,
    UpstreamError,
)
from .playlists import PlaylistResolver, extract_playlist_id, is_valid_playlist_url

__all__ = [
    "CredentialProvider",
    "Token",
    "PlaylistResolver",
    "extract_playlist_id",
    "is_valid_playlist_url",
    "CatalogError",
    "ConfigurationError",
    "InvalidUrlError",
    "NotFoundError",
    "UpstreamError",
    "UpstreamAuthError",
]
