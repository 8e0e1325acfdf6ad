"""Error taxonomy for catalog lookups, mapped to HTTP statuses at the route boundary."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for failures resolving catalog data."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(CatalogError):
    """Client credentials are not configured."""

    status_code = 500


class InvalidUrlError(CatalogError):
    """The input is not a recognizable playlist URL."""

    status_code = 400


class NotFoundError(CatalogError):
    """The URL is valid but the playlist does not exist."""

    status_code = 404


class UpstreamError(CatalogError):
    """The catalog answered with a failure other than 404, or was unreachable."""

    status_code = 500

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class UpstreamAuthError(UpstreamError):
    """The client-credentials exchange failed."""


__all__ = [
    "CatalogError",
    "ConfigurationError",
    "InvalidUrlError",
    "NotFoundError",
    "UpstreamError",
    "UpstreamAuthError",
]
