"""Client-credentials token cache for the Spotify Web API.

One ``CredentialProvider`` is built per process (see ``app.create_app``) and
handed to everything that needs a bearer token. It holds a single token and
refreshes it once the cached expiry has passed.

Concurrent callers hitting an expired token may each perform an exchange.
Every exchange yields an independently valid token, so the race only costs a
redundant request.
"""

from __future__ import annotations

import base64
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from src.observability.metrics import record_token_cache_hit, record_token_exchange
from .errors import ConfigurationError, UpstreamAuthError

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URL = "https://accounts.spotify.com/api/token"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Token:
    value: str
    expires_at_ms: int

    def is_valid(self, now_ms: int) -> bool:
        return self.expires_at_ms > now_ms


class CredentialProvider:
    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        *,
        token_url: str = DEFAULT_TOKEN_URL,
        expiry_margin_seconds: int = 60,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._expiry_margin_seconds = expiry_margin_seconds
        self._timeout = timeout
        self._session = session or requests.Session()
        self._clock = clock
        self._token: Optional[Token] = None

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    @property
    def cached_token(self) -> Optional[Token]:
        return self._token

    def invalidate(self) -> None:
        self._token = None

    def get_token(self) -> Token:
        """Return the cached token, exchanging credentials for a new one when stale."""
        cached = self._token
        if cached is not None and cached.is_valid(self._clock()):
            record_token_cache_hit()
            return cached

        if not self.configured:
            raise ConfigurationError("Spotify credentials are not configured")

        self._token = self._exchange()
        return self._token

    def _basic_auth_header(self) -> str:
        raw = f"{self._client_id}:{self._client_secret}".encode()
        return f"Basic {base64.b64encode(raw).decode()}"

    def _exchange(self) -> Token:
        logger.info("Requesting Spotify access token via client credentials")
        headers = {
            "Authorization": self._basic_auth_header(),
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            response = self._session.post(
                self._token_url,
                data={"grant_type": "client_credentials"},
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            record_token_exchange("error")
            logger.error("Token exchange request failed: %s", exc)
            raise UpstreamAuthError(f"Failed to get access token: {exc}") from exc

        if not response.ok:
            record_token_exchange("error")
            logger.warning("Token exchange returned %s %s", response.status_code, response.reason)
            raise UpstreamAuthError(
                f"Failed to get access token: {response.reason}",
                upstream_status=response.status_code,
            )

        payload = response.json()
        expires_in = int(payload.get("expires_in", 3600))
        # Issued-at is taken after the response arrives; the margin covers transit time.
        expires_at_ms = self._clock() + (expires_in - self._expiry_margin_seconds) * 1000
        record_token_exchange("success")
        logger.debug("Cached Spotify token for %ss", expires_in - self._expiry_margin_seconds)
        return Token(value=payload["access_token"], expires_at_ms=expires_at_ms)


__all__ = ["Token", "CredentialProvider", "DEFAULT_TOKEN_URL"]
