#!/usr/bin/env python
"""
Playlist loader keyed by the URL the user last submitted.

Each URL change bumps a request sequence number. Fetches run on an executor
and their results are applied only if their sequence number is still the
current one, so a slow response for an old URL can never overwrite the
state for a newer URL. Superseded fetches are left to finish and discarded.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from src.core.progress import NullPublisher, ProgressPublisher
from src.models.dto import Playlist

from .errors import PlaylistLoadError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred"

FetchPlaylist = Callable[[str], Playlist]


class LoaderStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class LoaderState:
    url: str
    playlist: Optional[Playlist]
    loading: bool
    error: Optional[str]
    status: LoaderStatus

    def as_dict(self) -> dict:
        return {
            "url": self.url,
            "playlist_id": self.playlist.id if self.playlist else None,
            "loading": self.loading,
            "error": self.error,
            "status": self.status.value,
        }


class PlaylistLoader:
    def __init__(
        self,
        fetch_playlist: FetchPlaylist,
        *,
        executor: Optional[Executor] = None,
        publisher: Optional[ProgressPublisher] = None,
        on_playlist: Optional[Callable[[Optional[Playlist]], None]] = None,
    ) -> None:
        self._fetch_playlist = fetch_playlist
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="playlist-loader")
        self._publisher = publisher or NullPublisher()
        self._on_playlist = on_playlist
        self._lock = threading.RLock()

        self._url = ""
        self._sequence = 0
        self._playlist: Optional[Playlist] = None
        self._loading = False
        self._error: Optional[str] = None
        self._status = LoaderStatus.IDLE
        self._closed = False

    @property
    def state(self) -> LoaderState:
        with self._lock:
            return LoaderState(
                url=self._url,
                playlist=self._playlist,
                loading=self._loading,
                error=self._error,
                status=self._status,
            )

    @property
    def sequence(self) -> int:
        with self._lock:
            return self._sequence

    def set_url(self, url: str) -> None:
        """Point the loader at ``url``; an empty string resets it to idle."""
        url = (url or "").strip()
        with self._lock:
            if self._closed:
                logger.debug("Ignoring URL change on a closed loader")
                return
            if url == self._url:
                return
            self._url = url
            self._sequence += 1
            sequence = self._sequence

            if not url:
                had_playlist = self._playlist is not None
                self._playlist = None
                self._error = None
                self._loading = False
                self._status = LoaderStatus.IDLE
                self._publish()
                if had_playlist:
                    self._notify_playlist(None)
                return

            self._loading = True
            self._error = None
            self._status = LoaderStatus.LOADING
            self._publish()

        logger.info("Loading playlist %s (request %d)", url, sequence)
        self._executor.submit(self._resolve, sequence, url)

    def reload(self) -> None:
        """Fetch the current URL again under a fresh sequence number."""
        with self._lock:
            url = self._url
            if self._closed or not url:
                return
            self._sequence += 1
            sequence = self._sequence
            self._loading = True
            self._error = None
            self._status = LoaderStatus.LOADING
            self._publish()
        self._executor.submit(self._resolve, sequence, url)

    def close(self) -> None:
        """Stop accepting URLs; later set_url/reload calls are ignored."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_executor:
            self._executor.shutdown(wait=False)

    def _resolve(self, sequence: int, url: str) -> None:
        try:
            playlist = self._fetch_playlist(url)
        except PlaylistLoadError as exc:
            self._apply(sequence, None, exc.message)
        except Exception:
            logger.exception("Unexpected error loading playlist %s", url)
            self._apply(sequence, None, GENERIC_ERROR_MESSAGE)
        else:
            self._apply(sequence, playlist, None)

    def _apply(self, sequence: int, playlist: Optional[Playlist], error: Optional[str]) -> None:
        with self._lock:
            if self._closed:
                logger.debug("Dropping playlist response %d after close", sequence)
                return
            if sequence != self._sequence:
                logger.debug("Discarding stale playlist response %d (current %d)", sequence, self._sequence)
                return
            self._loading = False
            if error is None:
                self._playlist = playlist
                self._error = None
                self._status = LoaderStatus.LOADED
                logger.info("Playlist %s loaded", playlist.id if playlist else None)
            else:
                self._playlist = None
                self._error = error
                self._status = LoaderStatus.FAILED
                logger.info("Playlist load failed: %s", error)
            self._publish()
            self._notify_playlist(self._playlist)

    def _notify_playlist(self, playlist: Optional[Playlist]) -> None:
        if self._on_playlist is not None:
            self._on_playlist(playlist)

    def _publish(self) -> None:
        event = {"type": "playlist"}
        event.update(self.state.as_dict())
        self._publisher.publish(event)


__all__ = ["PlaylistLoader", "LoaderState", "LoaderStatus", "GENERIC_ERROR_MESSAGE"]
