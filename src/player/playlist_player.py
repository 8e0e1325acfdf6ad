#!/usr/bin/env python
"""
Page-level composition of loader, engine, settings and views.

``PlaylistPlayer`` is what a frontend holds on to: it accepts the URL the
user typed, feeds loaded playlists into the engine, forwards transport
actions and renders the whole page as one view-model. State changes from
both halves are broadcast through a ``ProgressBroker`` for live UIs.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from typing import Iterator, Optional

from src.core.progress import BrokerPublisher, ProgressBroker
from src.models.dto import Playlist
from src.settings import AppSettings, load_app_settings

from . import views
from .api_client import PlaylistApiClient
from .device import AudioDevice, InMemoryAudioDevice
from .engine import PlaybackEngine
from .loader import FetchPlaylist, PlaylistLoader
from .scheduler import Scheduler
from .settings import PlaybackSettings

logger = logging.getLogger(__name__)


class PlaylistPlayer:
    def __init__(
        self,
        *,
        settings: Optional[AppSettings] = None,
        device: Optional[AudioDevice] = None,
        fetch_playlist: Optional[FetchPlaylist] = None,
        executor: Optional[Executor] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        settings = settings or load_app_settings()
        self.broker = ProgressBroker()
        publisher = BrokerPublisher(self.broker)

        self.playback_settings = PlaybackSettings(duration=settings.default_preview_duration)
        if fetch_playlist is None:
            fetch_playlist = PlaylistApiClient(settings.player_api_base_url).fetch_playlist

        self.engine = PlaybackEngine(
            device or InMemoryAudioDevice(),
            duration_cap=self.playback_settings.duration,
            scheduler=scheduler,
            skip_delay=settings.skip_delay_seconds,
            publisher=publisher,
        )
        self.loader = PlaylistLoader(
            fetch_playlist,
            executor=executor,
            publisher=publisher,
            on_playlist=self._on_playlist,
        )

    def _on_playlist(self, playlist: Optional[Playlist]) -> None:
        tracks = playlist.track_list() if playlist else []
        self.engine.set_tracks(tracks)

    # --- user actions ----------------------------------------------------

    def submit_url(self, url: str) -> None:
        """Load a playlist; blank input is ignored like the input form does."""
        url = (url or "").strip()
        if not url:
            return
        self.loader.set_url(url)

    def clear(self) -> None:
        self.loader.set_url("")

    def set_duration(self, seconds: int) -> None:
        self.playback_settings.duration = seconds
        self.engine.set_duration_cap(seconds)

    def toggle_play_pause(self) -> None:
        self.engine.toggle_play_pause()

    def next(self) -> None:
        self.engine.next()

    def previous(self) -> None:
        self.engine.previous()

    def select_track(self, index: int) -> None:
        self.engine.select_track(index)

    def seek_fraction(self, fraction: float) -> None:
        self.engine.seek(views.seek_time_for_fraction(fraction, self.engine.duration_cap))

    def subscribe(self, heartbeat_seconds: int = 15) -> Iterator[str]:
        return self.broker.subscribe(heartbeat_seconds=heartbeat_seconds)

    def close(self) -> None:
        self.loader.close()
        self.engine.close()

    def __enter__(self) -> "PlaylistPlayer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- rendering -------------------------------------------------------

    def render(self) -> dict:
        loader_state = self.loader.state
        session = self.engine.session
        playlist = loader_state.playlist
        tracks = self.engine.tracks
        current = self.engine.current_track

        page = {
            "input": views.playlist_input_view(loader_state.loading, loader_state.error, loader_state.url),
            "empty": playlist is None and not loader_state.loading,
            "playlist": views.playlist_summary_view(playlist) if playlist else None,
            "player": None,
        }
        if playlist is not None and tracks:
            page["player"] = {
                "current_track": views.current_track_view(current, session.is_playing) if current else None,
                "progress": views.progress_bar_view(session),
                "controls": views.player_controls_view(session),
                "settings": views.playback_settings_view(self.playback_settings.duration),
                "track_list": views.track_list_view(tracks, session.current_track_index),
            }
        return page


__all__ = ["PlaylistPlayer"]
