#!/usr/bin/env python
"""
Playback engine: a state machine over the current track of a playlist.

The engine owns one ``AudioDevice`` and binds the current track's preview
URL to it. It enforces the configured preview length (auto-advancing once
the cap is reached), skips tracks without a preview or that fail to load
after a short debounce, and absorbs every device failure into session state
so callers never see an exception from a transport operation.

All transitions run under one re-entrant lock because device signals and
the skip timer may arrive on other threads.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import asdict, dataclass
from enum import Enum
from typing import List, Optional, Sequence

from src.core.progress import NullPublisher, ProgressPublisher
from src.models.dto import Track

from .device import AudioDevice
from .scheduler import ScheduledCall, Scheduler, ThreadingScheduler
from .settings import PlaybackSettings

logger = logging.getLogger(__name__)

NO_PREVIEW_MESSAGE = "No preview available"
LOAD_FAILED_MESSAGE = "Failed to load audio"
PLAYBACK_FAILED_MESSAGE = "Playback failed"

DEFAULT_SKIP_DELAY_SECONDS = 0.5


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    ERROR = "error"


@dataclass(frozen=True)
class PlaybackSession:
    current_track_index: int
    is_playing: bool
    progress: float
    current_time: float
    error: Optional[str]
    duration_cap: int
    track_count: int
    state: PlaybackState

    def as_dict(self) -> dict:
        data = asdict(self)
        data["state"] = self.state.value
        return data


class PlaybackEngine:
    def __init__(
        self,
        device: AudioDevice,
        *,
        duration_cap: int = 30,
        scheduler: Optional[Scheduler] = None,
        skip_delay: float = DEFAULT_SKIP_DELAY_SECONDS,
        publisher: Optional[ProgressPublisher] = None,
    ) -> None:
        self._device = device
        self._settings = PlaybackSettings(duration=duration_cap)
        self._scheduler = scheduler or ThreadingScheduler()
        self._skip_delay = skip_delay
        self._publisher = publisher or NullPublisher()
        self._lock = threading.RLock()

        self._tracks: List[Track] = []
        self._index = 0
        self._is_playing = False
        self._current_time = 0.0
        self._progress = 0.0
        self._error: Optional[str] = None
        self._started = False
        self._source: Optional[str] = None
        # Bumped on every track change; stale skip timers compare against it
        self._generation = 0
        self._pending_skip: Optional[ScheduledCall] = None
        self._closed = False

        device.on_progress(self._handle_progress)
        device.on_ended(self._handle_ended)
        device.on_error(self._handle_error)

    # --- read side -------------------------------------------------------

    @property
    def tracks(self) -> List[Track]:
        with self._lock:
            return list(self._tracks)

    @property
    def current_track(self) -> Optional[Track]:
        with self._lock:
            if 0 <= self._index < len(self._tracks):
                return self._tracks[self._index]
            return None

    @property
    def duration_cap(self) -> int:
        return self._settings.duration

    @property
    def session(self) -> PlaybackSession:
        with self._lock:
            return PlaybackSession(
                current_track_index=self._index,
                is_playing=self._is_playing,
                progress=self._progress,
                current_time=self._current_time,
                error=self._error,
                duration_cap=self._settings.duration,
                track_count=len(self._tracks),
                state=self._state(),
            )

    def _state(self) -> PlaybackState:
        if self._error:
            return PlaybackState.ERROR
        if self._is_playing:
            return PlaybackState.PLAYING
        if self._started:
            return PlaybackState.PAUSED
        return PlaybackState.STOPPED

    # --- transport -------------------------------------------------------

    def set_tracks(self, tracks: Sequence[Track]) -> None:
        """Replace the track list, rewind to the first track and stop."""
        with self._lock:
            self._tracks = list(tracks)
            self._index = 0
            self._is_playing = False
            logger.info("Engine loaded %d tracks", len(self._tracks))
            self._change_track()

    def play(self) -> None:
        with self._lock:
            track = self.current_track
            if track is None or not track.has_preview or self._source is None:
                return
            self._start_output()
            self._publish()

    def pause(self) -> None:
        with self._lock:
            self._pause_output()
            self._is_playing = False
            self._publish()

    def toggle_play_pause(self) -> None:
        with self._lock:
            if self._is_playing:
                self.pause()
            else:
                self.play()

    def next(self) -> None:
        with self._lock:
            if not self._tracks:
                return
            if self._index >= len(self._tracks) - 1:
                # End of playlist: stop, keep the last track selected
                self._pause_output()
                self._is_playing = False
                self._publish()
                return
            self._index += 1
            self._change_track()

    def previous(self) -> None:
        with self._lock:
            if not self._tracks:
                return
            target = max(0, self._index - 1)
            if target == self._index:
                return
            self._index = target
            self._change_track()

    def select_track(self, index: int) -> None:
        """Jump to ``index`` and start playing it; out-of-range indexes are ignored."""
        with self._lock:
            if not 0 <= index < len(self._tracks):
                return
            self._index = index
            self._is_playing = True
            self._change_track()

    def seek(self, seconds: float) -> None:
        with self._lock:
            if self._source is None:
                return
            target = min(max(0.0, float(seconds)), float(self._settings.duration))
            try:
                self._device.seek(target)
            except Exception as exc:
                logger.warning("Seek to %.2fs failed: %s", target, exc)
                self._error = PLAYBACK_FAILED_MESSAGE
                self._is_playing = False
                self._publish()

    def set_duration_cap(self, seconds: int) -> None:
        with self._lock:
            self._settings.duration = seconds
            self._progress = self._compute_progress(self._current_time)
            self._publish()

    def close(self) -> None:
        """Detach from the device and release it; the engine is unusable afterwards."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._cancel_pending_skip()
            self._is_playing = False
            self._source = None
            self._device.on_progress(None)
            self._device.on_ended(None)
            self._device.on_error(None)
            try:
                self._device.pause()
                self._device.unload()
            except Exception as exc:
                logger.debug("Ignoring device error during teardown: %s", exc)
            self._device.close()

    def __enter__(self) -> "PlaybackEngine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- track-change protocol -------------------------------------------

    def _change_track(self) -> None:
        self._cancel_pending_skip()
        self._generation += 1
        self._error = None
        self._current_time = 0.0
        self._progress = 0.0
        self._started = False

        track = self.current_track
        if track is None:
            self._unbind()
            self._publish()
            return

        if not track.has_preview:
            logger.info("Track %s has no preview; skipping", track.id or track.name)
            self._unbind()
            self._error = NO_PREVIEW_MESSAGE
            self._schedule_skip()
            self._publish()
            return

        self._source = track.preview_url
        try:
            self._device.load(track.preview_url)
        except Exception as exc:
            logger.warning("Could not load preview for %s: %s", track.id or track.name, exc)
            self._source = None
            self._error = LOAD_FAILED_MESSAGE
            self._schedule_skip()
            self._publish()
            return

        if self._is_playing:
            self._start_output()
        self._publish()

    def _start_output(self) -> bool:
        try:
            self._device.start()
        except Exception as exc:
            logger.warning("Playback failed: %s", exc)
            self._error = PLAYBACK_FAILED_MESSAGE
            self._is_playing = False
            return False
        self._started = True
        self._is_playing = True
        return True

    def _pause_output(self) -> None:
        if self._source is None:
            return
        try:
            self._device.pause()
        except Exception as exc:
            logger.warning("Pausing output failed: %s", exc)

    def _unbind(self) -> None:
        self._source = None
        try:
            self._device.unload()
        except Exception as exc:
            logger.debug("Ignoring device error while unloading: %s", exc)

    def _schedule_skip(self) -> None:
        self._cancel_pending_skip()
        generation = self._generation
        self._pending_skip = self._scheduler.call_later(
            self._skip_delay, lambda: self._run_scheduled_skip(generation)
        )

    def _cancel_pending_skip(self) -> None:
        if self._pending_skip is not None:
            self._pending_skip.cancel()
            self._pending_skip = None

    def _run_scheduled_skip(self, generation: int) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                logger.debug("Dropping stale auto-skip for generation %s", generation)
                return
            self._pending_skip = None
            self.next()

    # --- device signals --------------------------------------------------

    def _compute_progress(self, current_time: float) -> float:
        return min(100.0, 100.0 * current_time / self._settings.duration)

    def _handle_progress(self, position: float) -> None:
        with self._lock:
            if self._source is None:
                return
            self._current_time = max(0.0, float(position))
            self._progress = self._compute_progress(self._current_time)
            if self._current_time >= self._settings.duration:
                self.next()
                return
            self._publish()

    def _handle_ended(self) -> None:
        with self._lock:
            if self._source is None:
                return
            self.next()

    def _handle_error(self) -> None:
        with self._lock:
            if self._source is None:
                return
            logger.warning("Audio failed to load for track index %d", self._index,
                           extra={"track_index": self._index})
            self._error = LOAD_FAILED_MESSAGE
            self._schedule_skip()
            self._publish()

    def _publish(self) -> None:
        event = {"type": "playback"}
        event.update(self.session.as_dict())
        self._publisher.publish(event)


__all__ = [
    "PlaybackEngine",
    "PlaybackSession",
    "PlaybackState",
    "NO_PREVIEW_MESSAGE",
    "LOAD_FAILED_MESSAGE",
    "PLAYBACK_FAILED_MESSAGE",
]
