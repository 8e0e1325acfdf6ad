#!/usr/bin/env python
"""
Audio output adapter used by the playback engine.

The engine never talks to an audio backend directly. It binds one source at
a time to an ``AudioDevice`` and reacts to the three signals the device
pushes back: position updates, end of media and load/decode errors.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from .errors import PlaybackError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
SignalCallback = Callable[[], None]


class AudioDevice:
    """Interface for a single-source audio output."""

    def load(self, source: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def unload(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def start(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def pause(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def seek(self, position: float) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def current_position(self) -> float:  # pragma: no cover - interface
        raise NotImplementedError

    def on_progress(self, callback: Optional[ProgressCallback]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_ended(self, callback: Optional[SignalCallback]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def on_error(self, callback: Optional[SignalCallback]) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    def close(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class InMemoryAudioDevice(AudioDevice):
    """Headless device that tracks source and position without producing sound.

    The host drives it by calling ``emit_progress``/``emit_ended``/``emit_error``,
    which is how tests and non-audio frontends simulate a media element.
    Sources listed in ``failing_sources`` make ``start()`` raise ``PlaybackError``.
    """

    def __init__(self, failing_sources: Optional[List[str]] = None) -> None:
        self._lock = threading.RLock()
        self.source: Optional[str] = None
        self.playing = False
        self.position = 0.0
        self.closed = False
        self.failing_sources = set(failing_sources or [])
        self.history: List[tuple] = []
        self._progress_cb: Optional[ProgressCallback] = None
        self._ended_cb: Optional[SignalCallback] = None
        self._error_cb: Optional[SignalCallback] = None

    def load(self, source: str) -> None:
        with self._lock:
            self.source = source
            self.position = 0.0
            self.history.append(("load", source))

    def unload(self) -> None:
        with self._lock:
            self.playing = False
            self.source = None
            self.position = 0.0
            self.history.append(("unload",))

    def start(self) -> None:
        with self._lock:
            if self.source is None:
                raise PlaybackError("No source loaded")
            if self.source in self.failing_sources:
                raise PlaybackError(f"Cannot play {self.source}")
            self.playing = True
            self.history.append(("start", self.source))

    def pause(self) -> None:
        with self._lock:
            self.playing = False
            self.history.append(("pause",))

    def seek(self, position: float) -> None:
        with self._lock:
            if self.source is None:
                return
            self.position = position
            self.history.append(("seek", position))
        # Media elements report the new position after a seek
        self.emit_progress(position)

    def current_position(self) -> float:
        with self._lock:
            return self.position

    def on_progress(self, callback: Optional[ProgressCallback]) -> None:
        self._progress_cb = callback

    def on_ended(self, callback: Optional[SignalCallback]) -> None:
        self._ended_cb = callback

    def on_error(self, callback: Optional[SignalCallback]) -> None:
        self._error_cb = callback

    def close(self) -> None:
        with self._lock:
            self.playing = False
            self.source = None
            self.closed = True
        self._progress_cb = None
        self._ended_cb = None
        self._error_cb = None

    # --- signals pushed by the host -------------------------------------

    def emit_progress(self, position: float) -> None:
        with self._lock:
            self.position = position
        callback = self._progress_cb
        if callback:
            callback(position)

    def emit_ended(self) -> None:
        callback = self._ended_cb
        if callback:
            callback()

    def emit_error(self) -> None:
        logger.debug("Simulated load error for %s", self.source)
        callback = self._error_cb
        if callback:
            callback()


__all__ = ["AudioDevice", "InMemoryAudioDevice", "ProgressCallback", "SignalCallback"]
