"""Client-side player: playlist loading, playback engine and view-models."""

from .api_client import PlaylistApiClient
from .device import AudioDevice, InMemoryAudioDevice
from .engine import PlaybackEngine, PlaybackSession, PlaybackState
from .errors import PlaybackError, PlaylistLoadError
from .loader import LoaderState, LoaderStatus, PlaylistLoader
from .playlist_player import PlaylistPlayer
from .scheduler import Scheduler, ThreadingScheduler
from .settings import DURATION_OPTIONS, PlaybackSettings

__all__ = [
    "PlaylistApiClient",
    "AudioDevice",
    "InMemoryAudioDevice",
    "PlaybackEngine",
    "PlaybackSession",
    "PlaybackState",
    "PlaybackError",
    "PlaylistLoadError",
    "LoaderState",
    "LoaderStatus",
    "PlaylistLoader",
    "PlaylistPlayer",
    "Scheduler",
    "ThreadingScheduler",
    "DURATION_OPTIONS",
    "PlaybackSettings",
]
