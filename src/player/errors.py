class PlaybackError(Exception):
    """Raised by audio devices; the playback engine absorbs it into session state."""
    pass


class PlaylistLoadError(Exception):
    """Raised when the playlist proxy cannot return a playlist."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


__all__ = ["PlaybackError", "PlaylistLoadError"]
