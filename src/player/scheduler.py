"""Cancelable delayed calls used for the engine's debounced auto-skip."""

from __future__ import annotations

import threading
from typing import Callable


class ScheduledCall:
    def cancel(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class Scheduler:
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:  # pragma: no cover - interface
        raise NotImplementedError


class _TimerCall(ScheduledCall):
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler(Scheduler):
    """Runs callbacks on daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        timer = threading.Timer(max(0.0, delay), callback)
        timer.daemon = True
        timer.start()
        return _TimerCall(timer)


__all__ = ["ScheduledCall", "Scheduler", "ThreadingScheduler"]
