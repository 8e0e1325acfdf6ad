#!/usr/bin/env python
"""
Player event primitives shared by the playback engine, the playlist loader
and whatever renders them.

Components publish plain dict events through a ``ProgressPublisher`` so they
depend on the interface rather than on the broker. ``ProgressBroker`` fans
events out to any number of subscribers as server-sent-event lines.
"""

from __future__ import annotations

import json
import threading
import time
from queue import Queue, Empty
from typing import Callable, Dict, Iterator


class ProgressBroker:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._subscribers: Dict[int, Queue] = {}
        self._next_id = 1

    def publish(self, event: dict) -> None:
        with self._lock:
            for q in self._subscribers.values():
                q.put(event)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, heartbeat_seconds: int = 15) -> Iterator[str]:
        """Return an iterator yielding SSE-formatted lines."""
        with self._lock:
            sid = self._next_id
            self._next_id += 1
            q: Queue = Queue()
            self._subscribers[sid] = q

        last_beat = time.time()
        try:
            while True:
                try:
                    ev = q.get(timeout=1.0)
                    payload = json.dumps(ev, ensure_ascii=False, default=str)
                    event_type = ev.get("type") if isinstance(ev, dict) else None
                    prefix = f"event: {event_type}\n" if event_type else ""
                    yield f"{prefix}data: {payload}\n\n"
                except Empty:
                    now = time.time()
                    if now - last_beat >= heartbeat_seconds:
                        last_beat = now
                        yield "event: heartbeat\n" + f"data: {{\"ts\": {int(now)} }}\n\n"
        finally:
            with self._lock:
                self._subscribers.pop(sid, None)


class ProgressPublisher:
    def publish(self, event: dict) -> None:  # pragma: no cover - interface
        raise NotImplementedError


class NullPublisher(ProgressPublisher):
    def publish(self, event: dict) -> None:
        return None


class BrokerPublisher(ProgressPublisher):
    def __init__(self, broker: ProgressBroker) -> None:
        self._broker = broker

    def publish(self, event: dict) -> None:
        self._broker.publish(event)


class CallbackPublisher(ProgressPublisher):
    """Forward events to a plain callable (handy for UI toolkits and tests)."""

    def __init__(self, callback: Callable[[dict], None]) -> None:
        self._callback = callback

    def publish(self, event: dict) -> None:
        self._callback(event)


__all__ = [
    "ProgressBroker",
    "ProgressPublisher",
    "NullPublisher",
    "BrokerPublisher",
    "CallbackPublisher",
]
