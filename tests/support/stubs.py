"""Shared test doubles: HTTP session, executor, scheduler and clock."""

from collections import deque
from typing import Any, Callable, List, Optional


class FakeResponse:
    """Just enough of requests.Response for the catalog and player clients."""

    def __init__(self, status_code: int = 200, json_data: Any = None, reason: str = "OK"):
        self.status_code = status_code
        self._json = json_data
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


class FakeSession:
    """Records calls and replays queued responses (or raises queued exceptions)."""

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = deque(responses or [])
        self.calls: List[dict] = []

    def queue(self, *responses) -> None:
        self.responses.extend(responses)

    def _next(self, method: str, url: str, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        item = self.responses.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)

    def calls_for(self, method: str) -> List[dict]:
        return [c for c in self.calls if c["method"] == method]


class ManualExecutor:
    """Executor that only runs submitted work when the test says so."""

    def __init__(self):
        self.pending: List[tuple] = []

    def submit(self, fn: Callable, *args, **kwargs):
        self.pending.append((fn, args, kwargs))

    def run(self, index: int = 0) -> None:
        fn, args, kwargs = self.pending.pop(index)
        fn(*args, **kwargs)

    def run_all(self) -> None:
        while self.pending:
            self.run(0)

    def shutdown(self, wait: bool = True) -> None:
        self.pending.clear()


class _ManualCall:
    def __init__(self, scheduler: "ManualScheduler", due: float, callback: Callable[[], None]):
        self._scheduler = scheduler
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler; ``advance`` fires calls whose delay has elapsed."""

    def __init__(self):
        self.now = 0.0
        self.calls: List[_ManualCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]):
        call = _ManualCall(self, self.now + delay, callback)
        self.calls.append(call)
        return call

    @property
    def active(self) -> List[_ManualCall]:
        return [c for c in self.calls if not c.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        while True:
            due = [c for c in self.calls if not c.cancelled and c.due <= self.now]
            if not due:
                return
            call = min(due, key=lambda c: c.due)
            self.calls.remove(call)
            call.callback()


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, start_ms: int = 1_000_000):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


def token_response(token: str = "tok-1", expires_in: int = 3600) -> FakeResponse:
    return FakeResponse(200, {"access_token": token, "token_type": "Bearer", "expires_in": expires_in})
