"""Shared fixtures: a virtual-clock scheduler and mock chat endpoints."""

import heapq
import itertools
import json

import httpx
import pytest

from chatwidget.ChatClient import ChatClient
from chatwidget.ChatWidget import ChatWidget

API_URL = "http://chat.test/api/chat"
TYPING_DELAY = 0.01


class FakeHandle:
    def __init__(self, when: float, callback, args) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Deterministic stand-in for ``loop.call_later``.

    Nothing runs until the test advances the virtual clock.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list = []
        self._seq = itertools.count()

    def call_later(self, delay, callback, *args) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = when
            handle.callback(*handle.args)
        self.now = target

    def run_all(self, limit: int = 100_000) -> None:
        for _ in range(limit):
            if not self.pending:
                return
            self.advance(self._queue[0][0] - self.now)
        raise AssertionError("Scheduler did not settle")


class RecordingBackend:
    """Mock chat endpoint that replays queued responses and records requests."""

    def __init__(self) -> None:
        self.requests: list[dict] = []
        self.responses: list = []

    def reply(self, text: str) -> None:
        self.responses.append(
            httpx.Response(200, json={"choices": [{"message": {"content": text}}]})
        )

    def status(self, code: int, body: dict | None = None) -> None:
        self.responses.append(httpx.Response(code, json=body or {}))

    def fail(self) -> None:
        self.responses.append(httpx.ConnectError("connection refused"))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def chat_client(backend) -> ChatClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    return ChatClient(API_URL, http_client=http_client)


@pytest.fixture
def widget(chat_client, scheduler) -> ChatWidget:
    """A mounted widget whose greeting has finished typing."""
    w = ChatWidget(chat_client, scheduler=scheduler, typing_delay=lambda: TYPING_DELAY)
    w.mount()
    scheduler.run_all()
    return w
