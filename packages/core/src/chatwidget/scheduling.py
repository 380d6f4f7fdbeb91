"""Timer scheduling used by the typing effect and the rate-limit countdown.

Anything with an asyncio-style ``call_later(delay, callback)`` returning a
cancellable handle works, so the running event loop is the default scheduler.
"""

import asyncio
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(
        self, delay: float, callback: Callable[..., object], *args: object
    ) -> TimerHandle: ...


def get_default_scheduler() -> Scheduler:
    """Return the running event loop.

    Raises:
        RuntimeError: If called outside a running event loop.
    """
    return asyncio.get_running_loop()
