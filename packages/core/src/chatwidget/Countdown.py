"""One-second countdown that keeps input disabled after a rate limit."""

from collections.abc import Callable

from chatwidget.scheduling import Scheduler, TimerHandle

TICK_SECONDS = 1.0


class RateLimitCountdown:
    """Count ``remaining`` down to zero, one tick per second.

    The countdown runs independently of any typing animation; both share
    the same single-threaded event loop.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_tick: Callable[[int], None],
    ) -> None:
        self.remaining = 0
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._handle: TimerHandle | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def start(self, seconds: int) -> None:
        """(Re)start the countdown from ``seconds``."""
        self.cancel()
        self.remaining = max(0, seconds)
        if self.remaining > 0:
            self._handle = self._scheduler.call_later(TICK_SECONDS, self._tick)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _tick(self) -> None:
        self._handle = None
        self.remaining = max(0, self.remaining - 1)
        if self.remaining > 0:
            self._handle = self._scheduler.call_later(TICK_SECONDS, self._tick)
        self._on_tick(self.remaining)
