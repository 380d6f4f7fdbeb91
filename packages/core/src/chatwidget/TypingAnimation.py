"""Character-by-character typing effect for bot replies."""

import random
from collections.abc import Callable

from chatwidget.config import TYPING_MAX_DELAY, TYPING_MIN_DELAY
from chatwidget.scheduling import Scheduler, TimerHandle


def random_typing_delay() -> float:
    """Return a reveal interval drawn uniformly from 12-30 ms."""
    return random.uniform(TYPING_MIN_DELAY, TYPING_MAX_DELAY)


class TypingAnimation:
    """Reveal ``text`` one character per timer tick, then commit it.

    The animation is a plain state object (target text, revealed length and
    the pending timer handle) so it can be cancelled deterministically.
    Each tick schedules the next one only after publishing the current
    prefix, so ticks never overlap.
    """

    def __init__(
        self,
        text: str,
        index: int,
        scheduler: Scheduler,
        on_update: Callable[[str], None],
        on_complete: Callable[[str], None],
        delay: Callable[[], float] = random_typing_delay,
    ) -> None:
        """Prepare an animation; nothing is scheduled until :meth:`start`.

        Args:
            text: The full text to reveal.
            index: Transcript index the committed message will occupy.
            scheduler: Source of timers (normally the running event loop).
            on_update: Called with the revealed prefix after every tick.
            on_complete: Called once with the full text when done.
            delay: Returns the interval before the next character, in seconds.
        """
        self.text = text
        self.index = index
        self.revealed = 0
        self._scheduler = scheduler
        self._on_update = on_update
        self._on_complete = on_complete
        self._delay = delay
        self._handle: TimerHandle | None = None
        self._started = False
        self._finished = False

    @property
    def active(self) -> bool:
        return self._started and not self._finished

    def start(self) -> None:
        if self._started:
            raise RuntimeError("Typing animation already started")
        self._started = True
        self._step()

    def cancel(self) -> None:
        """Stop the animation without committing the text."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._started:
            self._finished = True

    def _step(self) -> None:
        self._handle = None
        if self._finished:
            return

        self._on_update(self.text[: self.revealed])

        if self.revealed < len(self.text):
            self.revealed += 1
            self._handle = self._scheduler.call_later(self._delay(), self._step)
            return

        self._finished = True
        self._on_complete(self.text)
