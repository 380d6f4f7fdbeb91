"""Chat widget state machine: transcript, typing effect, edit and regenerate."""

import asyncio
import logging
from collections.abc import Callable

from chatwidget.ChatClient import (
    ChatClient,
    ChatNetworkError,
    RateLimitedError,
    ServerError,
)
from chatwidget.config import RATE_LIMIT_SECONDS
from chatwidget.Countdown import RateLimitCountdown
from chatwidget.Dictation import DictationController, SpeechRecognizer
from chatwidget.messages import (
    GREETING,
    INPUT_PLACEHOLDER,
    NETWORK_ERROR_MESSAGE,
    RATE_LIMIT_MESSAGE,
    TYPING_PLACEHOLDER,
    get_server_error_message,
    get_wait_placeholder,
)
from chatwidget.models import Transcript, ViewState
from chatwidget.scheduling import Scheduler, get_default_scheduler
from chatwidget.TypingAnimation import TypingAnimation, random_typing_delay
from chatwidget.validation import validate_message

logger = logging.getLogger(__name__)


class ChatWidget:
    """Single-session chat widget backed by a remote completion endpoint.

    The widget is framework-neutral: a frontend renders it from
    ``transcript`` and ``state`` whenever ``on_change`` fires, and drives it
    through :meth:`set_input`, :meth:`submit` and the edit methods. All work
    happens on one event loop; the only suspension points are the network
    call and the typing/countdown timers.
    """

    def __init__(
        self,
        client: ChatClient,
        scheduler: Scheduler | None = None,
        on_change: Callable[["ChatWidget"], None] | None = None,
        recognizer: SpeechRecognizer | None = None,
        typing_delay: Callable[[], float] = random_typing_delay,
    ) -> None:
        """Initialize an empty widget.

        Args:
            client: Client for the chat endpoint (backend or proxy).
            scheduler: Timer source; defaults to the running event loop.
            on_change: Render callback invoked after every state change.
            recognizer: Optional speech recognizer enabling voice dictation.
            typing_delay: Returns the per-character typing interval.
        """
        self._client = client
        self._scheduler = scheduler
        self._on_change = on_change
        self._typing_delay = typing_delay

        self.transcript = Transcript()
        self.state = ViewState()

        self._typing: TypingAnimation | None = None
        self._countdown: RateLimitCountdown | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._closed = False

        self.dictation = DictationController(
            recognizer,
            on_transcript=self.set_input,
            on_error=self._set_dictation_error,
            on_change=self._set_listening,
        )

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def typing(self) -> bool:
        return self.state.typing_index is not None

    @property
    def input_disabled(self) -> bool:
        """True while loading, rate-limited or typing."""
        return (
            self.state.loading
            or self.state.rate_limit_seconds_remaining > 0
            or self.typing
        )

    @property
    def can_send(self) -> bool:
        return not self.input_disabled and bool(self.state.pending_input.strip())

    @property
    def placeholder(self) -> str:
        if self.state.rate_limit_seconds_remaining > 0:
            return get_wait_placeholder(self.state.rate_limit_seconds_remaining)
        if self.typing:
            return TYPING_PLACEHOLDER
        return INPUT_PLACEHOLDER

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Play the greeting if the transcript is still empty.

        The greeting only goes through the typing path; it is never sent to
        the backend on its own.
        """
        if self._closed or len(self.transcript) or self.typing:
            return
        self._start_typing(GREETING, 0, self._append_bot)

    def close(self) -> None:
        """Tear down: cancel every pending timer and ignore late responses."""
        if self._closed:
            return
        self._closed = True
        if self._typing is not None:
            self._typing.cancel()
            self._typing = None
        if self._countdown is not None:
            self._countdown.cancel()
        self.dictation.stop()
        self._idle.set()

    async def wait_idle(self) -> None:
        """Wait until no typing animation is in progress."""
        await self._idle.wait()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        """Replace the input field and re-run keystroke validation."""
        self.state.pending_input = text
        self.state.input_error = validate_message(text, on_submit=False)
        self._notify()

    def toggle_listening(self) -> None:
        """Start or stop a dictation pass.

        Raises:
            RuntimeError: If no speech recognizer is available.
        """
        self.dictation.toggle()

    async def submit(self) -> bool:
        """Send the pending input.

        The user message is appended before the network call, so the
        transcript shows it immediately.

        Returns:
            True if the message was sent, False if input was disabled or
            failed validation.
        """
        if self._closed or self.input_disabled:
            return False

        text = self.state.pending_input
        error = validate_message(text, on_submit=True)
        if error is not None:
            self.state.input_error = error
            self._notify()
            return False

        self.state.input_error = None
        self.transcript.append("user", text)
        self.state.pending_input = ""
        self._notify()

        await self._request_reply()
        return True

    # ------------------------------------------------------------------
    # Edit / regenerate
    # ------------------------------------------------------------------

    def begin_edit(self, index: int) -> bool:
        """Open the inline editor on the user message at ``index``.

        Returns:
            False if editing is currently unavailable (input disabled).

        Raises:
            ValueError: If ``index`` does not point at a user message.
        """
        if not 0 <= index < len(self.transcript):
            raise ValueError(f"No message at index {index}")
        if self.transcript[index].sender != "user":
            raise ValueError("Only user messages can be edited")
        if self._closed or self.input_disabled:
            return False

        self.state.edit_index = index
        self.state.edit_draft = self.transcript[index].text
        self._notify()
        return True

    def set_edit_draft(self, text: str) -> None:
        if self.state.edit_index is None:
            raise RuntimeError("No message is being edited")
        self.state.edit_draft = text
        self._notify()

    def cancel_edit(self) -> None:
        self.state.edit_index = None
        self.state.edit_draft = ""
        self._notify()

    async def save_edit(self) -> bool:
        """Commit the edit draft, truncating and regenerating if it changed.

        An unchanged draft just closes the editor. A changed draft discards
        every later message for good, marks the message as edited and, when
        it is now the last user message, requests a fresh reply.

        Returns:
            True if the transcript changed.
        """
        index = self.state.edit_index
        if index is None or self._closed or self.input_disabled:
            return False

        draft = self.state.edit_draft
        error = validate_message(draft, on_submit=True)
        if error is not None:
            self.state.input_error = error
            self._notify()
            return False

        message = self.transcript[index]
        self.state.edit_index = None
        self.state.edit_draft = ""
        self.state.input_error = None

        if draft == message.text:
            self._notify()
            return False

        self.transcript.truncate_after(index)
        message.text = draft
        message.edited = True
        self._notify()

        if self.transcript.last is message and message.sender == "user":
            await self._request_reply()
        return True

    # ------------------------------------------------------------------
    # Copy
    # ------------------------------------------------------------------

    def can_copy(self, index: int) -> bool:
        """Whether the message at ``index`` offers a copy action.

        Every assistant reply does, except the greeting in first position.
        """
        if not 0 <= index < len(self.transcript):
            return False
        message = self.transcript[index]
        if message.sender != "bot":
            return False
        return not (index == 0 and message.text == GREETING)

    def copy_text(self, index: int) -> str:
        """Return the raw text of the assistant reply at ``index``.

        Raises:
            ValueError: If the message at ``index`` has no copy action.
        """
        if not 0 <= index < len(self.transcript):
            raise ValueError(f"No message at index {index}")
        if not self.can_copy(index):
            raise ValueError("Only assistant replies can be copied")
        return self.transcript[index].text

    # ------------------------------------------------------------------
    # Request flow
    # ------------------------------------------------------------------

    async def _request_reply(self) -> None:
        """Send the whole transcript and route the outcome into the transcript."""
        self.state.loading = True
        self._notify()
        index = len(self.transcript)

        try:
            reply = await self._client.complete(self.transcript.to_api_messages())
        except RateLimitedError:
            if self._closed:
                return
            logger.info("Chat endpoint is rate limiting, cooling down")
            self._start_typing(RATE_LIMIT_MESSAGE, index, self._append_bot)
            self._start_countdown(RATE_LIMIT_SECONDS)
        except ServerError as e:
            if self._closed:
                return
            logger.warning("Chat endpoint error: %s", e)
            self.transcript.append("bot", get_server_error_message(e.status_code))
        except ChatNetworkError as e:
            if self._closed:
                return
            logger.warning("Chat request failed: %s", e)
            self.transcript.append("bot", NETWORK_ERROR_MESSAGE)
        else:
            if self._closed:
                return
            self._start_typing(reply, index, self._commit_reply)
        finally:
            self.state.loading = False
            if not self._closed:
                self._notify()

    def _append_bot(self, text: str) -> None:
        self.transcript.append("bot", text)

    def _commit_reply(self, text: str) -> None:
        # A completion that fires twice must not produce two bubbles
        last = self.transcript.last
        if last is not None and last.sender == "bot" and last.text == text:
            return
        self.transcript.append("bot", text)

    # ------------------------------------------------------------------
    # Typing effect and countdown
    # ------------------------------------------------------------------

    def _get_scheduler(self) -> Scheduler:
        if self._scheduler is None:
            self._scheduler = get_default_scheduler()
        return self._scheduler

    def _start_typing(
        self,
        text: str,
        index: int,
        commit: Callable[[str], None],
    ) -> None:
        if self._typing is not None and self._typing.active:
            raise RuntimeError("A typing animation is already in progress")

        self.state.typing_index = index
        self.state.typing_text = ""
        self._idle.clear()

        def _complete(full_text: str) -> None:
            commit(full_text)
            self._typing = None
            self.state.typing_index = None
            self.state.typing_text = ""
            self._idle.set()
            self._notify()

        self._typing = TypingAnimation(
            text,
            index,
            self._get_scheduler(),
            on_update=self._update_typing,
            on_complete=_complete,
            delay=self._typing_delay,
        )
        self._typing.start()

    def _update_typing(self, partial: str) -> None:
        self.state.typing_text = partial
        self._notify()

    def _start_countdown(self, seconds: int) -> None:
        if self._countdown is None:
            self._countdown = RateLimitCountdown(
                self._get_scheduler(), on_tick=self._set_rate_limit
            )
        self._countdown.start(seconds)
        self._set_rate_limit(self._countdown.remaining)

    def _set_rate_limit(self, remaining: int) -> None:
        self.state.rate_limit_seconds_remaining = remaining
        self._notify()

    # ------------------------------------------------------------------
    # Dictation callbacks
    # ------------------------------------------------------------------

    def _set_dictation_error(self, message: str | None) -> None:
        self.state.dictation_error = message
        self._notify()

    def _set_listening(self, listening: bool) -> None:
        self.state.listening = listening
        self._notify()

    def _notify(self) -> None:
        if self._on_change is not None and not self._closed:
            self._on_change(self)
