"""Optional voice dictation for the chat input field."""

import logging
from collections.abc import Callable
from typing import Protocol

from chatwidget.config import DICTATION_LOCALE
from chatwidget.messages import (
    DICTATION_FAILED_ERROR,
    MIC_DENIED_ERROR,
    NO_SPEECH_ERROR,
)

logger = logging.getLogger(__name__)

_PERMISSION_ERRORS = {"not-allowed", "service-not-allowed"}


class SpeechRecognizer(Protocol):
    """A host speech-recognition capability.

    ``start`` is always called with ``continuous=False``: one utterance per
    pass. The recognizer reports transcripts through ``on_result``, failures
    through ``on_error`` with an error code, and always finishes with
    ``on_end``. Only the first result of a pass is used.
    """

    def start(
        self,
        locale: str,
        continuous: bool,
        on_result: Callable[[str], None],
        on_error: Callable[[str], None],
        on_end: Callable[[], None],
    ) -> None: ...

    def stop(self) -> None: ...


def get_dictation_error_message(code: str) -> str:
    """Map a recognizer error code to a user-visible message."""
    if code in _PERMISSION_ERRORS:
        return MIC_DENIED_ERROR
    if code == "no-speech":
        return NO_SPEECH_ERROR
    return DICTATION_FAILED_ERROR


class DictationController:
    """Microphone toggle state for a single input field.

    When no recognizer is available the capability is simply absent:
    ``supported`` is False and the frontend hides the toggle.
    """

    def __init__(
        self,
        recognizer: SpeechRecognizer | None,
        on_transcript: Callable[[str], None],
        on_error: Callable[[str | None], None],
        on_change: Callable[[bool], None],
        locale: str = DICTATION_LOCALE,
    ) -> None:
        self._recognizer = recognizer
        self._on_transcript = on_transcript
        self._on_error = on_error
        self._on_change = on_change
        self.locale = locale
        self.listening = False
        self._got_result = False

    @property
    def supported(self) -> bool:
        return self._recognizer is not None

    def toggle(self) -> None:
        if self.listening:
            self.stop()
        else:
            self.start()

    def start(self) -> None:
        if self._recognizer is None:
            raise RuntimeError("Speech recognition is not supported here")
        if self.listening:
            return
        self._on_error(None)
        self._got_result = False
        self._set_listening(True)
        self._recognizer.start(
            self.locale,
            continuous=False,
            on_result=self._handle_result,
            on_error=self._handle_error,
            on_end=self._handle_end,
        )

    def stop(self) -> None:
        if self._recognizer is None or not self.listening:
            return
        self._recognizer.stop()
        self._set_listening(False)

    def _handle_result(self, transcript: str) -> None:
        # Only the first result of a pass replaces the field
        if self._got_result:
            return
        self._got_result = True
        self._on_transcript(transcript)

    def _handle_error(self, code: str) -> None:
        logger.warning("Speech recognition error: %s", code)
        self._on_error(get_dictation_error_message(code))
        self._set_listening(False)

    def _handle_end(self) -> None:
        self._set_listening(False)

    def _set_listening(self, listening: bool) -> None:
        if self.listening == listening:
            return
        self.listening = listening
        self._on_change(listening)
