"""Validation of outgoing chat messages."""

from chatwidget.config import MAX_MESSAGE_LENGTH
from chatwidget.messages import (
    EMPTY_MESSAGE_ERROR,
    NOT_TEXT_ERROR,
    TOO_LONG_ERROR,
)


def validate_message(text: object, *, on_submit: bool = True) -> str | None:
    """Return a user-facing error for ``text``, or None if it can be sent.

    The empty check only runs on submit so that clearing the field while
    typing does not flag an error.
    """
    if not isinstance(text, str):
        return NOT_TEXT_ERROR
    if len(text) > MAX_MESSAGE_LENGTH:
        return TOO_LONG_ERROR
    if on_submit and not text.strip():
        return EMPTY_MESSAGE_ERROR
    return None
