"""Data models for the chat transcript and widget view state."""

import itertools
from collections.abc import Iterator
from dataclasses import dataclass


def sanitize_content(text: str) -> str:
    """Escape angle brackets so message text is never sent as markup."""
    return text.replace("<", "&lt;").replace(">", "&gt;")


@dataclass
class Message:
    """A single entry in the transcript.

    Attributes:
        sender: Either "user" or "bot".
        text: The message text. Only a user message's text may change after
            it is rendered, and only through an edit.
        animate: Whether the frontend should play the entry animation.
        edited: Set once a user message has been edited.
        id: Stable render key, increasing in insertion order.
    """

    sender: str
    text: str
    animate: bool = True
    edited: bool = False
    id: int = 0

    def to_api_dict(self) -> dict:
        """Serialize this message into the role/content shape of the chat endpoint.

        Returns:
            A dictionary suitable for inclusion in the ``messages`` list of a
            chat request.
        """
        return {
            "role": "user" if self.sender == "user" else "assistant",
            "content": sanitize_content(self.text),
        }


class Transcript:
    """An ordered sequence of messages.

    Turn alternation is not enforced; two bot notices in a row are fine.
    Messages are only ever removed by :meth:`truncate_after`.
    """

    def __init__(self) -> None:
        self.messages: list[Message] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self.messages)

    def __getitem__(self, index: int) -> Message:
        return self.messages[index]

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    @property
    def last(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def append(self, sender: str, text: str, animate: bool = True) -> Message:
        """Append a new message and return it."""
        if sender not in ("user", "bot"):
            raise ValueError(f"Unknown sender: '{sender}'")
        message = Message(
            sender=sender, text=text, animate=animate, id=next(self._ids)
        )
        self.messages.append(message)
        return message

    def truncate_after(self, index: int) -> None:
        """Discard every message after ``index``."""
        del self.messages[index + 1:]

    def to_api_messages(self) -> list[dict]:
        return [m.to_api_dict() for m in self.messages]


@dataclass
class ViewState:
    """Transient UI state of the chat widget.

    ``typing_index`` is set while a typing animation is running, and
    ``rate_limit_seconds_remaining`` is positive during the cool-down.
    """

    typing_index: int | None = None
    typing_text: str = ""
    edit_index: int | None = None
    edit_draft: str = ""
    pending_input: str = ""
    input_error: str | None = None
    loading: bool = False
    rate_limit_seconds_remaining: int = 0
    listening: bool = False
    dictation_error: str | None = None
