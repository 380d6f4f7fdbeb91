import pytest

from chatwidget.messages import EMPTY_MESSAGE_ERROR, NOT_TEXT_ERROR, TOO_LONG_ERROR
from chatwidget.models import Transcript, sanitize_content
from chatwidget.validation import validate_message


def test_transcript_ids_increase():
    transcript = Transcript()
    first = transcript.append("bot", "hello")
    second = transcript.append("user", "hi")

    assert second.id > first.id
    assert transcript.last is second


def test_truncate_after_discards_later_messages():
    transcript = Transcript()
    for i in range(5):
        transcript.append("user" if i % 2 else "bot", str(i))

    transcript.truncate_after(1)

    assert [m.text for m in transcript] == ["0", "1"]


def test_unknown_sender_is_rejected():
    with pytest.raises(ValueError):
        Transcript().append("system", "nope")


def test_api_messages_map_roles_and_escape_brackets():
    transcript = Transcript()
    transcript.append("bot", "a > b")
    transcript.append("user", "<script>")

    assert transcript.to_api_messages() == [
        {"role": "assistant", "content": "a &gt; b"},
        {"role": "user", "content": "&lt;script&gt;"},
    ]


def test_sanitize_leaves_other_characters():
    assert sanitize_content("fish & chips \"quoted\"") == "fish & chips \"quoted\""


@pytest.mark.parametrize(
    "text, on_submit, expected",
    [
        ("hello", True, None),
        ("x" * 1000, True, None),
        ("x" * 1001, True, TOO_LONG_ERROR),
        ("x" * 1001, False, TOO_LONG_ERROR),
        ("", True, EMPTY_MESSAGE_ERROR),
        ("   ", True, EMPTY_MESSAGE_ERROR),
        ("", False, None),
        (None, True, NOT_TEXT_ERROR),
        (42, False, NOT_TEXT_ERROR),
    ],
)
def test_validate_message(text, on_submit, expected):
    assert validate_message(text, on_submit=on_submit) == expected
