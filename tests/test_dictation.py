import pytest

from chatwidget.ChatWidget import ChatWidget
from chatwidget.Dictation import get_dictation_error_message
from chatwidget.messages import (
    DICTATION_FAILED_ERROR,
    MIC_DENIED_ERROR,
    NO_SPEECH_ERROR,
    TOO_LONG_ERROR,
)


class FakeRecognizer:
    def __init__(self) -> None:
        self.started_with: list[str] = []
        self.continuous: list[bool] = []
        self.stopped = 0
        self.on_result = self.on_error = self.on_end = None

    def start(self, locale, continuous, on_result, on_error, on_end) -> None:
        self.started_with.append(locale)
        self.continuous.append(continuous)
        self.on_result, self.on_error, self.on_end = on_result, on_error, on_end

    def stop(self) -> None:
        self.stopped += 1


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def dictating_widget(chat_client, scheduler, recognizer) -> ChatWidget:
    return ChatWidget(chat_client, scheduler=scheduler, recognizer=recognizer)


def test_unsupported_without_recognizer(widget):
    assert widget.dictation.supported is False

    with pytest.raises(RuntimeError):
        widget.toggle_listening()


def test_result_replaces_the_whole_input(dictating_widget, recognizer):
    dictating_widget.set_input("typed so far")

    dictating_widget.toggle_listening()
    assert recognizer.started_with == ["en-US"]
    assert dictating_widget.state.listening is True

    recognizer.on_result("spoken words")
    recognizer.on_end()

    assert dictating_widget.state.pending_input == "spoken words"
    assert dictating_widget.state.listening is False


def test_long_dictation_is_validated_like_typing(dictating_widget, recognizer):
    dictating_widget.toggle_listening()
    recognizer.on_result("x" * 1001)

    assert dictating_widget.state.input_error == TOO_LONG_ERROR


def test_toggle_twice_stops_listening(dictating_widget, recognizer):
    dictating_widget.toggle_listening()
    dictating_widget.toggle_listening()

    assert recognizer.stopped == 1
    assert dictating_widget.state.listening is False


@pytest.mark.parametrize(
    "code, message",
    [
        ("not-allowed", MIC_DENIED_ERROR),
        ("service-not-allowed", MIC_DENIED_ERROR),
        ("no-speech", NO_SPEECH_ERROR),
        ("network", DICTATION_FAILED_ERROR),
        ("aborted", DICTATION_FAILED_ERROR),
    ],
)
def test_error_codes_map_to_messages(code, message):
    assert get_dictation_error_message(code) == message


def test_error_is_shown_and_cleared_on_next_start(dictating_widget, recognizer):
    dictating_widget.toggle_listening()
    recognizer.on_error("no-speech")

    assert dictating_widget.state.dictation_error == NO_SPEECH_ERROR
    assert dictating_widget.state.listening is False

    dictating_widget.toggle_listening()
    assert dictating_widget.state.dictation_error is None


def test_close_stops_an_active_pass(dictating_widget, recognizer):
    dictating_widget.toggle_listening()

    dictating_widget.close()

    assert recognizer.stopped == 1


def test_each_pass_is_single_shot(dictating_widget, recognizer):
    dictating_widget.toggle_listening()

    assert recognizer.continuous == [False]


def test_only_the_first_result_of_a_pass_is_used(dictating_widget, recognizer):
    dictating_widget.toggle_listening()
    recognizer.on_result("first words")
    recognizer.on_result("first words and more")
    recognizer.on_end()

    assert dictating_widget.state.pending_input == "first words"

    dictating_widget.toggle_listening()
    recognizer.on_result("second pass")

    assert dictating_widget.state.pending_input == "second pass"
