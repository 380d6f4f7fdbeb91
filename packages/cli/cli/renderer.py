"""Terminal rendering of the chat widget."""

import base64
from typing import TextIO

from rich.console import Console, Group
from rich.live import Live
from rich.markdown import Markdown
from rich.text import Text
from rich.theme import Theme

from chatwidget.ChatWidget import ChatWidget
from chatwidget.messages import CRASH_BODY, CRASH_TITLE
from chatwidget.models import Message

# Styles per theme; the terminal counterpart of the page's data-theme
CHAT_THEMES = {
    "dark": Theme(
        {
            "chat.user": "bold bright_cyan",
            "chat.bot": "bright_white",
            "chat.notice": "yellow",
            "chat.error": "bold red",
        }
    ),
    "light": Theme(
        {
            "chat.user": "bold blue",
            "chat.bot": "black",
            "chat.notice": "magenta",
            "chat.error": "red",
        }
    ),
}

_CURSOR = "▌"


class TerminalRenderer:
    """Incrementally print the transcript and the typing effect.

    Assistant replies are rendered as Markdown. While a reply is being
    typed it is shown in a transient live region that is redrawn on every
    character and replaced by the committed message once typing finishes.
    Everything else is printed once. If an edit rewrites history the
    transcript is printed again from the top.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self.console = Console(file=stream)
        self.console.push_theme(CHAT_THEMES["dark"])
        self.theme = "dark"
        self._shown: list[tuple[int, str]] = []
        self._live: Live | None = None
        self._last_input_error: str | None = None
        self._last_dictation_error: str | None = None

    def apply_theme(self, theme: str) -> None:
        if theme == self.theme:
            return
        self.console.pop_theme()
        self.console.push_theme(CHAT_THEMES[theme])
        self.theme = theme

    def render(self, widget: ChatWidget) -> None:
        state = widget.state
        messages = list(widget.transcript)
        keys = [(m.id, m.text) for m in messages]

        if state.typing_index is None:
            self._stop_live()

        if keys[: len(self._shown)] != self._shown:
            self.console.print(Text("-- conversation edited --", style="chat.notice"))
            self._shown = []

        for index, message in enumerate(messages[len(self._shown):], len(self._shown)):
            self._print_message(index, message)
            self._shown.append((message.id, message.text))

        if state.typing_index is not None:
            if self._live is None:
                self._live = Live(
                    console=self.console,
                    auto_refresh=False,
                    transient=True,
                    redirect_stdout=False,
                    redirect_stderr=False,
                )
                self._live.start()
            self._live.update(self._typing_view(state.typing_text), refresh=True)

        if state.input_error != self._last_input_error:
            self._last_input_error = state.input_error
            if state.input_error:
                self.console.print(Text(state.input_error, style="chat.error"))

        if state.dictation_error != self._last_dictation_error:
            self._last_dictation_error = state.dictation_error
            if state.dictation_error:
                self.console.print(Text(state.dictation_error, style="chat.error"))

    def reprint(self, widget: ChatWidget) -> None:
        """Forget what was shown and print the whole transcript again."""
        self._stop_live()
        self._shown = []
        self.render(widget)

    def render_crash(self) -> None:
        """Static recovery view shown by the error boundary."""
        self._stop_live()
        self.console.print(Text(CRASH_TITLE, style="chat.error"))
        self.console.print(CRASH_BODY, markup=False)
        self.console.print("Type /reload to try again.", markup=False)

    def copy_to_clipboard(self, text: str) -> None:
        """Put ``text`` on the terminal's clipboard.

        Written as an OSC 52 escape sequence for the terminal emulator to
        apply. Terminals without OSC 52 support ignore it.
        """
        payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
        self.console.file.write(f"\033]52;c;{payload}\a")
        self.console.file.flush()

    def close(self) -> None:
        self._stop_live()

    def _print_message(self, index: int, message: Message) -> None:
        if message.sender == "user":
            suffix = " (edited)" if message.edited else ""
            self.console.print(Text(f"[{index}] You: {message.text}{suffix}", style="chat.user"))
        else:
            self.console.print(Text(f"[{index}] Assistant:", style="chat.bot"))
            self.console.print(Markdown(message.text, style="chat.bot"))

    def _typing_view(self, partial: str) -> Group:
        return Group(
            Text("Assistant:", style="chat.bot"),
            Markdown(partial + _CURSOR, style="chat.bot"),
        )

    def _stop_live(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None
