"""Interactive command-line frontend for the chat widget."""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv  # type: ignore

from chatwidget.ChatClient import ChatClient
from chatwidget.ChatWidget import ChatWidget
from chatwidget.config import LOCAL_STORAGE_PATH, get_api_url
from chatwidget.ErrorBoundary import ErrorBoundary
from cli.renderer import TerminalRenderer
from storage.LocalStorage import LocalStorage
from storage.ThemeStore import THEMES, ThemeStore

HELP_TEXT = """\
Commands:
  /edit N TEXT   replace user message N and regenerate the reply
  /copy N        copy assistant reply N to the clipboard
  /theme         toggle light/dark theme
  /mic           toggle voice input (when available)
  /history       print the whole conversation again
  /reload        recover the display after a rendering error
  /help          show this help
  quit, exit     leave"""


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="chat-widget",
        description="Chat with a remote completion endpoint from the terminal.",
    )
    parser.add_argument(
        "--api-url",
        help="Chat endpoint URL (overrides --mode and the environment)",
    )
    parser.add_argument(
        "--mode",
        choices=("development", "production"),
        help="development talks to CHAT_HOST_URL, production to CHAT_PROXY_URL",
    )
    parser.add_argument(
        "--theme",
        choices=THEMES,
        help="Set and remember the colour theme",
    )
    return parser.parse_args(argv)


async def _handle_command(
    line: str,
    widget: ChatWidget,
    themes: ThemeStore,
    renderer: TerminalRenderer,
    boundary: ErrorBoundary,
) -> None:
    command, _, rest = line.partition(" ")
    command = command.lower()

    if command == "/help":
        print(HELP_TEXT)
    elif command == "/theme":
        print(f"Theme: {themes.toggle()}")
    elif command == "/history":
        renderer.reprint(widget)
    elif command == "/reload":
        boundary.reset()
        renderer.reprint(widget)
    elif command == "/mic":
        if not widget.dictation.supported:
            print("Voice input is not available in this terminal.")
            return
        widget.toggle_listening()
    elif command == "/edit":
        index_text, _, text = rest.partition(" ")
        try:
            index = int(index_text)
            if not widget.begin_edit(index):
                print(widget.placeholder)
                return
        except ValueError as e:
            print(f"Cannot edit: {e}")
            return
        widget.set_edit_draft(text)
        if not await widget.save_edit():
            widget.cancel_edit()
    elif command == "/copy":
        try:
            index = int(rest)
            text = widget.copy_text(index)
        except ValueError as e:
            print(f"Cannot copy: {e}")
            return
        renderer.copy_to_clipboard(text)
        print(f"Copied message {index}.")
    else:
        print(f"Unknown command: {command} (try /help)")


async def _run(args: argparse.Namespace) -> None:
    themes = ThemeStore(LocalStorage(LOCAL_STORAGE_PATH))
    if args.theme:
        themes.set_theme(args.theme)

    renderer = TerminalRenderer()
    themes.subscribe(renderer.apply_theme)
    boundary = ErrorBoundary(renderer.render, renderer.render_crash)

    client = ChatClient(args.api_url or get_api_url(args.mode))
    widget = ChatWidget(client, on_change=boundary)

    print(f"Chat ({client.api_url}) - type /help for commands, 'quit' to stop")
    print("-" * 48)

    widget.mount()
    try:
        while True:
            await widget.wait_idle()
            try:
                line = await asyncio.to_thread(input, "\n> ")
            except EOFError:
                print("\nGoodbye!")
                break

            stripped = line.strip()
            if stripped.lower() in ("quit", "exit"):
                print("Goodbye!")
                break
            if stripped.startswith("/"):
                await _handle_command(stripped, widget, themes, renderer, boundary)
                continue
            if widget.input_disabled:
                print(widget.placeholder)
                continue

            widget.set_input(line)
            await widget.submit()
    finally:
        widget.close()
        renderer.close()
        await client.aclose()


def main(argv: list[str] | None = None) -> None:
    """Run the interactive chat REPL.

    Loads environment configuration, restores the saved theme, then reads
    messages from stdin until the user quits. Replies are typed out
    character by character.
    """
    load_dotenv()
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    args = _parse_args(argv)
    try:
        asyncio.run(_run(args))
    except KeyboardInterrupt:
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
