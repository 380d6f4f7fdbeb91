"""Persisted light/dark theme preference."""

import logging
from collections.abc import Callable

from storage.LocalStorage import LocalStorage

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
THEMES = ("light", "dark")
DEFAULT_THEME = "dark"


class ThemeStore:
    """Process-wide theme state kept in sync with local storage.

    The stored value is read once at construction. When it is absent or
    invalid the store falls back to dark and writes that back, so storage
    always holds the active theme. Every change is written back and pushed
    to the subscribers, which apply it to whatever is being rendered.

    A storage write that fails only loses persistence: the theme still
    changes for the running session.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage
        self._subscribers: list[Callable[[str], None]] = []

        stored = storage.get_item(THEME_KEY)
        self._theme = stored if stored in THEMES else DEFAULT_THEME
        if stored != self._theme:
            self._persist()

    @property
    def theme(self) -> str:
        return self._theme

    def subscribe(self, callback: Callable[[str], None]) -> None:
        """Register ``callback`` and call it once with the current theme."""
        self._subscribers.append(callback)
        callback(self._theme)

    def set_theme(self, theme: str) -> None:
        """Switch to ``theme`` and persist it.

        Raises:
            ValueError: If ``theme`` is not "light" or "dark".
        """
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: '{theme}'")
        self._theme = theme
        self._persist()
        for callback in self._subscribers:
            callback(theme)

    def toggle(self) -> str:
        self.set_theme("light" if self._theme == "dark" else "dark")
        return self._theme

    def _persist(self) -> None:
        try:
            self._storage.set_item(THEME_KEY, self._theme)
        except OSError as e:
            logger.warning("Could not save theme preference to %s: %s", self._storage.path, e)
