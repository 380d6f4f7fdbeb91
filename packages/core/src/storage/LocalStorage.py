"""Client-local key/value storage backed by a JSON file.

Plays the role a browser's ``localStorage`` plays for a web widget: a small
string-to-string map that survives across sessions on one machine.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalStorage:
    """Manage a single JSON object file of string items.

    Reads never fail: a missing, unreadable or corrupt file reads as empty.
    Writes replace the whole file.
    """

    def __init__(self, path: str | Path) -> None:
        """Bind the storage to ``path``; the file is created on first write.

        Args:
            path: Filesystem path of the JSON file.
        """
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def get_item(self, key: str) -> str | None:
        """Return the stored string for ``key``, or None."""
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``.

        Raises:
            OSError: If the file cannot be written.
        """
        items = self._load()
        items[key] = value
        self._save(items)

    def remove_item(self, key: str) -> None:
        items = self._load()
        if items.pop(key, None) is not None:
            self._save(items)

    def _load(self) -> dict:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning("Could not read local storage '%s': %s", self._path, e)
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring corrupt local storage '%s': %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, items: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(items, indent=2), encoding="utf-8")
