"""Central configuration for the chat widget."""

import os
from pathlib import Path

# Data directory, override with the TYPING_CHAT_DATA_DIR env var
DATA_DIR = Path(
    os.environ.get("TYPING_CHAT_DATA_DIR", str(Path.home() / ".typing-chat"))
)
LOCAL_STORAGE_PATH = DATA_DIR / "local_storage.json"

# Input limits
MAX_MESSAGE_LENGTH = 1000

# Client-side cool-down after a 429; the server never sends its own window
RATE_LIMIT_SECONDS = 15

# Per-character reveal interval for the typing effect, in seconds
TYPING_MIN_DELAY = 0.012
TYPING_MAX_DELAY = 0.030

DICTATION_LOCALE = "en-US"

# Chat endpoints
DEFAULT_BACKEND_URL = "http://localhost:3001/api/chat"
DEFAULT_PROXY_URL = "http://localhost:3000/api/chat"


def get_api_url(mode: str | None = None) -> str:
    """Return the chat endpoint for the given mode.

    ``development`` talks to the backend chat host directly, ``production``
    goes through the proxy forwarder so the backend address stays hidden.
    The mode defaults to the ``CHAT_MODE`` env var, then ``development``.
    """
    mode = mode or os.environ.get("CHAT_MODE", "development")
    if mode == "production":
        return os.environ.get("CHAT_PROXY_URL") or DEFAULT_PROXY_URL
    return os.environ.get("CHAT_HOST_URL") or DEFAULT_BACKEND_URL
