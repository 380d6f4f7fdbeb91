"""Fixed texts shown by the chat widget.

Bot notices (greeting, rate limit, failures) are synthesized locally and are
never sent to the backend as prompts, they only enter the transcript.
"""

from chatwidget.config import MAX_MESSAGE_LENGTH, RATE_LIMIT_SECONDS

GREETING = "Hi! How can I help you today?"

RATE_LIMIT_MESSAGE = (
    f"Too many requests. Please wait {RATE_LIMIT_SECONDS} seconds "
    "before sending another message."
)

NETWORK_ERROR_MESSAGE = (
    "Network error. Please check your connection and try again."
)

FALLBACK_REPLY = "Sorry, I didn't get that."


def get_server_error_message(status_code: int) -> str:
    """Return the conversational notice for a non-429 error status."""
    return f"Server error ({status_code}). Please try again later."


# Inline validation errors
NOT_TEXT_ERROR = "Message must be text."
EMPTY_MESSAGE_ERROR = "Please enter a message."
TOO_LONG_ERROR = f"Message too long (max {MAX_MESSAGE_LENGTH} characters)."

# Voice dictation errors
MIC_DENIED_ERROR = (
    "Microphone access was denied. "
    "Please allow microphone access to use voice input."
)
NO_SPEECH_ERROR = "No speech detected. Please try again."
DICTATION_FAILED_ERROR = "Voice input failed. Please try again."

# Render supervisor fallback
CRASH_TITLE = "Something went wrong."
CRASH_BODY = (
    "Sorry, the chatbot UI crashed. Please refresh the page or try again later."
)

# Input placeholders
INPUT_PLACEHOLDER = "Type your message..."
TYPING_PLACEHOLDER = "Bot is typing..."


def get_wait_placeholder(seconds: int) -> str:
    return f"Please wait {seconds}s..."
