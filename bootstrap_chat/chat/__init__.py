"""Chat session state machine and message log."""

from bootstrap_chat.chat.session import (
    ERROR_TEXT,
    GREETING_TEXT,
    NO_RESPONSE_TEXT,
    ChatSession,
    ChatState,
)

__all__ = ["ERROR_TEXT", "GREETING_TEXT", "NO_RESPONSE_TEXT", "ChatSession", "ChatState"]
