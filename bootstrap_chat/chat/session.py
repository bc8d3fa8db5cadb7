"""Chat session: the message log and its request/response cycle.

States:
    IDLE -> AWAITING_RESPONSE -> IDLE

Only one completion request may be in flight. A submission while awaiting a
response is ignored, not queued. Completion failures never escape ``submit``;
they become a system message in the log.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Protocol

from bootstrap_chat.models import ChatMessage, Identity, Sender

logger = logging.getLogger(__name__)

GREETING_ID = "welcome"
GREETING_TEXT = (
    "Hello! I'm your programming assistant specialized in Bootstrap. "
    "How can I help you today?"
)
NO_RESPONSE_TEXT = "Sorry, I couldn't generate a response."
ERROR_TEXT = (
    "Sorry, an error occurred while processing your message. Please try again."
)


class ChatState(str, Enum):
    """Whether a completion request is in flight."""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class Completer(Protocol):
    """Anything that turns one user message into reply text."""

    async def complete(self, user_text: str) -> str: ...


class ChatSession:
    """Manages chat state for one signed-in user."""

    def __init__(self, completer: Completer, user: Identity | None = None) -> None:
        self.user = user
        self.draft: str = ""
        self._completer = completer
        self._messages: list[ChatMessage] = []
        self._state = ChatState.IDLE
        self._listeners: list[Callable[[], None]] = []
        self._seed()

    def _seed(self) -> None:
        self._messages.append(
            ChatMessage(id=GREETING_ID, content=GREETING_TEXT, sender=Sender.ASSISTANT)
        )

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def state(self) -> ChatState:
        return self._state

    @property
    def is_awaiting(self) -> bool:
        return self._state is ChatState.AWAITING_RESPONSE

    def on_change(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback run after every append or state change.

        Returns:
            A function that removes the callback.
        """
        self._listeners.append(callback)

        def remove() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback()
            except Exception:
                logger.exception("Chat listener failed")

    def _append(self, content: str, sender: Sender) -> ChatMessage:
        message = ChatMessage(content=content, sender=sender)
        self._messages.append(message)
        self._notify()
        return message

    def _set_state(self, state: ChatState) -> None:
        self._state = state
        self._notify()

    async def submit(self, text: str | None = None) -> bool:
        """Send a message and wait for the reply.

        Args:
            text: Message to send. Defaults to the current ``draft``.

        Returns:
            True if the message was accepted, False if it was ignored
            (blank input or a request already in flight).
        """
        if text is None:
            text = self.draft
        if not text.strip() or self.is_awaiting:
            return False

        self._append(text, Sender.USER)
        self.draft = ""

        try:
            self._set_state(ChatState.AWAITING_RESPONSE)
            reply = await self._completer.complete(text)
        except Exception:
            logger.exception("Failed to get a reply for chat message")
            self._append(ERROR_TEXT, Sender.SYSTEM)
        else:
            self._append(reply or NO_RESPONSE_TEXT, Sender.ASSISTANT)
        finally:
            self._set_state(ChatState.IDLE)

        return True

    def reset(self) -> bool:
        """Start over with only the greeting. Ignored while awaiting a reply."""
        if self.is_awaiting:
            return False
        self._messages.clear()
        self._seed()
        self._notify()
        return True
