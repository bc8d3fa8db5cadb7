import time
import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Sender(str, Enum):
    """Who produced a chat message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class AuthEvent(str, Enum):
    """Session transitions reported to auth subscribers."""

    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


def _new_message_id() -> str:
    return str(uuid.uuid4())


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat()


class Identity(BaseModel):
    """Authenticated user record.

    Attributes:
        id: User identifier assigned by the identity service.
        email: Email address, if the account has one.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    email: str | None = None


class ChatMessage(BaseModel):
    """A single entry in the chat log.

    Messages are immutable once created.

    Attributes:
        id: Unique identifier within one session's log.
        content: The message text (Markdown for assistant replies).
        sender: Who produced the message.
        timestamp: ISO-8601 creation time in UTC.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_message_id)
    content: str
    sender: Sender
    timestamp: str = Field(default_factory=_utc_timestamp)

    @property
    def created_at(self) -> datetime:
        """Parsed creation time."""
        return datetime.fromisoformat(self.timestamp)


class AuthSession(BaseModel):
    """Tokens and user returned by a successful sign-in or refresh.

    Attributes:
        access_token: Bearer token for authenticated requests.
        refresh_token: Token used to obtain a new access token.
        token_type: Token scheme, normally "bearer".
        expires_in: Lifetime of the access token in seconds.
        expires_at: Unix time at which the access token expires.
        user: The identity the session is bound to.
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 3600
    expires_at: int | None = None
    user: Identity

    @field_validator("token_type", mode="before")
    @classmethod
    def lower_token_type(cls, v: str) -> str:
        """Normalize token type casing."""
        if isinstance(v, str):
            return v.lower()
        return v

    def model_post_init(self, context: Any, /) -> None:
        if self.expires_at is None:
            self.expires_at = int(time.time()) + self.expires_in

    @property
    def is_expired(self) -> bool:
        """Whether the access token has passed its expiry time."""
        return self.expires_at is not None and self.expires_at <= int(time.time())
