"""Pydantic models for identities, sessions and chat messages.

Provides type safety and validation for data crossing the service boundaries.

Models:
    - Identity: Authenticated user record
    - AuthSession: Access/refresh tokens bound to an identity
    - ChatMessage: Individual entry in the chat log
    - Sender: Tagged origin of a message (user, assistant, system)
    - AuthEvent: Session transition names delivered to subscribers
"""

from bootstrap_chat.models.schemas import (
    AuthEvent,
    AuthSession,
    ChatMessage,
    Identity,
    Sender,
)

__all__ = ["AuthEvent", "AuthSession", "ChatMessage", "Identity", "Sender"]
