"""Agno agent logic for chat completions.

Responsibilities:
    - Agent initialization against an OpenAI-compatible provider (Groq)
    - Fixed system instruction for the Bootstrap programming persona
    - Translating provider failures into CompletionError

Maintains clean separation from the UI layer.
"""

from bootstrap_chat.agent.completion import CompletionService
from bootstrap_chat.agent.config import CompletionConfig, get_completion_config

__all__ = ["CompletionConfig", "CompletionService", "get_completion_config"]
