"""Completion service configuration with environment variable loading.

Pydantic-based configuration for the Agno chat agent.
Targets Groq's OpenAI-compatible endpoint by default; any OpenAI-compatible
API works via LLM_BASE_URL.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from bootstrap_chat.errors import ConfigurationError

# Load environment variables from .env file
load_dotenv()

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "mixtral-8x7b-32768"

SYSTEM_INSTRUCTION = (
    "You are a programming expert focused on Bootstrap. Answer questions about "
    "web development, HTML, CSS, JavaScript and especially about how to use the "
    "Bootstrap framework to build responsive and elegant designs. Format your "
    "answers using Markdown when appropriate for better readability."
)


class CompletionConfig(BaseModel):
    """Configuration for the completion agent.

    Attributes:
        api_key: API key for the completion provider.
        base_url: OpenAI-compatible API base URL.
        model_name: Model identifier sent with every request.
        system_instruction: Fixed instruction prepended to each turn.
        temperature: Sampling temperature (0.0 = deterministic, 2.0 = creative).
        max_tokens: Maximum tokens in generated response.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("GROQ_API_KEY", os.getenv("LLM_API_KEY", "")),
        description="API key for the completion provider",
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv("LLM_BASE_URL") or GROQ_BASE_URL,
        description="OpenAI-compatible API base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", DEFAULT_MODEL),
        description="Model to use",
    )
    system_instruction: str = Field(
        default=SYSTEM_INSTRUCTION,
        min_length=1,
        description="System prompt sent with every turn",
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for response generation",
    )
    max_tokens: int = Field(
        default=1024,
        ge=1,
        le=32768,
        description="Maximum tokens in generated response",
    )

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("API key required. Set GROQ_API_KEY or LLM_API_KEY in .env")
        return v.strip()


def get_completion_config() -> CompletionConfig:
    """Create completion configuration from environment.

    Returns:
        Configured CompletionConfig instance.

    Raises:
        ConfigurationError: If no API key is set or a value is out of range.
    """
    try:
        return CompletionConfig()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid completion configuration: {e}") from e
