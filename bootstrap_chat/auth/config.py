"""Identity service configuration.

Reads the Supabase project URL and public (anon) key from the environment.
Both are required: the application refuses to start without them.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from bootstrap_chat.errors import ConfigurationError

load_dotenv()


class AuthConfig(BaseModel):
    """Configuration for the Supabase Auth client.

    Attributes:
        url: Supabase project base URL (e.g. https://xyz.supabase.co).
        anon_key: Public anon key sent as the ``apikey`` header.
        timeout: HTTP timeout in seconds for identity requests.
    """

    url: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_URL", ""),
        description="Supabase project URL",
    )
    anon_key: str = Field(
        default_factory=lambda: os.getenv("SUPABASE_ANON_KEY", ""),
        description="Supabase public anon key",
    )
    timeout: float = Field(default=30.0, gt=0.0, le=300.0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = (v or "").strip()
        if not v:
            raise ValueError("SUPABASE_URL is required")
        if not v.startswith(("http://", "https://")):
            raise ValueError("SUPABASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("anon_key")
    @classmethod
    def validate_anon_key(cls, v: str) -> str:
        """Require a non-empty anon key."""
        if not v or not v.strip():
            raise ValueError("SUPABASE_ANON_KEY is required")
        return v.strip()

    @property
    def auth_url(self) -> str:
        """Base URL of the GoTrue REST API."""
        return f"{self.url}/auth/v1"


def get_auth_config() -> AuthConfig:
    """Create identity configuration from environment.

    Returns:
        Configured AuthConfig instance.

    Raises:
        ConfigurationError: If SUPABASE_URL or SUPABASE_ANON_KEY is missing.
    """
    try:
        return AuthConfig()
    except ValidationError as e:
        raise ConfigurationError(f"Supabase environment variables not configured: {e}") from e
