"""Async client for the Supabase Auth (GoTrue) REST API."""

import logging
from typing import Any

import httpx

from bootstrap_chat.auth.config import AuthConfig
from bootstrap_chat.errors import AuthError

logger = logging.getLogger(__name__)

# Keys GoTrue uses for the human-readable part of an error body, in priority order
_ERROR_KEYS = ("msg", "message", "error_description", "error")


def _error_message(response: httpx.Response) -> str:
    """Extract a readable error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        for key in _ERROR_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value

    return f"Authentication service error (HTTP {response.status_code})"


class SupabaseAuthClient:
    """Thin wrapper over the GoTrue endpoints used by the application.

    Every method returns the decoded JSON body or raises AuthError.
    Use as an async context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        config: AuthConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Identity service configuration.
            transport: Optional httpx transport (used to substitute a fake service).
        """
        self._config = config
        self._client = httpx.AsyncClient(
            base_url=config.auth_url,
            timeout=config.timeout,
            headers={"apikey": config.anon_key},
            transport=transport,
        )

    async def __aenter__(self) -> "SupabaseAuthClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        access_token: str | None = None,
    ) -> dict[str, Any]:
        """Send a request and decode the JSON body.

        Raises:
            AuthError: On connection failure or any non-2xx status.
        """
        headers = {"Authorization": f"Bearer {access_token or self._config.anon_key}"}
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.RequestError as e:
            logger.warning(f"Identity service unreachable: {e}")
            raise AuthError(f"Connection failed: {e}") from e

        if response.is_error:
            raise AuthError(_error_message(response), status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        """Create a new account.

        Returns either a full session payload (when email confirmation is
        disabled) or a bare user payload.
        """
        return await self._request(
            "POST", "/signup", json={"email": email, "password": password}
        )

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Exchange email and password for a session payload."""
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def refresh_session(self, refresh_token: str) -> dict[str, Any]:
        """Exchange a refresh token for a new session payload."""
        return await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )

    async def get_user(self, access_token: str) -> dict[str, Any]:
        """Fetch the user bound to an access token."""
        return await self._request("GET", "/user", access_token=access_token)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session bound to an access token."""
        await self._request("POST", "/logout", access_token=access_token)
