"""Pytest fixtures and shared test configuration.

Fixtures:
    - async_client: HTTPX client for the FastAPI host
    - auth_config: Identity configuration pointing at a fake project
    - fake_gotrue: In-process stand-in for the Supabase Auth REST API
    - auth_client: SupabaseAuthClient wired to fake_gotrue
    - fake_completer: Scriptable completion service
"""

import asyncio
import json
import uuid
from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from bootstrap_chat.api import create_app
from bootstrap_chat.auth import AuthConfig, SupabaseAuthClient
from bootstrap_chat.errors import CompletionError

TEST_SUPABASE_URL = "https://project.supabase.test"
TEST_ANON_KEY = "anon-test-key"


class FakeGoTrue:
    """Minimal GoTrue server backing an httpx.MockTransport.

    Accounts are confirmed immediately unless ``confirm_email`` is set.
    """

    def __init__(self, confirm_email: bool = False) -> None:
        self.confirm_email = confirm_email
        self.users: dict[str, dict] = {}
        self.passwords: dict[str, str] = {}
        self.access_tokens: dict[str, str] = {}
        self.refresh_tokens: dict[str, str] = {}
        self.requests: list[httpx.Request] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def _issue_session(self, email: str) -> dict:
        access = f"access-{uuid.uuid4()}"
        refresh = f"refresh-{uuid.uuid4()}"
        self.access_tokens[access] = email
        self.refresh_tokens[refresh] = email
        return {
            "access_token": access,
            "token_type": "bearer",
            "expires_in": 3600,
            "refresh_token": refresh,
            "user": self.users[email],
        }

    def _user_for(self, request: httpx.Request) -> str | None:
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        return self.access_tokens.get(token)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("apikey") != TEST_ANON_KEY:
            return httpx.Response(401, json={"message": "Invalid API key"})

        path = request.url.path
        body = json.loads(request.content) if request.content else {}

        if path == "/auth/v1/signup":
            email, password = body.get("email", ""), body.get("password", "")
            if "@" not in email:
                return httpx.Response(
                    400, json={"code": 400, "msg": "Unable to validate email address: invalid format"}
                )
            if len(password) < 6:
                return httpx.Response(
                    422, json={"code": 422, "msg": "Password should be at least 6 characters."}
                )
            if email in self.users:
                return httpx.Response(422, json={"code": 422, "msg": "User already registered"})
            self.users[email] = {
                "id": str(uuid.uuid4()),
                "email": email,
                "identities": [{"provider": "email"}],
            }
            self.passwords[email] = password
            if self.confirm_email:
                return httpx.Response(200, json=self.users[email])
            return httpx.Response(200, json=self._issue_session(email))

        if path == "/auth/v1/token":
            grant = request.url.params.get("grant_type")
            if grant == "password":
                email = body.get("email", "")
                if self.passwords.get(email) != body.get("password"):
                    return httpx.Response(
                        400,
                        json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
                    )
                return httpx.Response(200, json=self._issue_session(email))
            if grant == "refresh_token":
                email = self.refresh_tokens.pop(body.get("refresh_token", ""), None)
                if email is None:
                    return httpx.Response(
                        400,
                        json={"error": "invalid_grant", "error_description": "Invalid Refresh Token"},
                    )
                return httpx.Response(200, json=self._issue_session(email))

        if path == "/auth/v1/user":
            email = self._user_for(request)
            if email is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json=self.users[email])

        if path == "/auth/v1/logout":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            if self.access_tokens.pop(token, None) is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(204)

        return httpx.Response(404, json={"msg": "Not found"})


class FakeCompleter:
    """Completion service double.

    Returns queued replies in order; a queued exception is raised instead.
    When ``gate`` is set, each call waits for it before answering.
    """

    def __init__(self, *replies: str | Exception) -> None:
        self.replies: list[str | Exception] = list(replies)
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def complete(self, user_text: str) -> str:
        self.calls.append(user_text)
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0) if self.replies else ""
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(url=TEST_SUPABASE_URL, anon_key=TEST_ANON_KEY)


@pytest.fixture
def fake_gotrue() -> FakeGoTrue:
    return FakeGoTrue()


@pytest.fixture
async def auth_client(
    auth_config: AuthConfig, fake_gotrue: FakeGoTrue
) -> AsyncGenerator[SupabaseAuthClient]:
    """SupabaseAuthClient talking to the fake identity service."""
    async with SupabaseAuthClient(auth_config, transport=fake_gotrue.transport()) as client:
        yield client


@pytest.fixture
def fake_completer() -> FakeCompleter:
    return FakeCompleter()


@pytest.fixture
def failing_completer() -> FakeCompleter:
    return FakeCompleter(CompletionError("Failed to get a response from the AI"))
