"""Unit tests for SupabaseAuthClient request shaping and error mapping."""

import httpx
import pytest
import pytest_check as check

from bootstrap_chat.auth import AuthConfig, SupabaseAuthClient
from bootstrap_chat.errors import AuthError
from tests.conftest import FakeGoTrue


class TestRequests:
    """Tests for what the client sends."""

    async def test_sign_in_uses_password_grant(
        self, auth_client: SupabaseAuthClient, fake_gotrue: FakeGoTrue
    ) -> None:
        await auth_client.sign_up("dev@example.com", "secret123")

        payload = await auth_client.sign_in_with_password("dev@example.com", "secret123")

        request = fake_gotrue.requests[-1]
        check.equal(request.method, "POST")
        check.equal(request.url.path, "/auth/v1/token")
        check.equal(request.url.params["grant_type"], "password")
        check.is_in("access_token", payload)

    async def test_sends_apikey_and_anon_bearer(
        self, auth_client: SupabaseAuthClient, fake_gotrue: FakeGoTrue
    ) -> None:
        await auth_client.sign_up("dev@example.com", "secret123")

        request = fake_gotrue.requests[-1]
        check.equal(request.headers["apikey"], "anon-test-key")
        check.equal(request.headers["Authorization"], "Bearer anon-test-key")

    async def test_get_user_sends_access_token(
        self, auth_client: SupabaseAuthClient, fake_gotrue: FakeGoTrue
    ) -> None:
        session = await auth_client.sign_up("dev@example.com", "secret123")

        user = await auth_client.get_user(session["access_token"])

        check.equal(user["email"], "dev@example.com")
        check.equal(
            fake_gotrue.requests[-1].headers["Authorization"],
            f"Bearer {session['access_token']}",
        )

    async def test_sign_out_accepts_empty_body(self, auth_client: SupabaseAuthClient) -> None:
        session = await auth_client.sign_up("dev@example.com", "secret123")

        assert await auth_client.sign_out(session["access_token"]) is None


class TestErrors:
    """Tests for mapping failures to AuthError."""

    async def test_duplicate_account(self, auth_client: SupabaseAuthClient) -> None:
        await auth_client.sign_up("dev@example.com", "secret123")

        with pytest.raises(AuthError) as exc_info:
            await auth_client.sign_up("dev@example.com", "secret123")

        check.equal(exc_info.value.message, "User already registered")
        check.equal(exc_info.value.status_code, 422)

    async def test_invalid_credentials_uses_error_description(
        self, auth_client: SupabaseAuthClient
    ) -> None:
        with pytest.raises(AuthError, match="Invalid login credentials"):
            await auth_client.sign_in_with_password("nobody@example.com", "wrong")

    async def test_non_json_error_body(self, auth_config: AuthConfig) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))

        async with SupabaseAuthClient(auth_config, transport=transport) as client:
            with pytest.raises(AuthError, match="HTTP 502"):
                await client.get_user("token")

    async def test_connection_failure(self, auth_config: AuthConfig) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with SupabaseAuthClient(auth_config, transport=httpx.MockTransport(refuse)) as client:
            with pytest.raises(AuthError, match="Connection failed") as exc_info:
                await client.sign_in_with_password("dev@example.com", "secret123")

        assert exc_info.value.status_code is None
