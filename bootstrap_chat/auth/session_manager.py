"""Session manager: the application's view of the signed-in identity.

The remote identity service is authoritative; this module keeps the derived
local session, mirrors it into an optional per-browser storage mapping, and
notifies subscribers whenever the session changes.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, Protocol

from pydantic import ValidationError

from bootstrap_chat.errors import AuthError
from bootstrap_chat.models import AuthEvent, AuthSession, Identity

logger = logging.getLogger(__name__)

STORAGE_KEY = "auth_session"

AuthListener = Callable[[AuthEvent, AuthSession | None], Awaitable[None] | None]


class IdentityClient(Protocol):
    """Operations the session manager needs from the identity service."""

    async def sign_up(self, email: str, password: str) -> dict[str, Any]: ...

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]: ...

    async def refresh_session(self, refresh_token: str) -> dict[str, Any]: ...

    async def get_user(self, access_token: str) -> dict[str, Any]: ...

    async def sign_out(self, access_token: str) -> None: ...


def parse_identity(payload: dict[str, Any]) -> Identity:
    """Build an Identity from a GoTrue user object.

    Raises:
        AuthError: If the payload has no user id.
    """
    user_id = payload.get("id")
    if not user_id:
        raise AuthError("Authentication service returned no user")
    return Identity(id=str(user_id), email=payload.get("email") or None)


def parse_session(payload: dict[str, Any]) -> AuthSession | None:
    """Build an AuthSession from a token payload, or None if it carries no tokens."""
    if not payload.get("access_token"):
        return None

    user = payload.get("user")
    if not isinstance(user, dict):
        raise AuthError("Authentication service returned a session without a user")

    try:
        return AuthSession(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token", ""),
            token_type=payload.get("token_type", "bearer"),
            expires_in=payload.get("expires_in", 3600),
            expires_at=payload.get("expires_at"),
            user=parse_identity(user),
        )
    except ValidationError as e:
        raise AuthError("Authentication service returned a malformed session") from e


class Subscription:
    """Handle returned by ``SessionManager.subscribe``.

    Call ``unsubscribe()`` on teardown, or use the handle as a context
    manager to release the listener when the block exits.
    """

    def __init__(self, manager: "SessionManager", token: int) -> None:
        self._manager = manager
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        """Stop delivering events to the listener. Safe to call twice."""
        if not self._active:
            return
        self._manager._remove_listener(self._token)
        self._active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class SessionManager:
    """Sign-up, sign-in, sign-out and session tracking.

    The identity client is injected so tests can substitute a fake service.
    """

    def __init__(
        self,
        client: IdentityClient,
        storage: MutableMapping[str, Any] | None = None,
    ) -> None:
        """Initialize the session manager.

        Args:
            client: Identity service client.
            storage: Optional mapping used to keep the session across page
                     reloads (NiceGUI's ``app.storage.user`` in the app).
        """
        self._client = client
        self._storage = storage
        self._session: AuthSession | None = None
        self._listeners: dict[int, AuthListener] = {}
        self._next_token = 0

    # --- subscriptions -------------------------------------------------

    def subscribe(self, callback: AuthListener) -> Subscription:
        """Register a listener for session transitions.

        Args:
            callback: Called with ``(event, session)``; may be a coroutine function.

        Returns:
            Subscription handle the caller must release on teardown.
        """
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = callback
        return Subscription(self, token)

    def _remove_listener(self, token: int) -> None:
        self._listeners.pop(token, None)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def _emit(self, event: AuthEvent, session: AuthSession | None) -> None:
        for callback in list(self._listeners.values()):
            try:
                result = callback(event, session)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception(f"Auth listener failed while handling {event.value}")

    # --- local state ---------------------------------------------------

    def _set_session(self, session: AuthSession | None) -> None:
        self._session = session
        if self._storage is None:
            return
        if session is None:
            self._storage.pop(STORAGE_KEY, None)
        else:
            self._storage[STORAGE_KEY] = session.model_dump(mode="json")

    def get_session(self) -> AuthSession | None:
        """Return the current session, or None when signed out."""
        return self._session

    def get_current_user(self) -> Identity | None:
        """Return the identity of a currently valid session.

        Returns None when signed out or when the access token has expired;
        call ``refresh_session`` to renew an expired session.
        """
        if self._session is None or self._session.is_expired:
            return None
        return self._session.user

    # --- operations ----------------------------------------------------

    async def sign_up(self, email: str, password: str) -> Identity:
        """Create a new account.

        If the service returns a session right away the manager becomes
        signed in; when email confirmation is pending no local session exists.

        Raises:
            AuthError: Invalid email, weak password or duplicate account.
        """
        payload = await self._client.sign_up(email, password)

        session = parse_session(payload)
        user_payload = payload.get("user") if session else payload
        if not isinstance(user_payload, dict):
            raise AuthError("Authentication service returned no user")

        # GoTrue hides duplicate sign-ups behind a user with no identities
        if user_payload.get("identities") == []:
            raise AuthError("User already registered")

        identity = parse_identity(user_payload)
        logger.info(f"Account created for user {identity.id}")

        if session is not None:
            self._set_session(session)
            await self._emit(AuthEvent.SIGNED_IN, session)

        return identity

    async def sign_in(self, email: str, password: str) -> Identity:
        """Authenticate with email and password.

        Raises:
            AuthError: Invalid credentials or service failure.
        """
        payload = await self._client.sign_in_with_password(email, password)
        session = parse_session(payload)
        if session is None:
            raise AuthError("Authentication service returned no session")

        self._set_session(session)
        logger.info(f"User {session.user.id} signed in")
        await self._emit(AuthEvent.SIGNED_IN, session)
        return session.user

    async def sign_out(self) -> None:
        """End the current session. Does nothing when already signed out."""
        session = self._session
        if session is None:
            return

        try:
            await self._client.sign_out(session.access_token)
        except AuthError as e:
            # Token may already be revoked or expired; local sign-out still applies
            logger.warning(f"Remote sign-out failed for user {session.user.id}: {e.message}")

        self._set_session(None)
        logger.info(f"User {session.user.id} signed out")
        await self._emit(AuthEvent.SIGNED_OUT, None)

    async def refresh_session(self) -> AuthSession:
        """Obtain a new access token using the current refresh token.

        Raises:
            AuthError: If there is no session or the refresh is rejected.
        """
        if self._session is None:
            raise AuthError("No active session")

        payload = await self._client.refresh_session(self._session.refresh_token)
        session = parse_session(payload)
        if session is None:
            raise AuthError("Authentication service returned no session")

        self._set_session(session)
        logger.debug(f"Session refreshed for user {session.user.id}")
        await self._emit(AuthEvent.TOKEN_REFRESHED, session)
        return session

    async def restore(self) -> Identity | None:
        """Load a session kept in storage from a previous page load.

        The stored token is checked against the service (refreshing first if
        it has expired). Subscribers receive INITIAL_SESSION either way.

        Returns:
            The restored identity, or None if nothing valid was stored.
        """
        session = await self._load_stored_session()
        self._set_session(session)
        await self._emit(AuthEvent.INITIAL_SESSION, session)
        return session.user if session else None

    async def _load_stored_session(self) -> AuthSession | None:
        if self._storage is None:
            return None

        stored = self._storage.get(STORAGE_KEY)
        if not stored:
            return None

        try:
            session = AuthSession.model_validate(stored)
        except ValidationError:
            logger.warning("Discarding malformed stored session")
            return None

        try:
            if session.is_expired:
                refreshed = parse_session(
                    await self._client.refresh_session(session.refresh_token)
                )
                if refreshed is None:
                    return None
                return refreshed

            user = parse_identity(await self._client.get_user(session.access_token))
        except AuthError as e:
            logger.info(f"Stored session rejected: {e.message}")
            return None

        return session.model_copy(update={"user": user})
