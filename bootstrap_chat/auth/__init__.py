"""Authentication against Supabase Auth.

Responsibilities:
    - Sign-up, sign-in and sign-out with email and password
    - Current-session lookup and token refresh
    - Restoring a session kept in per-browser storage
    - Change notifications through disposable subscriptions

The HTTP client is injected into the SessionManager; nothing here is a
module-level singleton.
"""

from bootstrap_chat.auth.client import SupabaseAuthClient
from bootstrap_chat.auth.config import AuthConfig, get_auth_config
from bootstrap_chat.auth.session_manager import SessionManager, Subscription

__all__ = [
    "AuthConfig",
    "SessionManager",
    "Subscription",
    "SupabaseAuthClient",
    "get_auth_config",
]
