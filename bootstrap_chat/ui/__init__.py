"""NiceGUI interface - thin visualization layer for login and chat.

Responsibilities:
    - Login / sign-up form with inline error display
    - Chat message display with Markdown rendering for assistant replies
    - Switching screens on auth state changes

Contains minimal business logic. Delegates to SessionManager and ChatSession.
"""

from bootstrap_chat.ui.pages import register_pages

__all__ = ["register_pages"]
