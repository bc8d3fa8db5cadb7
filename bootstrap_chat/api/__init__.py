"""FastAPI host for the chat application.

The NiceGUI page is mounted onto this application at startup.

Endpoints:
    - GET /health: Service health status
"""

from bootstrap_chat.api.app import create_app

__all__ = ["create_app"]
