"""Main application entry point.

Runs FastAPI with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def build_app():
    """Validate configuration and assemble the application.

    Raises:
        ConfigurationError: If Supabase or the completion provider is not configured.
    """
    from nicegui import ui

    from bootstrap_chat.agent import CompletionService
    from bootstrap_chat.api.app import create_app
    from bootstrap_chat.auth import get_auth_config
    from bootstrap_chat.ui import register_pages

    # Missing identity configuration is fatal; fail before serving anything
    auth_config = get_auth_config()
    completion_service = CompletionService()

    app = create_app()
    register_pages(auth_config, completion_service)

    ui.run_with(
        app,
        title="Programming ChatBot",
        favicon="🤖",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "bootstrap-chat-secret"),
    )
    return app


def main() -> None:
    """Application entry point."""
    import uvicorn

    from bootstrap_chat.errors import ConfigurationError

    try:
        app = build_app()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Chat UI available at http://localhost:{port}/")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
