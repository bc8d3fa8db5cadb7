"""FastAPI host for the NiceGUI page.

The page is served from the same origin, so no CORS middleware is installed.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from bootstrap_chat import __version__

logger = logging.getLogger(__name__)

SERVICE_NAME = "bootstrap-chat"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    logger.info(f"{SERVICE_NAME} {__version__} started")
    yield
    logger.info(f"{SERVICE_NAME} stopped")


def create_app() -> FastAPI:
    """Create the host application with its health endpoint."""
    application = FastAPI(title="Bootstrap Chat", version=__version__, lifespan=lifespan)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": SERVICE_NAME}

    return application
