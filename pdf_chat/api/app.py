"""FastAPI application factory.

Wires the session and message routers, CORS, and the health probe. Sample
sessions are seeded at startup when SEED_SAMPLE_DATA is truthy.
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pdf_chat import __version__
from pdf_chat.api.messages import router as messages_router
from pdf_chat.api.sessions import router as sessions_router
from pdf_chat.storage.memory import get_store

logger = logging.getLogger(__name__)

health_router = APIRouter(prefix="/api", tags=["health"])


@health_router.get("/health")
async def health_check() -> dict[str, str]:
    """Liveness probe with the server's current time."""
    return {"status": "ok", "timestamp": datetime.now(UTC).isoformat()}


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    logger.info(f"PDF Chat API {__version__} starting")
    if _env_flag("SEED_SAMPLE_DATA"):
        seeded = get_store().seed_sample_data()
        logger.info(f"Seeded {len(seeded)} sample sessions")
    yield
    logger.info("PDF Chat API stopped")


def create_app() -> FastAPI:
    """Build the API application.

    Returns:
        A new FastAPI instance. Each call is independent, so tests can install
        their own dependency overrides.
    """
    application = FastAPI(
        title="PDF Chat API",
        description=(
            "Chat with an uploaded PDF. Sessions hold a PDF and a message "
            "history; assistant replies are delivered either as a single "
            "response or token by token over Server-Sent Events."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    application.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router in (health_router, sessions_router, messages_router):
        application.include_router(router)

    return application


app = create_app()
