"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routes and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from src.adapters.accounts.memory import InMemoryAccountDirectory
from src.api.dependencies import build_session_store
from src.api.v1 import router as v1_router
from src.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Credential Form API v1 - Drive login, registration and password recovery forms",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the account directory and form session store on startup
    - Closes every open form on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")

    accounts = InMemoryAccountDirectory(bcrypt_cost=settings.bcrypt_cost)
    sessions = build_session_store(settings, accounts)

    # Store collaborators in app state for dependency injection
    app.state.accounts = accounts
    app.state.sessions = sessions

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    sessions.close_all()
    logger.info("Form sessions closed")


app = FastAPI(
    title="authgate",
    description="Credential Form API - Email availability checks and gated submission",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/v1")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint.

    Returns 200 OK with the number of live form sessions.
    """
    sessions = request.app.state.sessions
    return {"status": "healthy", "sessions": str(len(sessions))}
