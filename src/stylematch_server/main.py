"""
Style-Matching Server Application Entry Point

This module defines the FastAPI application instance, registers all routers,
configures logging and global exception handling, and owns the lifecycle of
the session vector store and its eviction scheduler.

Design Goals
------------
- Deterministic startup
- Explicit construction and teardown of shared state (no module singletons)
- Centralized router registration
- Global exception safety net
- Test-friendly via create_app()
"""

from __future__ import annotations

import contextlib
import logging
from typing import Optional

from fastapi import FastAPI

from .config import settings
from .core.errors import embedding_service_exception_handler, unhandled_exception_handler
from .core.logging import configure_logging
from .embeddings.embedder import EmbeddingServiceError
from .sessions.scheduler import EvictionScheduler
from .sessions.vector_store import SessionVectorStore

from .api import (
    dna_routes,
    health_routes,
    rag_routes,
)


logger = logging.getLogger("stylematch.app")


# ---------------------------------------------------------------------
# Application Factory (Test-Friendly)
# ---------------------------------------------------------------------

def create_app(store: Optional[SessionVectorStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Parameters
    ----------
    store : Optional[SessionVectorStore]
        Vector store to serve from. A fresh store using the configured TTL is
        created when omitted, so every app instance is isolated.

    Returns
    -------
    FastAPI
        Fully configured FastAPI application.
    """
    configure_logging(settings.log_level, settings.log_json)

    vector_store = (
        store
        if store is not None
        else SessionVectorStore(ttl_seconds=settings.session_ttl_seconds)
    )
    scheduler = EvictionScheduler(vector_store, settings.eviction_interval_seconds)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting stylematch-server (session TTL=%ss, embedding model=%s)",
            settings.session_ttl_seconds,
            settings.embedding_model,
        )
        if not settings.openrouter_api_key.get_secret_value():
            logger.warning("OPENROUTER_API_KEY is not set; embedding requests will fail")

        scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            logger.info("Shutting down stylematch-server")

    app = FastAPI(
        title="stylematch-server",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.vector_store = vector_store
    app.state.eviction_scheduler = scheduler

    # --------------------------------------------------------------
    # Global Exception Handling
    # --------------------------------------------------------------

    app.add_exception_handler(EmbeddingServiceError, embedding_service_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # --------------------------------------------------------------
    # Router Registration
    # --------------------------------------------------------------

    app.include_router(health_routes.router)
    app.include_router(rag_routes.router)
    app.include_router(dna_routes.router)

    return app


# ---------------------------------------------------------------------
# Default Application Instance (for Uvicorn/Gunicorn)
# ---------------------------------------------------------------------

app = create_app()
