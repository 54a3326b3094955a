"""
Global Error Handling

This module defines application-wide exception handlers for the style-matching
server.

Design Goals
------------
- Never leak internal exception details to clients
- Always return deterministic, machine-readable error responses
- Log full stack traces internally for debugging
- Surface an unreachable embedding service as a distinct upstream failure
"""

from __future__ import annotations

import logging
from typing import Dict, Any

from fastapi import Request
from fastapi.responses import JSONResponse

from ..embeddings.embedder import EmbeddingServiceError

logger = logging.getLogger("stylematch.errors")


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def embedding_service_exception_handler(
    request: Request,
    exc: EmbeddingServiceError,
) -> JSONResponse:
    """
    Map embedding-service failures that escaped the RAG fallback to 502.

    Safety net only. Every shipped route embeds through the orchestrator,
    which converts these errors into a text fallback, so this handler fires
    only for a future route that calls the Embedder directly.
    """
    logger.error(
        "Embedding service failure during request %s %s: %s",
        request.method,
        request.url.path,
        exc,
    )

    payload: Dict[str, Any] = {
        "error": "embedding_service_error",
        "detail": "Embedding service unavailable",
        "upstream_status": exc.status_code,
    }

    return JSONResponse(status_code=502, content=payload)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Behavior
    --------
    - Logs the full exception stack trace for internal diagnostics.
    - Returns a generic 500 error to the client with no internal details.

    Parameters
    ----------
    request : Request
        The incoming HTTP request that triggered the exception.

    exc : Exception
        The uncaught exception instance.

    Returns
    -------
    JSONResponse
        A JSON 500 response with a minimal error payload.
    """

    # Log full traceback internally (never returned to client)
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    payload: Dict[str, Any] = {
        "error": "internal_server_error",
        "detail": "Internal server error",
    }

    return JSONResponse(
        status_code=500,
        content=payload,
    )
