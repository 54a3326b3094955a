"""
RAG Routes

This module exposes endpoints for:
- Previewing how a document would be chunked
- Building retrieval-augmented context for a generation request
- Inspecting and clearing session-scoped embeddings

Context building never fails because of retrieval problems; degraded results
are reported in the response body (`mode`, `degraded_reason`).
"""

from fastapi import APIRouter, Depends, status
from typing import Annotated

from .models import (
    ChunkRequest,
    ChunkResponse,
    ContextRequest,
    OperationResult,
)
from .dependencies import get_orchestrator, get_vector_store
from ..config import settings
from ..rag.chunker import estimate_tokens, get_chunk_stats, should_use_rag, split_text
from ..rag.orchestrator import RagOrchestrator, RetrievalResult
from ..sessions.vector_store import SessionVectorStore, StoreStats

router = APIRouter(prefix="/rag", tags=["rag"])


@router.post(
    "/chunks",
    response_model=ChunkResponse,
    summary="Split text into retrieval chunks",
)
async def chunk_text(req: ChunkRequest) -> ChunkResponse:
    chunks = split_text(req.text, req.chunk_size, req.overlap)
    return ChunkResponse(
        chunks=chunks,
        stats=get_chunk_stats(chunks),
        use_rag=should_use_rag(req.text, settings.rag_threshold),
        estimated_tokens=estimate_tokens(req.text),
    )


@router.post(
    "/context",
    response_model=RetrievalResult,
    summary="Build relevant context from a reference document",
    status_code=status.HTTP_200_OK,
)
async def build_context(
    req: ContextRequest,
    orchestrator: Annotated[RagOrchestrator, Depends(get_orchestrator)],
) -> RetrievalResult:
    """
    Return the chunks of `document` most relevant to `draft`.

    Embeddings are cached under `session_id`, so repeated calls for the same
    session only embed the draft.
    """
    return await orchestrator.build_context(req.document, req.draft, req.session_id)


@router.get(
    "/sessions/stats",
    response_model=StoreStats,
    summary="Get session vector store statistics",
)
async def get_session_stats(
    store: Annotated[SessionVectorStore, Depends(get_vector_store)],
) -> StoreStats:
    return store.stats()


@router.post(
    "/sessions/evict",
    response_model=OperationResult,
    summary="Evict expired sessions now",
)
async def evict_sessions(
    store: Annotated[SessionVectorStore, Depends(get_vector_store)],
) -> OperationResult:
    return OperationResult(status="evicted", count=store.evict_expired())


@router.delete(
    "/sessions/{session_id}",
    response_model=OperationResult,
    summary="Delete embeddings for a session",
)
async def delete_session(
    session_id: str,
    store: Annotated[SessionVectorStore, Depends(get_vector_store)],
) -> OperationResult:
    removed = store.clear(session_id)
    return OperationResult(status="deleted", count=1 if removed else 0)
