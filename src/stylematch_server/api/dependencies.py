from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from ..embeddings.embedder import Embedder
from ..rag.orchestrator import RagOrchestrator
from ..sessions.vector_store import SessionVectorStore


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


def get_vector_store(request: Request) -> SessionVectorStore:
    # One store per application instance, created in create_app()
    return request.app.state.vector_store


def get_orchestrator(
    embedder: Annotated[Embedder, Depends(get_embedder)],
    store: Annotated[SessionVectorStore, Depends(get_vector_store)],
) -> RagOrchestrator:
    return RagOrchestrator(embedder=embedder, store=store)
