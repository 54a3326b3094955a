"""
RAG Orchestrator Tests

Runs the full chunk -> embed -> store -> query pipeline against the fake
embedding service and checks every degradation path.
"""

from unittest.mock import MagicMock

import pytest

from stylematch_server.rag.orchestrator import CHUNK_SEPARATOR, RagOrchestrator
from stylematch_server.sessions.vector_store import SessionVectorStore

from conftest import make_document


def _orchestrator(embedder, store=None) -> RagOrchestrator:
    return RagOrchestrator(
        embedder=embedder,
        store=store if store is not None else SessionVectorStore(),
        chunk_size=500,
        overlap=100,
        top_k=5,
        rag_threshold=2000,
        fallback_chars=5000,
    )


@pytest.fixture
def document():
    return make_document(6000)


@pytest.mark.asyncio
async def test_short_document_is_used_verbatim(embedding_service, embedder):
    orchestrator = _orchestrator(embedder)
    text = "A short reference document."

    result = await orchestrator.build_context(text, "draft", "s1")

    assert result.mode == "verbatim"
    assert result.context == text
    assert embedding_service.requests == []


@pytest.mark.asyncio
async def test_long_document_is_chunked_embedded_and_stored(embedding_service, embedder, document):
    store = MagicMock(wraps=SessionVectorStore())
    orchestrator = _orchestrator(embedder, store)

    result = await orchestrator.build_context(document, "How many rounds of review?", "s1")

    assert result.mode == "retrieved"
    assert result.degraded is False
    assert store.store.call_count == 1
    assert len(embedding_service.batch_requests) >= 2
    assert len(embedding_service.single_requests) == 1

    assert 0 < len(result.retrieved) <= 5
    assert len(result.context) <= 5000
    assert result.context == CHUNK_SEPARATOR.join(
        m.document.text for m in result.retrieved
    )
    scores = [m.score for m in result.retrieved]
    assert scores == sorted(scores, reverse=True)

    stored = store.get_documents("s1")
    assert len(stored) == result.chunk_count
    assert stored[0].id == "chunk_0"
    assert stored[0].metadata["chunk_id"] == 0


@pytest.mark.asyncio
async def test_second_call_reuses_session_embeddings(embedding_service, embedder, document):
    orchestrator = _orchestrator(embedder)

    await orchestrator.build_context(document, "first draft", "s1")
    batches_after_first = len(embedding_service.batch_requests)

    result = await orchestrator.build_context(document, "second draft", "s1")

    assert result.mode == "cached"
    assert len(embedding_service.batch_requests) == batches_after_first
    assert len(embedding_service.single_requests) == 2
    assert result.retrieved


@pytest.mark.asyncio
async def test_whitespace_document_returned_raw(embedding_service, embedder):
    orchestrator = _orchestrator(embedder)
    blank = " " * 3000

    result = await orchestrator.build_context(blank, "draft", "s1")

    assert result.mode == "raw_document"
    assert result.context == blank
    assert embedding_service.requests == []


@pytest.mark.asyncio
async def test_all_batches_failing_falls_back_to_prefix(embedding_service, embedder, document):
    embedding_service.fail_batches = True
    store = SessionVectorStore()
    orchestrator = _orchestrator(embedder, store)

    result = await orchestrator.build_context(document, "draft", "s1")

    assert result.mode == "fallback"
    assert result.degraded is True
    assert result.context == document[:5000]
    assert result.degraded_reason.startswith("NoEmbeddingsError")
    assert store.has("s1") is False


@pytest.mark.asyncio
async def test_query_embedding_failure_falls_back(embedding_service, embedder, document):
    embedding_service.fail_single = True
    orchestrator = _orchestrator(embedder)

    result = await orchestrator.build_context(document, "draft", "s1")

    assert result.mode == "fallback"
    assert result.context == document[:5000]
    assert result.degraded_reason.startswith("EmbeddingServiceError")


@pytest.mark.asyncio
async def test_partial_embeddings_are_flagged(embedding_service, embedder, document):
    embedding_service.fail_calls = {1}
    orchestrator = _orchestrator(embedder)

    result = await orchestrator.build_context(document, "draft", "s1")

    assert result.mode == "retrieved"
    assert result.partial_embeddings is True
    assert result.degraded is True
    assert result.degraded_reason.endswith("chunks missing embeddings")
    assert all(m.document.metadata["chunk_id"] >= 10 for m in result.retrieved)


@pytest.mark.asyncio
async def test_retrieve_returns_context_string(embedder, document):
    orchestrator = _orchestrator(embedder)

    context = await orchestrator.retrieve(document, "draft", "s1")

    assert isinstance(context, str)
    assert CHUNK_SEPARATOR in context


@pytest.mark.asyncio
async def test_unexpected_store_error_falls_back(embedder, document):
    store = MagicMock(spec=SessionVectorStore)
    store.has.side_effect = RuntimeError("store offline")
    orchestrator = _orchestrator(embedder, store)

    result = await orchestrator.build_context(document, "draft", "s1")

    assert result.mode == "fallback"
    assert result.degraded_reason == "RuntimeError: store offline"


@pytest.mark.asyncio
async def test_invalid_chunk_size_falls_back_instead_of_hanging(embedding_service, embedder):
    orchestrator = _orchestrator(embedder)
    orchestrator.chunk_size = 0
    document = "x" * 3000

    result = await orchestrator.build_context(document, "draft", "s1")

    assert result.mode == "fallback"
    assert result.context == document[:5000]
    assert result.degraded_reason.startswith("ValueError")
    assert embedding_service.requests == []
