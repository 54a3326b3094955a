"""
RAG Orchestrator

Builds the "relevant context" for a generation request from a long reference
document and the user's draft.

Workflow
--------
1. Short documents are used verbatim.
2. If the session already holds embeddings, only the draft is embedded and the
   stored chunks are queried.
3. Otherwise the document is chunked, embedded in batches, stored under the
   session id, and then queried with the draft embedding.
4. Retrieved chunks are joined with a visible separator.

Retrieval is an enhancement, never a hard dependency of generation: any
failure along the way degrades to the first `fallback_chars` characters of the
raw document. The returned `RetrievalResult` records which path was taken and
why it degraded, if it did.
"""

from __future__ import annotations

import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .chunker import split_text, should_use_rag
from ..config import settings
from ..embeddings.embedder import Embedder
from ..embeddings.models import EmbeddingDocument
from ..sessions.vector_store import ScoredDocument, SessionVectorStore

logger = logging.getLogger("stylematch.rag")

CHUNK_SEPARATOR = "\n\n---\n\n"

RetrievalMode = Literal["verbatim", "cached", "retrieved", "raw_document", "fallback"]


class RetrievalResult(BaseModel):
    """
    Outcome of a context-building call.

    mode
        verbatim      document below the RAG threshold, returned as-is
        cached        session embeddings reused, only the draft was embedded
        retrieved     document chunked, embedded and stored in this call
        raw_document  chunking produced nothing, document returned as-is
        fallback      retrieval failed, truncated document returned
    """

    context: str
    mode: RetrievalMode
    degraded_reason: Optional[str] = None
    chunk_count: int = Field(default=0, ge=0)
    retrieved: List[ScoredDocument] = Field(default_factory=list)
    partial_embeddings: bool = False

    model_config = ConfigDict(extra="forbid")

    @property
    def degraded(self) -> bool:
        return self.mode == "fallback" or self.partial_embeddings


class NoEmbeddingsError(RuntimeError):
    pass


class RagOrchestrator:
    """
    Coordinates chunker -> embedder -> session store -> similarity search.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: SessionVectorStore,
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
        top_k: Optional[int] = None,
        rag_threshold: Optional[int] = None,
        fallback_chars: Optional[int] = None,
    ) -> None:
        self._embedder = embedder
        self._store = store
        self.chunk_size = chunk_size or settings.chunk_size
        self.overlap = settings.chunk_overlap if overlap is None else overlap
        self.top_k = top_k or settings.rag_top_k
        self.rag_threshold = rag_threshold or settings.rag_threshold
        self.fallback_chars = fallback_chars or settings.rag_fallback_chars

    async def build_context(
        self,
        document: str,
        draft: str,
        session_id: str,
    ) -> RetrievalResult:
        """
        Produce the context string to inject into a generation prompt.

        Parameters
        ----------
        document : str
            Full reference document.

        draft : str
            User draft used as the retrieval query.

        session_id : str
            Caller-supplied scope under which chunk embeddings are cached.

        Returns
        -------
        RetrievalResult
            Never raises; failures are reported via `mode="fallback"`.
        """
        if not should_use_rag(document, self.rag_threshold):
            return RetrievalResult(context=document, mode="verbatim")

        try:
            return await self._retrieve(document, draft, session_id)
        except Exception as exc:
            reason = f"{type(exc).__name__}: {exc}"
            logger.exception(
                "Retrieval failed for session %s, falling back to raw document",
                session_id,
            )
            return RetrievalResult(
                context=document[: self.fallback_chars],
                mode="fallback",
                degraded_reason=reason,
            )

    async def retrieve(self, document: str, draft: str, session_id: str) -> str:
        """Shortcut for `build_context(...).context`."""
        result = await self.build_context(document, draft, session_id)
        return result.context

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _retrieve(self, document: str, draft: str, session_id: str) -> RetrievalResult:
        if self._store.has(session_id):
            logger.info("Reusing cached embeddings for session %s", session_id)
            matches = await self._query(session_id, draft)
            return RetrievalResult(
                context=self._join(matches),
                mode="cached",
                chunk_count=len(self._store.get_documents(session_id)),
                retrieved=matches,
            )

        chunks = split_text(document, self.chunk_size, self.overlap)
        if not chunks:
            return RetrievalResult(context=document, mode="raw_document")

        batch = await self._embedder.embed_chunks(chunks)
        if not batch.embeddings:
            raise NoEmbeddingsError(
                f"no embeddings produced for {len(chunks)} chunks"
            )

        by_id = {c.id: c for c in chunks}
        documents = [
            EmbeddingDocument(
                id=f"chunk_{item.id}",
                text=by_id[item.id].text,
                embedding=item.embedding,
                metadata={
                    "chunk_id": item.id,
                    "start_index": by_id[item.id].start_index,
                    "end_index": by_id[item.id].end_index,
                },
            )
            for item in batch.embeddings
        ]

        self._store.store(session_id, documents)

        if batch.partial:
            logger.warning(
                "Session %s stored with %d of %d chunks embedded",
                session_id,
                len(documents),
                len(chunks),
            )

        matches = await self._query(session_id, draft)
        return RetrievalResult(
            context=self._join(matches),
            mode="retrieved",
            degraded_reason=(
                f"{len(batch.failed_ids)} chunks missing embeddings" if batch.partial else None
            ),
            chunk_count=len(chunks),
            retrieved=matches,
            partial_embeddings=batch.partial,
        )

    async def _query(self, session_id: str, draft: str) -> List[ScoredDocument]:
        query_vector = await self._embedder.embed(draft)
        return self._store.query(session_id, query_vector, self.top_k)

    @staticmethod
    def _join(matches: List[ScoredDocument]) -> str:
        return CHUNK_SEPARATOR.join(m.document.text for m in matches)
