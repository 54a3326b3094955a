"""
Session Vector Store

In-memory, session-scoped storage for embedded reference-document chunks.

A session holds the embeddings of one ingested document so repeated queries
against it can skip re-chunking and re-embedding. Sessions expire after a
period of inactivity.

Design choices
--------------
- In-memory only (no persistence across process restarts).
- One entry per session id; `store()` replaces the whole document set.
- Thread-safe access using a re-entrant lock.
- Copy-on-read semantics (callers cannot mutate internal state).
- Injectable clock so expiry can be tested without sleeping.
- No implicit background timer: `evict_expired()` is called explicitly, either
  by `EvictionScheduler` or directly by tests and operators.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from threading import RLock
from typing import Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from ..embeddings.models import EmbeddingDocument
from ..rag.similarity import find_top_k_similar

logger = logging.getLogger("stylematch.vector_store")

DEFAULT_TTL_SECONDS = 60 * 60


@dataclass
class VectorStoreEntry:
    """Documents stored for one session, with activity timestamps."""

    documents: List[EmbeddingDocument] = field(default_factory=list)
    created_at: float = 0.0
    last_accessed: float = 0.0


class ScoredDocument(BaseModel):
    """A stored document and its similarity to the query."""

    document: EmbeddingDocument
    score: float

    model_config = ConfigDict(extra="forbid", frozen=True)


class StoreStats(BaseModel):
    total_sessions: int
    total_documents: int
    oldest_session: Optional[float] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class SessionVectorStore:
    """
    In-memory store mapping session IDs to embedded documents.

    Intended for a single server process with a modest number of short-lived
    sessions, each holding tens of chunks.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize a new SessionVectorStore.

        Parameters
        ----------
        ttl_seconds : float
            Idle time after which a session becomes evictable.

        clock : Callable[[], float]
            Time source in seconds. Defaults to `time.monotonic`.
        """
        self._entries: Dict[str, VectorStoreEntry] = {}
        self._lock = RLock()
        self._ttl = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def store(self, session_id: str, documents: Sequence[EmbeddingDocument]) -> None:
        """
        Replace the document set of a session.

        Both `created_at` and `last_accessed` are reset to now. There is no
        merge with previously stored documents.
        """
        now = self._clock()
        with self._lock:
            self._entries[session_id] = VectorStoreEntry(
                documents=list(documents),
                created_at=now,
                last_accessed=now,
            )

        logger.info("Stored %d embeddings for session %s", len(documents), session_id)

    def query(
        self,
        session_id: str,
        query_vector: Sequence[float],
        top_k: int = 5,
    ) -> List[ScoredDocument]:
        """
        Return up to `top_k` documents ranked by cosine similarity.

        An unknown or empty session yields an empty list. A successful lookup
        refreshes the session's `last_accessed` timestamp.

        Raises
        ------
        DimensionMismatchError
            If the query vector length differs from a stored embedding.
        """
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None or not entry.documents:
                return []

            entry.last_accessed = self._clock()
            documents = list(entry.documents)

        candidates = [(i, doc.embedding) for i, doc in enumerate(documents)]
        matches = find_top_k_similar(query_vector, candidates, top_k)

        return [
            ScoredDocument(document=documents[i], score=score)
            for i, score in matches
        ]

    def has(self, session_id: str) -> bool:
        """True if the session exists and holds at least one document."""
        with self._lock:
            entry = self._entries.get(session_id)
            return entry is not None and len(entry.documents) > 0

    def get_documents(self, session_id: str) -> List[EmbeddingDocument]:
        """Copy of the session's documents; empty if unknown."""
        with self._lock:
            entry = self._entries.get(session_id)
            return list(entry.documents) if entry else []

    def evict_expired(self) -> int:
        """
        Remove every session idle for longer than the TTL.

        Returns
        -------
        int
            Number of sessions removed.
        """
        now = self._clock()
        with self._lock:
            expired = [
                session_id
                for session_id, entry in self._entries.items()
                if now - entry.last_accessed > self._ttl
            ]
            for session_id in expired:
                del self._entries[session_id]

        if expired:
            logger.info("Evicted %d expired sessions", len(expired))

        return len(expired)

    # ------------------------------------------------------------------
    # Utility operations
    # ------------------------------------------------------------------

    def clear(self, session_id: str) -> bool:
        """
        Remove a session. Returns True if it existed.
        """
        with self._lock:
            removed = self._entries.pop(session_id, None) is not None

        if removed:
            logger.info("Cleared session %s", session_id)
        return removed

    def clear_all(self) -> int:
        """
        Remove all sessions. Returns how many were removed.

        Intended primarily for test setup/teardown or administrative resets.
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()

        logger.info("Cleared all %d sessions", count)
        return count

    def stats(self) -> StoreStats:
        with self._lock:
            entries = list(self._entries.values())

        return StoreStats(
            total_sessions=len(entries),
            total_documents=sum(len(e.documents) for e in entries),
            oldest_session=min((e.last_accessed for e in entries), default=None),
        )

    def __len__(self) -> int:
        """
        Return the number of sessions in the store.
        """
        with self._lock:
            return len(self._entries)
