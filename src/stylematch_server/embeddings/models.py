"""
Embedding Data Models

This module defines the canonical data models that flow through the
retrieval pipeline:

- TextChunk: one slice of a reference document, produced by the chunker
- EmbeddingDocument: one chunk paired with its embedding vector
- ChunkEmbedding / BatchEmbeddingResult: output of the batched embedding loop,
  which may be partial when individual batches fail

Each EmbeddingDocument corresponds to ONE embedding vector and ONE chunk of
text.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field, ConfigDict


class TextChunk(BaseModel):
    """
    A contiguous, sentence-aware slice of a larger document.

    Offsets refer to the trimmed source text the chunk was split from.
    """

    id: int = Field(..., ge=0, description="Ordinal, unique within one split.")
    text: str = Field(..., min_length=1)
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., gt=0)

    model_config = ConfigDict(extra="forbid", frozen=True)


class EmbeddingDocument(BaseModel):
    """
    A single embedded chunk held by the session vector store.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Document identifier, derived from the chunk id or supplied externally.",
    )

    text: str = Field(
        ...,
        description="Raw text content for this embedded chunk.",
    )

    embedding: List[float] = Field(
        ...,
        description="Embedding vector. Expected length is the model's declared dimension.",
    )

    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Open key/value map, e.g. source offsets.",
    )

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )


class ChunkEmbedding(BaseModel):
    """Embedding produced for one chunk id."""

    id: int
    embedding: List[float]

    model_config = ConfigDict(extra="forbid", frozen=True)


class BatchEmbeddingResult(BaseModel):
    """
    Result of embedding a sequence of chunks in batches.

    Failed batches are skipped rather than aborting the whole call; their
    chunk ids are listed in `failed_ids`.
    """

    embeddings: List[ChunkEmbedding] = Field(default_factory=list)
    failed_ids: List[int] = Field(default_factory=list)
    failed_batches: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")

    @property
    def partial(self) -> bool:
        return self.failed_batches > 0
