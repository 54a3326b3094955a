"""
API Models

Pydantic request/response models for the RAG and Linguistic DNA endpoints.
Domain records (TextChunk, LinguisticDNA, RetrievalResult, ...) are reused
directly as response bodies where their shape already fits.
"""

from __future__ import annotations

from typing import List, Optional, Dict, Any, Literal
from pydantic import BaseModel, Field, ConfigDict

from ..dna.models import LinguisticDNA
from ..embeddings.models import TextChunk
from ..rag.chunker import ChunkStats


class OperationResult(BaseModel):
    """
    Standardized mutation operation result.
    """
    status: Literal["deleted", "evicted", "ok"]
    count: Optional[int] = Field(default=None, ge=0)
    details: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# RAG Models
# ---------------------------------------------------------------------

class ChunkRequest(BaseModel):
    text: str
    chunk_size: int = Field(default=500, ge=60, le=20000)
    overlap: int = Field(default=100, ge=0)

    model_config = ConfigDict(extra="forbid")


class ChunkResponse(BaseModel):
    chunks: List[TextChunk]
    stats: ChunkStats
    use_rag: bool
    estimated_tokens: int

    model_config = ConfigDict(extra="forbid")


class ContextRequest(BaseModel):
    """
    Request for retrieval-augmented context.
    """
    document: str = Field(..., min_length=1)
    draft: str = Field(..., min_length=1)
    session_id: str = Field(..., min_length=1, max_length=128)

    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------
# Linguistic DNA Models
# ---------------------------------------------------------------------

class AnalyzeRequest(BaseModel):
    text: str

    model_config = ConfigDict(extra="forbid")


class CompileRequest(BaseModel):
    dna: LinguisticDNA
    intent: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid")


class CompileResponse(BaseModel):
    prompt: str

    model_config = ConfigDict(extra="forbid")


class ScoreRequest(BaseModel):
    reference: LinguisticDNA
    generated_text: str

    model_config = ConfigDict(extra="forbid")


class ScoreResponse(BaseModel):
    score: int = Field(..., ge=0, le=100)

    model_config = ConfigDict(extra="forbid")
