"""
Text Chunker

Splits long reference documents into overlapping, sentence-aware chunks for
embedding and retrieval.

Each window has a nominal size; its boundary is snapped to the first sentence
ending found in a small window around the nominal end, or to the nearest
preceding space when no sentence ending is close. Consecutive chunks overlap
so context at the boundaries is not lost.

All functions here are pure and deterministic.
"""

from __future__ import annotations

import math
import re
from typing import List, Sequence

from pydantic import BaseModel, ConfigDict

from ..embeddings.models import TextChunk

DEFAULT_CHUNK_SIZE = 500
DEFAULT_OVERLAP = 100
RAG_THRESHOLD = 2000

# Characters scanned before/after the nominal end for a sentence boundary.
BOUNDARY_WINDOW = 50

_SENTENCE_END = re.compile(r"[.!?]\s+")


class ChunkStats(BaseModel):
    """Size statistics for a chunk sequence."""

    count: int
    avg_size: int
    min_size: int
    max_size: int
    total_size: int

    model_config = ConfigDict(extra="forbid", frozen=True)


def _find_boundary(text: str, start: int, end: int, chunk_size: int) -> int:
    search_start = max(start + chunk_size - BOUNDARY_WINDOW, start)
    search_text = text[search_start : end + BOUNDARY_WINDOW]

    match = _SENTENCE_END.search(search_text)
    if match:
        return search_start + match.end()

    word_boundary = text.rfind(" ", 0, end + 1)
    if word_boundary > start:
        return word_boundary

    return end


def split_text(
    text: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    overlap: int = DEFAULT_OVERLAP,
) -> List[TextChunk]:
    """
    Split text into overlapping chunks.

    Parameters
    ----------
    text : str
        Source text. Leading/trailing whitespace is removed first and all
        offsets refer to the trimmed text.

    chunk_size : int
        Nominal chunk size in characters.

    overlap : int
        Characters shared between consecutive chunks.

    Returns
    -------
    List[TextChunk]
        Chunks in increasing `start_index` order. Empty for blank input.

    Raises
    ------
    ValueError
        If `chunk_size` is not positive or `overlap` is negative.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0:
        raise ValueError(f"overlap must not be negative, got {overlap}")

    cleaned = text.strip()

    if not cleaned:
        return []

    if len(cleaned) <= chunk_size:
        return [TextChunk(id=0, text=cleaned, start_index=0, end_index=len(cleaned))]

    chunks: List[TextChunk] = []
    length = len(cleaned)
    chunk_id = 0
    start = 0

    while start < length:
        end = min(start + chunk_size, length)

        if end < length:
            end = _find_boundary(cleaned, start, end, chunk_size)

        chunk = cleaned[start:end].strip()
        if chunk:
            chunks.append(
                TextChunk(id=chunk_id, text=chunk, start_index=start, end_index=end)
            )
            chunk_id += 1

        if end >= length:
            break

        next_start = end - overlap
        if next_start <= start:
            # Overlap swallowed the whole chunk; move on without overlap.
            next_start = end
        start = next_start

    return chunks


def should_use_rag(text: str, threshold: int = RAG_THRESHOLD) -> bool:
    """True if `text` is long enough to be chunked and retrieved rather than used verbatim."""
    return len(text) > threshold


def estimate_tokens(text: str) -> int:
    """Rough token count (~4 characters per token). Planning only."""
    return math.ceil(len(text) / 4)


def reconstruct_from_chunks(chunks: Sequence[TextChunk]) -> str:
    """
    Rejoin chunk texts with single spaces.

    Lossy (overlap is duplicated, whitespace is normalized); for display and
    debugging only. Use the chunk offsets for exact reconstruction.
    """
    return " ".join(c.text for c in chunks)


def get_chunk_stats(chunks: Sequence[TextChunk]) -> ChunkStats:
    if not chunks:
        return ChunkStats(count=0, avg_size=0, min_size=0, max_size=0, total_size=0)

    sizes = [len(c.text) for c in chunks]
    total = sum(sizes)

    return ChunkStats(
        count=len(chunks),
        avg_size=math.floor(total / len(chunks) + 0.5),
        min_size=min(sizes),
        max_size=max(sizes),
        total_size=total,
    )
