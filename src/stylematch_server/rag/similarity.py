"""
Vector Similarity

Pure numeric helpers for comparing embeddings. Vectors are accepted as any
float sequence and converted to numpy arrays internally.

Corpus sizes are small (tens of chunks per session), so top-k search is a
linear scan over all candidates.
"""

from __future__ import annotations

import math
from typing import Hashable, List, Sequence, Tuple

import numpy as np

Vector = Sequence[float]


class DimensionMismatchError(ValueError):
    """Raised when two vectors that must be compared have different lengths."""


def _as_pair(a: Vector, b: Vector) -> Tuple[np.ndarray, np.ndarray]:
    va = np.asarray(a, dtype="float64")
    vb = np.asarray(b, dtype="float64")
    if va.shape != vb.shape:
        raise DimensionMismatchError(
            f"Vector dimension mismatch: {len(va)} vs {len(vb)}"
        )
    return va, vb


def cosine_similarity(a: Vector, b: Vector) -> float:
    """
    Cosine similarity `(a·b) / (|a||b|)` in [-1, 1].

    Returns 0.0 for empty vectors or when either vector has zero norm.

    Raises
    ------
    DimensionMismatchError
        If the vectors differ in length.
    """
    va, vb = _as_pair(a, b)
    if va.size == 0:
        return 0.0

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return float(np.dot(va, vb) / (norm_a * norm_b))


def cosine_similarity_normalized(a: Vector, b: Vector) -> float:
    """Dot product. Only equals cosine similarity when both inputs are unit vectors."""
    va, vb = _as_pair(a, b)
    return float(np.dot(va, vb))


def normalize_vector(vector: Vector) -> List[float]:
    """Scale to unit Euclidean length. A zero vector is returned unchanged."""
    v = np.asarray(vector, dtype="float64")
    norm = float(np.linalg.norm(v))
    if norm == 0.0:
        return [float(x) for x in v]
    return (v / norm).tolist()


def euclidean_distance(a: Vector, b: Vector) -> float:
    va, vb = _as_pair(a, b)
    return float(np.linalg.norm(va - vb))


def batch_cosine_similarity(query: Vector, candidates: Sequence[Vector]) -> List[float]:
    return [cosine_similarity(query, c) for c in candidates]


def find_top_k_similar(
    query: Vector,
    candidates: Sequence[Tuple[Hashable, Vector]],
    k: int,
) -> List[Tuple[Hashable, float]]:
    """
    Rank candidates by cosine similarity to `query`.

    Parameters
    ----------
    query : Sequence[float]
        Query vector.

    candidates : Sequence[(id, vector)]
        Candidate ids and vectors.

    k : int
        Maximum number of results.

    Returns
    -------
    List[(id, score)]
        At most `min(k, len(candidates))` pairs, highest score first. Equal
        scores keep their original candidate order.
    """
    if k <= 0:
        return []

    scored = [(cid, cosine_similarity(query, vec)) for cid, vec in candidates]
    # sorted() is stable, so ties stay in candidate order.
    scored = sorted(scored, key=lambda pair: pair[1], reverse=True)
    return scored[:k]


def similarity_to_percentage(similarity: float) -> int:
    """Clamp a similarity to [0, 1] and express it as a whole percentage, rounding halves up."""
    return math.floor(max(0.0, min(1.0, similarity)) * 100 + 0.5)
