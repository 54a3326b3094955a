"""
Embedding Client

This module implements the embedding client used by the retrieval pipeline.
It talks to an OpenRouter-compatible `/embeddings` endpoint and is
responsible for:

- Truncating oversized inputs to the model's approximate token budget
- Batching chunk embeddings to respect remote rate limits
- Isolating per-batch failures so one bad batch does not abort ingestion
- Validating response shape and surfacing dimension drift as warnings

The class holds no per-request state and is safe to reuse across requests.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, List, Optional, Sequence

import httpx

from .models import BatchEmbeddingResult, ChunkEmbedding, TextChunk
from ..config import settings

logger = logging.getLogger("stylematch.embedder")

CHARS_PER_TOKEN = 4
WORD_BOUNDARY_MIN_RATIO = 0.8

_LAST_SENTENCE = re.compile(r".*[.!?]", re.DOTALL)

ProgressCallback = Callable[[int, int], None]


class EmbeddingServiceError(RuntimeError):
    """
    Raised when the embedding service rejects a request or returns an
    unusable response.

    `status_code` is None for transport failures and malformed payloads.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# ---------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------

def truncate_to_tokens(text: str, max_tokens: int = 512) -> str:
    """
    Truncate text to an approximate token budget (~4 characters per token).

    Prefers the last sentence boundary within the budget, then the last word
    boundary if it keeps at least 80% of the budget, else a hard cut.
    """
    max_chars = max_tokens * CHARS_PER_TOKEN

    if len(text) <= max_chars:
        return text

    truncated = text[:max_chars]

    sentence = _LAST_SENTENCE.match(truncated)
    if sentence:
        return sentence.group(0)

    last_space = truncated.rfind(" ")
    if last_space > max_chars * WORD_BOUNDARY_MIN_RATIO:
        return truncated[:last_space]

    return truncated


def validate_embedding(embedding: Sequence[float], dimension: Optional[int] = None) -> bool:
    """
    Return True if `embedding` is a list of finite numbers of the expected length.
    """
    expected = dimension if dimension is not None else settings.embedding_dimension
    if not isinstance(embedding, (list, tuple)) or len(embedding) != expected:
        return False
    return all(
        isinstance(x, (int, float)) and not isinstance(x, bool) and not math.isnan(x)
        for x in embedding
    )


def estimate_embedding_cost(text_length: int) -> float:
    """Cost in USD of embedding `text_length` characters. The reference model is free."""
    return 0.0


# ---------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------

class Embedder:
    """
    Asynchronous embedding generator.

    This class performs no caching; the session vector store is responsible
    for keeping embeddings around between requests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        dimension: Optional[int] = None,
        batch_size: Optional[int] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize an Embedder.

        Parameters
        ----------
        api_key : Optional[str]
            Override for the API key. Defaults to settings.openrouter_api_key.

        model : Optional[str]
            Override for the embedding model. Defaults to settings.embedding_model.

        base_url : Optional[str]
            Full URL of the embeddings endpoint.

        dimension : Optional[int]
            Expected output dimension, used for drift warnings only.

        batch_size : Optional[int]
            Number of chunks per request in `embed_chunks`.

        max_tokens : Optional[int]
            Approximate token budget each input is truncated to.

        timeout : Optional[float]
            HTTP timeout for each request.

        transport : Optional[httpx.AsyncBaseTransport]
            Custom transport, mainly for tests (e.g. httpx.MockTransport).
        """
        self.api_key = api_key or settings.openrouter_api_key.get_secret_value()
        self.model = model or settings.embedding_model
        self.base_url = base_url or str(settings.embedding_api_url)
        self.dimension = dimension or settings.embedding_dimension
        self.batch_size = batch_size or settings.embedding_batch_size
        self.max_tokens = max_tokens or settings.embedding_max_tokens
        self.timeout = timeout or settings.embedding_timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def embed(self, text: str) -> List[float]:
        """
        Embed a single text.

        Raises
        ------
        EmbeddingServiceError
            On a non-success response or malformed payload.
        """
        embeddings = await self._request(truncate_to_tokens(text, self.max_tokens))
        if not embeddings:
            raise EmbeddingServiceError("Embedding response contained no vectors.")
        return embeddings[0]

    async def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed several texts in ONE request.

        Returns an empty list without calling the service when `texts` is empty.
        """
        if not texts:
            return []

        truncated = [truncate_to_tokens(t, self.max_tokens) for t in texts]
        return await self._request(truncated)

    async def embed_chunks(
        self,
        chunks: Sequence[TextChunk],
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchEmbeddingResult:
        """
        Embed chunks in fixed-size batches.

        A failing batch is logged and skipped; ingestion continues with the
        next batch. The embeddings of a failed batch are simply missing from
        the result and its chunk ids are reported in `failed_ids`.

        Parameters
        ----------
        chunks : Sequence[TextChunk]
            Chunks to embed, in order.

        on_progress : Optional[Callable[[int, int], None]]
            Called as `on_progress(completed, total)` after each successful batch.

        Returns
        -------
        BatchEmbeddingResult
        """
        result = BatchEmbeddingResult()
        total = len(chunks)

        for start in range(0, total, self.batch_size):
            batch = list(chunks[start : start + self.batch_size])

            try:
                vectors = await self.embed_batch([c.text for c in batch])
                if len(vectors) != len(batch):
                    raise EmbeddingServiceError(
                        f"Expected {len(batch)} embeddings, received {len(vectors)}."
                    )
            except EmbeddingServiceError as exc:
                logger.error(
                    "Embedding batch at offset %d failed (%d chunks): %s",
                    start,
                    len(batch),
                    exc,
                )
                result.failed_ids.extend(c.id for c in batch)
                result.failed_batches += 1
                continue

            result.embeddings.extend(
                ChunkEmbedding(id=chunk.id, embedding=vector)
                for chunk, vector in zip(batch, vectors)
            )

            if on_progress is not None:
                on_progress(min(start + self.batch_size, total), total)

        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": settings.app_referer,
            "X-Title": settings.app_title,
        }

    async def _request(self, payload_input) -> List[List[float]]:
        payload = {
            "model": self.model,
            "input": payload_input,
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self.base_url,
                    json=payload,
                    headers=self._headers(),
                )
            except httpx.HTTPError as exc:
                logger.error(
                    "Embedding request failed (%s): %s",
                    type(exc).__name__,
                    str(exc),
                )
                raise EmbeddingServiceError(
                    f"Embedding request failed: {type(exc).__name__}"
                ) from exc

        if not response.is_success:
            body = response.text
            logger.error("Embedding API error %d: %s", response.status_code, body[:500])
            raise EmbeddingServiceError(
                f"Embedding API error ({response.status_code}): {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise EmbeddingServiceError("Embedding response is not valid JSON.") from exc

        return self._extract_embeddings(data)

    def _extract_embeddings(self, data) -> List[List[float]]:
        """
        Parse and validate embedding output format.

        OpenAI-compatible services return:
            { "data": [ {"embedding": [...], "index": 0}, ... ] }

        Raises
        ------
        EmbeddingServiceError
            If the payload has an unexpected structure.
        """
        if not isinstance(data, dict) or "data" not in data:
            raise EmbeddingServiceError("Embedding response missing 'data' field.")

        records = data["data"]
        if not isinstance(records, list):
            raise EmbeddingServiceError("'data' field must be a list.")

        if all(isinstance(r, dict) and isinstance(r.get("index"), int) for r in records):
            records = sorted(records, key=lambda r: r["index"])

        embeddings: List[List[float]] = []

        for index, record in enumerate(records):
            if not isinstance(record, dict) or "embedding" not in record:
                raise EmbeddingServiceError(
                    f"Malformed embedding record at index {index}: {record!r}"
                )

            emb = record["embedding"]
            if not isinstance(emb, list) or not all(
                isinstance(x, (float, int)) and not isinstance(x, bool) for x in emb
            ):
                raise EmbeddingServiceError(
                    f"Invalid embedding vector at index {index}: must be float list."
                )

            if len(emb) != self.dimension:
                logger.warning(
                    "Unexpected embedding dimension at index %d: %d, expected %d",
                    index,
                    len(emb),
                    self.dimension,
                )

            embeddings.append([float(x) for x in emb])

        return embeddings
