"""
Shared test fixtures.

Provides a fake OpenRouter-compatible embedding service backed by
httpx.MockTransport, so the real Embedder code path (payload building,
response validation, batching) runs without network access.
"""

import json
from typing import List, Optional, Set

import httpx
import pytest

from stylematch_server.embeddings.embedder import Embedder

EMBED_URL = "https://embeddings.test/v1/embeddings"
TEST_DIMENSION = 3


def fake_vector(text: str) -> List[float]:
    """Deterministic, never-zero 3-d vector derived from the text."""
    return [
        1.0 + len(text) % 5,
        1.0 + text.count("e") % 7,
        1.0 + text.count("o") % 3,
    ]


class FakeEmbeddingService:
    """
    Records every request and answers with `fake_vector` embeddings.

    fail_calls   1-based call numbers that answer with HTTP 500
    fail_batches answer 500 to every list-input request
    fail_single  answer 500 to every single-string request
    """

    def __init__(self) -> None:
        self.requests: List[dict] = []
        self.fail_calls: Set[int] = set()
        self.fail_batches = False
        self.fail_single = False
        self.dimension: Optional[int] = None

    @property
    def batch_requests(self) -> List[dict]:
        return [r for r in self.requests if isinstance(r["input"], list)]

    @property
    def single_requests(self) -> List[dict]:
        return [r for r in self.requests if isinstance(r["input"], str)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        call_number = len(self.requests)

        inputs = payload["input"]
        is_batch = isinstance(inputs, list)

        if (
            call_number in self.fail_calls
            or (is_batch and self.fail_batches)
            or (not is_batch and self.fail_single)
        ):
            return httpx.Response(500, text="upstream exploded")

        texts = inputs if is_batch else [inputs]
        data = []
        for i, text in enumerate(texts):
            vector = fake_vector(text)
            if self.dimension is not None:
                vector = (vector * self.dimension)[: self.dimension]
            data.append({"object": "embedding", "index": i, "embedding": vector})

        return httpx.Response(200, json={"data": data, "model": payload["model"]})

    def embedder(self, batch_size: int = 10) -> Embedder:
        return Embedder(
            api_key="test-key",
            model="test-model",
            base_url=EMBED_URL,
            dimension=TEST_DIMENSION,
            batch_size=batch_size,
            transport=httpx.MockTransport(self.handler),
        )


@pytest.fixture
def embedding_service() -> FakeEmbeddingService:
    return FakeEmbeddingService()


@pytest.fixture
def embedder(embedding_service) -> Embedder:
    return embedding_service.embedder()


def make_document(target_length: int = 6000) -> str:
    """Prose of roughly `target_length` characters made of varied sentences."""
    sentences = []
    i = 0
    while sum(len(s) + 1 for s in sentences) < target_length:
        sentences.append(
            f"Paragraph {i} explains how the team shipped feature number {i} "
            f"after {i % 7 + 2} rounds of review."
        )
        i += 1
    return " ".join(sentences)[:target_length]
