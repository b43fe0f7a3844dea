"""Pytest configuration and shared stubs."""

import hashlib
import os
import time

os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest  # noqa: E402

from rag_pipeline.entities import RetrievedDocument  # noqa: E402
from rag_pipeline.repositories import InMemoryCacheRepository  # noqa: E402
from rag_pipeline.services import (  # noqa: E402
    CacheService,
    EmbeddingService,
    PipelineService,
    RetrievalService,
)
from rag_pipeline.services.cache_service import EMBEDDINGS, JOB_MATCH, RESULTS, SEARCH  # noqa: E402

DIMENSION = 4


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubEmbeddingProvider:
    """Deterministic EmbeddingProvider; counts remote calls."""

    def __init__(self, dimension: int = DIMENSION, vector: list[float] | None = None) -> None:
        self._dimension = dimension
        self.vector = vector
        self.calls: list[str] = []
        self.batch_calls: list[list[str]] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return "stub-embedding"

    def _vector_for(self, text: str) -> list[float]:
        if self.vector is not None:
            return list(self.vector)
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [digest[i] / 255.0 + 0.01 for i in range(self._dimension)]

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        return self._vector_for(text)

    async def encode_batch(self, texts: list[str]) -> list[list[float]]:
        self.batch_calls.append(list(texts))
        return [self._vector_for(text) for text in texts]


class StubVectorStore:
    """In-memory VectorStore returning canned documents per section.

    ``delay`` blocks the worker thread, like a slow Redis round trip.
    """

    def __init__(
        self,
        documents: dict[str, list[RetrievedDocument]] | None = None,
        delay: float = 0.0,
        fail_sections: set[str] | None = None,
    ) -> None:
        self.documents = documents or {}
        self.delay = delay
        self.fail_sections = fail_sections or set()
        self.searches: list[tuple] = []
        self.added: list[tuple[list, list]] = []
        self.deleted: list[str] = []

    def similarity_search(self, vector, search_filter, similarity_floor, top_k):
        self.searches.append((vector, search_filter, similarity_floor, top_k))
        if self.delay:
            time.sleep(self.delay)
        if search_filter.section in self.fail_sections:
            raise ConnectionError(f"store unavailable for {search_filter.section}")
        return list(self.documents.get(search_filter.section, []))[:top_k]

    def add(self, documents, vectors):
        self.added.append((list(documents), list(vectors)))
        return [doc_id for doc_id, _, _ in documents]

    def delete(self, ids):
        self.deleted.extend(ids)
        return len(ids)


class StubGenerator:
    """TextGenerator whose output is computed from the prompt."""

    def __init__(self, respond=None) -> None:
        self.respond = respond or (lambda prompt: "generated text")
        self.prompts: list[str] = []

    @property
    def model_name(self) -> str:
        return "stub-generator"

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        result = self.respond(prompt)
        if isinstance(result, Exception):
            raise result
        return result


def _make_document(doc_id: str, text: str, section: str, score: float = 0.9) -> RetrievedDocument:
    return RetrievedDocument(id=doc_id, text=text, metadata={"section": section, "rating": 5.0}, score=score)


@pytest.fixture
def make_document():
    return _make_document


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def caches(clock):
    """Cache regions on the fake clock."""
    return CacheService(
        regions={
            EMBEDDINGS: InMemoryCacheRepository(EMBEDDINGS, max_size=100, ttl=300, clock=clock),
            SEARCH: InMemoryCacheRepository(SEARCH, max_size=500, ttl=180, clock=clock),
            JOB_MATCH: InMemoryCacheRepository(JOB_MATCH, max_size=200, ttl=600, clock=clock),
            RESULTS: InMemoryCacheRepository(RESULTS, max_size=1000, ttl=3600, clock=clock),
        }
    )


@pytest.fixture
def provider():
    return StubEmbeddingProvider()


@pytest.fixture
def store():
    return StubVectorStore()


@pytest.fixture
def generator():
    return StubGenerator()


@pytest.fixture
def embeddings(provider, caches):
    return EmbeddingService(provider=provider, cache=caches.region(EMBEDDINGS))


@pytest.fixture
def retriever(embeddings, store, caches):
    return RetrievalService(
        embeddings=embeddings,
        store=store,
        cache=caches.region(SEARCH),
        similarity_floor=0.3,
        min_rating=3,
        top_k=5,
        section_timeout=2.0,
    )


@pytest.fixture
def pipeline(retriever, generator, caches):
    return PipelineService(retriever=retriever, generator=generator, caches=caches, top_k=5)
