"""Embedding gateway.

Converts text into a fixed-length vector through the embedding provider,
with results cached by a stable hash of the text.
"""

import time

import numpy as np

from rag_pipeline.entities import EmbeddingVector
from rag_pipeline.errors import InternalError, UpstreamMalformedError
from rag_pipeline.protocols import CacheStore, EmbeddingProvider
from rag_pipeline.utils.logger import get_logger
from rag_pipeline.utils.text import stable_hash

logger = get_logger(__name__)


class EmbeddingService:
    """Cache-backed embedding gateway.

    No retries are performed; provider failures propagate as typed
    ``PipelineError`` subclasses.

    Example:
        ```python
        service = EmbeddingService.create(
            provider=GeminiEmbeddingProvider.create(),
            cache=caches.region("embeddings"),
        )
        vector = await service.embed("How do I write a good title?")
        ```
    """

    def __init__(self, provider: EmbeddingProvider, cache: CacheStore) -> None:
        """Initialize the embedding service.

        Args:
            provider: Remote embedding provider (required).
            cache: Cache region for embeddings (required).
        """
        self._provider = provider
        self._cache = cache

    @classmethod
    def create(cls, provider: EmbeddingProvider, cache: CacheStore) -> "EmbeddingService":
        """Factory method to create EmbeddingService.

        Args:
            provider: Remote embedding provider.
            cache: Cache region for embeddings.

        Returns:
            Configured EmbeddingService instance
        """
        return cls(provider=provider, cache=cache)

    @staticmethod
    def cache_key(text: str) -> str:
        return f"emb:{stable_hash(text)}"

    async def embed(self, text: str) -> EmbeddingVector:
        """Embed a text.

        Business logic:
        1. Empty text yields the all-zero vector without a remote call
        2. Look up the cache by text hash
        3. On miss, call the provider once, validate and cache the result

        Args:
            text: The text to embed (may be empty, not None)

        Returns:
            The embedding vector

        Raises:
            InternalError: If text is None
            UpstreamMalformedError: If the provider result is not a valid vector
        """
        if text is None:
            raise InternalError("Cannot embed None")

        if text == "":
            return EmbeddingVector(values=(0.0,) * self._provider.dimension, model=self._provider.model_name)

        key = self.cache_key(text)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Embedding cache hit key=%s", key[:16])
            return cached

        values = await self._provider.encode(text)
        vector = EmbeddingVector(values=self._validate(values), model=self._provider.model_name)

        self._cache.set(key, vector)
        return vector

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingVector]:
        """Embed several non-empty texts with a single provider call.

        Results are validated and written to the cache like ``embed``.

        Args:
            texts: Texts to embed

        Returns:
            One vector per text, in input order
        """
        if not texts:
            return []

        batch = await self._provider.encode_batch(texts)
        vectors = []
        for text, values in zip(texts, batch):
            vector = EmbeddingVector(values=self._validate(values), model=self._provider.model_name)
            self._cache.set(self.cache_key(text), vector)
            vectors.append(vector)
        return vectors

    def _validate(self, values: object) -> tuple[float, ...]:
        """Check the provider result is a finite 1-D array of the expected length."""
        try:
            array = np.asarray(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise UpstreamMalformedError("Embedding is not a numeric array") from e

        if array.ndim != 1:
            raise UpstreamMalformedError(f"Embedding has {array.ndim} dimensions, expected a flat array")

        expected = self._provider.dimension
        if array.shape[0] != expected:
            raise UpstreamMalformedError(f"Embedding dimension mismatch: got {array.shape[0]}, expected {expected}")

        if not np.all(np.isfinite(array)):
            raise UpstreamMalformedError("Embedding contains non-finite values")

        return tuple(array.tolist())

    async def describe(self, text: str) -> dict:
        """Embed a text and report diagnostics.

        Args:
            text: The text to embed

        Returns:
            Dictionary with dimension, model, a preview and timing
        """
        start_time = time.perf_counter()
        vector = await self.embed(text)
        return {
            "text_length": len(text),
            "dimension": vector.dimension,
            "model": vector.model,
            "preview": list(vector.values[:5]),
            "elapsed_ms": (time.perf_counter() - start_time) * 1000,
        }

    @property
    def provider(self) -> EmbeddingProvider:
        """Get the underlying embedding provider (for testing)."""
        return self._provider
