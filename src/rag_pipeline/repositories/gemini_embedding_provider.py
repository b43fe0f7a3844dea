"""Gemini-based embedding provider.

Uses the Gemini ``embedContent`` endpoint to turn text into fixed-length
vectors, and ``batchEmbedContents`` for bulk ingestion.

Models available:
- gemini-embedding-001 (768 / 1536 / 3072 dims via outputDimensionality)
- text-embedding-004 (768 dims)
"""

import httpx
from pydantic import ValidationError

from rag_pipeline.config import settings
from rag_pipeline.dto import BatchEmbedContentsResponse, EmbedContentResponse
from rag_pipeline.errors import UpstreamMalformedError

from .gemini_client import GeminiClient


class GeminiEmbeddingProvider(GeminiClient):
    """Gemini implementation of the EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        provider = GeminiEmbeddingProvider.create()
        embedding = await provider.encode("Hello, world!")
        print(len(embedding))  # 768
        ```
    """

    provider_name = "Gemini embedding"

    def __init__(
        self,
        model_name: str | None = None,
        dimension: int | None = None,
        task_type: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Gemini embedding provider.

        Args:
            model_name: Embedding model. Defaults to settings.embedding_model.
            dimension: Output dimension. Defaults to settings.embedding_dimension.
            task_type: Gemini task type. Defaults to settings.embedding_task_type.
            api_key: API key. Defaults to settings.gemini_api_key.
            base_url: API base URL. Defaults to settings.gemini_base_url.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used in tests).
        """
        super().__init__(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout or settings.embedding_timeout,
            transport=transport,
        )
        self._model_name = model_name or settings.embedding_model
        self._dimension = dimension or settings.embedding_dimension
        self._task_type = task_type or settings.embedding_task_type

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        dimension: int | None = None,
    ) -> "GeminiEmbeddingProvider":
        """Factory method to create GeminiEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            dimension: Output dimension. If None, uses settings.

        Returns:
            Configured GeminiEmbeddingProvider
        """
        return cls(model_name=model_name, dimension=dimension)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    def _request(self, text: str) -> dict:
        return {
            "model": f"models/{self._model_name}",
            "content": {"parts": [{"text": text}]},
            "taskType": self._task_type,
            "outputDimensionality": self._dimension,
        }

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            UpstreamMalformedError: If the response has no embedding values
            PipelineTimeoutError: If the request timed out
            RateLimitedError: If the provider throttled the request
        """
        data = await self._post_json(self._url(self._model_name, "embedContent"), self._request(text))

        try:
            parsed = EmbedContentResponse.model_validate(data)
        except ValidationError as e:
            raise UpstreamMalformedError("Embedding response does not match the expected schema") from e

        if parsed.error is not None:
            raise UpstreamMalformedError(f"Embedding provider error: {parsed.error.message}")
        if parsed.embedding is None or not parsed.embedding.values:
            raise UpstreamMalformedError("Embedding response has no 'embedding.values'")

        return parsed.embedding.values

    async def encode_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts in one request.

        Args:
            texts: List of texts to encode

        Returns:
            List of embedding vectors, in input order
        """
        if not texts:
            return []

        payload = {"requests": [self._request(text) for text in texts]}
        data = await self._post_json(self._url(self._model_name, "batchEmbedContents"), payload)

        try:
            parsed = BatchEmbedContentsResponse.model_validate(data)
        except ValidationError as e:
            raise UpstreamMalformedError("Batch embedding response does not match the expected schema") from e

        if parsed.error is not None:
            raise UpstreamMalformedError(f"Embedding provider error: {parsed.error.message}")
        if parsed.embeddings is None or len(parsed.embeddings) != len(texts):
            raise UpstreamMalformedError(
                f"Batch embedding returned {len(parsed.embeddings or [])} vectors for {len(texts)} texts"
            )

        vectors = []
        for embedding in parsed.embeddings:
            if not embedding.values:
                raise UpstreamMalformedError("Batch embedding entry has no values")
            vectors.append(embedding.values)
        return vectors

    async def is_available(self) -> bool:
        """Check if the embedding provider is reachable.

        Returns:
            True if a test embedding succeeds, False otherwise
        """
        try:
            await self.encode("test")
            return True
        except Exception:
            return False
