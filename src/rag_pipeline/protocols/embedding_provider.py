"""Embedding provider protocol.

Defines the interface for any remote embedding service that can convert
text to vector embeddings.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services.

    Implementations raise ``PipelineError`` subclasses for transport and
    contract failures and never retry on their own.
    """

    @property
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors.

        Returns:
            The vector dimension (e.g., 768)
        """
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats
        """
        ...

    async def encode_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for multiple texts in one call.

        Args:
            texts: List of texts to encode

        Returns:
            List of embedding vectors, in input order
        """
        ...
