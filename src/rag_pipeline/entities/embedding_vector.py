"""Embedding vector domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmbeddingVector:
    """Fixed-length embedding produced by the embedding gateway.

    Attributes:
        values: The vector components, in order
        model: Identifier of the model that produced the vector
    """

    values: tuple[float, ...]
    model: str = ""

    @property
    def dimension(self) -> int:
        return len(self.values)

    @property
    def is_degenerate(self) -> bool:
        """True for the all-zero vector returned for empty text."""
        return not any(self.values)

    def to_list(self) -> list[float]:
        return list(self.values)
