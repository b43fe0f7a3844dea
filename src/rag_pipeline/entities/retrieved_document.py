"""Retrieved document domain entity."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RetrievedDocument:
    """An exemplar returned by the vector retriever.

    Attributes:
        id: Document identifier in the vector store
        text: Document content
        metadata: Stored metadata (section, category, rating, ...)
        score: Cosine similarity to the query (1 = identical)
    """

    id: str
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)
    score: float = 0.0

    @property
    def section(self) -> str | None:
        return self.metadata.get("section")

    @property
    def rating(self) -> float | None:
        rating = self.metadata.get("rating")
        return float(rating) if rating is not None else None
