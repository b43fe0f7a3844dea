"""Vector store protocol.

Defines the interface for a similarity-search backend holding the
exemplar documents used to augment prompts.
"""

from typing import Any, Protocol, runtime_checkable

from rag_pipeline.entities import RetrievedDocument, SearchFilter


@runtime_checkable
class VectorStore(Protocol):
    """Protocol for vector stores.

    Methods are synchronous; callers that need concurrency run them in a
    worker thread.
    """

    def similarity_search(
        self,
        vector: list[float],
        search_filter: SearchFilter,
        similarity_floor: float,
        top_k: int,
    ) -> list[RetrievedDocument]:
        """Find documents similar to ``vector``.

        Args:
            vector: The query embedding
            search_filter: Metadata filter
            similarity_floor: Minimum cosine similarity (0-1)
            top_k: Maximum number of results

        Returns:
            Matching documents sorted by descending similarity
        """
        ...

    def add(
        self,
        documents: list[tuple[str, str, dict[str, Any]]],
        vectors: list[list[float]],
    ) -> list[str]:
        """Store documents with their embeddings.

        Args:
            documents: (id, text, metadata) triples
            vectors: One embedding per document, same order

        Returns:
            The stored document ids
        """
        ...

    def delete(self, ids: list[str]) -> int:
        """Delete documents by id.

        Returns:
            Number of documents deleted
        """
        ...
