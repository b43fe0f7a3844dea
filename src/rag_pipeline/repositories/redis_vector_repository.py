"""Redis implementation of VectorStore.

This repository uses Redis Stack with vector search capabilities (HNSW index)
through redisvl. It holds the exemplar templates used to augment prompts and
satisfies the VectorStore protocol.
"""

import json
from typing import Any

import numpy as np
import redis
from redisvl.index import SearchIndex
from redisvl.query import VectorRangeQuery
from redisvl.query.filter import FilterExpression, Num, Tag

from rag_pipeline.config import get_redis_client, settings
from rag_pipeline.entities import RetrievedDocument, SearchFilter
from rag_pipeline.utils.logger import get_logger

logger = get_logger(__name__)

_RETURN_FIELDS = ["doc_id", "content", "section", "category", "rating", "metadata"]


class RedisVectorRepository:
    """Redis vector store using an HNSW index with COSINE distance.

    This class satisfies the VectorStore protocol through structural
    typing - no explicit inheritance needed.

    Documents are stored as hashes under ``<index>:<doc_id>`` with the
    filterable metadata (section, category, rating) as dedicated fields
    and the rest of the metadata as a JSON string.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        index_name: str | None = None,
        dimension: int | None = None,
    ) -> None:
        """Initialize the Redis vector repository.

        Args:
            redis_client: Redis client instance. If None, creates default.
            index_name: Name of the Redis search index.
            dimension: Embedding dimension. Defaults to settings.embedding_dimension.
        """
        self._client = redis_client or get_redis_client()
        self._index_name = index_name or settings.vector_index_name
        self._dimension = dimension or settings.embedding_dimension
        self._index: SearchIndex | None = None

        self._ensure_index()

    @classmethod
    def create(
        cls,
        index_name: str | None = None,
        dimension: int | None = None,
    ) -> "RedisVectorRepository":
        """Factory method to create RedisVectorRepository with defaults.

        Args:
            index_name: Redis index name. If None, uses settings.
            dimension: Vector dimension. If None, uses settings.

        Returns:
            Configured RedisVectorRepository
        """
        return cls(index_name=index_name, dimension=dimension)

    def _ensure_index(self) -> None:
        """Ensure the Redis vector index exists."""
        if self._index is not None:
            return

        index_schema = {
            "index": {
                "name": self._index_name,
                "prefix": self._index_name,
                "storage_type": "hash",
            },
            "fields": [
                {"name": "doc_id", "type": "tag"},
                {"name": "content", "type": "text"},
                {"name": "section", "type": "tag"},
                {"name": "category", "type": "tag"},
                {"name": "rating", "type": "numeric"},
                {"name": "metadata", "type": "text"},
                {
                    "name": "embedding",
                    "type": "vector",
                    "attrs": {
                        "dims": self._dimension,
                        "algorithm": "HNSW",
                        "metric": "COSINE",
                        "datatype": "float32",
                    },
                },
            ],
        }

        self._index = SearchIndex.from_dict(index_schema, redis_client=self._client)

        if self._index.exists():
            logger.info("Using existing vector index: %s", self._index_name)
        else:
            self._index.create(overwrite=False)
            logger.info("Created vector index: %s (dims=%d)", self._index_name, self._dimension)

    @staticmethod
    def build_filter(search_filter: SearchFilter) -> FilterExpression:
        """Translate a SearchFilter into a redisvl filter expression.

        Args:
            search_filter: The metadata filter

        Returns:
            Combined filter expression
        """
        expression = Tag("section") == search_filter.section
        if search_filter.category:
            expression = expression & (Tag("category") == search_filter.category)
        return expression & (Num("rating") >= search_filter.min_rating)

    def similarity_search(
        self,
        vector: list[float],
        search_filter: SearchFilter,
        similarity_floor: float,
        top_k: int,
    ) -> list[RetrievedDocument]:
        """Find documents similar to ``vector``.

        Redis reports cosine distance (0 = identical), so the similarity
        floor is applied as a distance threshold of ``1 - similarity_floor``.

        Args:
            vector: The query embedding
            search_filter: Metadata filter
            similarity_floor: Minimum cosine similarity (0-1)
            top_k: Maximum number of results

        Returns:
            Matching documents sorted by descending similarity
        """
        if self._index is None or top_k <= 0:
            return []

        query = VectorRangeQuery(
            vector=vector,
            vector_field_name="embedding",
            return_fields=_RETURN_FIELDS,
            filter_expression=self.build_filter(search_filter),
            distance_threshold=1.0 - similarity_floor,
            num_results=top_k,
        )

        results = self._index.query(query)

        documents = [self._to_document(result) for result in results]
        documents.sort(key=lambda d: d.score, reverse=True)
        return documents[:top_k]

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

        Raises:
            ValueError: If lengths or dimensions do not match
        """
        if len(documents) != len(vectors):
            raise ValueError(
                f"Got {len(documents)} documents but {len(vectors)} vectors"
            )
        if self._index is None:
            return []

        records = []
        for (doc_id, text, metadata), vector in zip(documents, vectors):
            if len(vector) != self._dimension:
                raise ValueError(
                    f"Vector for '{doc_id}' has dimension {len(vector)}, expected {self._dimension}"
                )

            extra = {k: v for k, v in metadata.items() if k not in ("section", "category", "rating")}
            records.append(
                {
                    "doc_id": doc_id,
                    "content": text,
                    "section": str(metadata.get("section", "")),
                    "category": str(metadata.get("category", "")),
                    "rating": float(metadata.get("rating", 0)),
                    "metadata": json.dumps(extra, ensure_ascii=False),
                    "embedding": np.asarray(vector, dtype=np.float32).tobytes(),
                }
            )

        self._index.load(records, id_field="doc_id")
        return [doc_id for doc_id, _, _ in documents]

    def delete(self, ids: list[str]) -> int:
        """Delete documents by id.

        Args:
            ids: Document ids

        Returns:
            Number of documents deleted
        """
        if not ids:
            return 0
        keys = [self._key(doc_id) for doc_id in ids]
        result: int = self._client.delete(*keys)  # type: ignore[assignment]
        return result

    def count_all(self) -> int:
        """Count documents in the index.

        Returns:
            Total number of stored documents
        """
        count = 0
        for _ in self._client.scan_iter(match=f"{self._index_name}:*"):
            count += 1
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible."""
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def _key(self, doc_id: str) -> str:
        return f"{self._index_name}:{doc_id}"

    @staticmethod
    def _to_document(result: dict[str, Any]) -> RetrievedDocument:
        metadata: dict[str, Any] = {}
        raw_metadata = result.get("metadata")
        if raw_metadata:
            try:
                metadata.update(json.loads(raw_metadata))
            except json.JSONDecodeError:
                metadata["raw"] = raw_metadata

        metadata["section"] = result.get("section")
        if result.get("category"):
            metadata["category"] = result["category"]
        if result.get("rating") is not None:
            metadata["rating"] = float(result["rating"])

        distance = float(result.get("vector_distance", 2.0))
        return RetrievedDocument(
            id=result.get("doc_id") or result.get("id", ""),
            text=result.get("content", ""),
            metadata=metadata,
            score=1.0 - distance,
        )

    @property
    def index_name(self) -> str:
        """Get the index name."""
        return self._index_name
