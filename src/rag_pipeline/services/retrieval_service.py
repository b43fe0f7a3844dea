"""Vector retriever.

Finds exemplar documents for a query with a filtered similarity search.
Retrieval only augments the prompt, so it is best-effort: any failure
is logged and degrades to an empty result instead of propagating.
"""

import asyncio
import time
from collections.abc import Mapping
from typing import Any

from rag_pipeline.config import settings
from rag_pipeline.entities import RetrievedDocument, SearchFilter
from rag_pipeline.errors import InternalError, PipelineError
from rag_pipeline.protocols import CacheStore, VectorStore
from rag_pipeline.utils.logger import get_logger
from rag_pipeline.utils.text import stable_hash

from .embedding_service import EmbeddingService

logger = get_logger(__name__)

INGEST_BATCH_SIZE = 50


class RetrievalService:
    """Cache-backed vector retriever with concurrent multi-section search.

    The vector store is synchronous; calls to it run in a worker thread
    so that concurrent section searches overlap.

    Example:
        ```python
        retriever = RetrievalService.create(
            embeddings=embedding_service,
            store=RedisVectorRepository.create(),
            cache=caches.region("search"),
        )
        docs = await retriever.search("my title", section="title", category="blog")
        by_section = await retriever.search_multiple_sections_parallel(
            {"summary": "...", "experience": "..."}, category="cv"
        )
        ```
    """

    def __init__(
        self,
        embeddings: EmbeddingService,
        store: VectorStore,
        cache: CacheStore,
        similarity_floor: float | None = None,
        min_rating: int | None = None,
        top_k: int | None = None,
        section_timeout: float | None = None,
    ) -> None:
        """Initialize the retrieval service.

        Args:
            embeddings: Embedding gateway (required).
            store: Vector store (required).
            cache: Cache region for search results (required).
            similarity_floor: Minimum cosine similarity. Defaults to settings.
            min_rating: Minimum document rating. Defaults to settings.
            top_k: Default result cap. Defaults to settings.
            section_timeout: Per-section deadline for parallel search. Defaults to settings.
        """
        self._embeddings = embeddings
        self._store = store
        self._cache = cache
        self._floor = similarity_floor if similarity_floor is not None else settings.similarity_threshold
        self._min_rating = min_rating if min_rating is not None else settings.min_rating
        self._top_k = top_k if top_k is not None else settings.retrieval_top_k
        self._section_timeout = section_timeout or settings.section_search_timeout

    @classmethod
    def create(
        cls,
        embeddings: EmbeddingService,
        store: VectorStore,
        cache: CacheStore,
        similarity_floor: float | None = None,
    ) -> "RetrievalService":
        """Factory method to create RetrievalService with settings defaults.

        Args:
            embeddings: Embedding gateway.
            store: Vector store.
            cache: Cache region for search results.
            similarity_floor: Minimum similarity. If None, uses settings.

        Returns:
            Configured RetrievalService instance
        """
        return cls(
            embeddings=embeddings,
            store=store,
            cache=cache,
            similarity_floor=similarity_floor,
        )

    @staticmethod
    def cache_key(query: str, search_filter: SearchFilter, top_k: int) -> str:
        category = search_filter.category or "-"
        return f"search:{stable_hash(query)}:{search_filter.section}:{category}:{top_k}"

    async def search(
        self,
        query: str | None,
        section: str,
        category: str | None = None,
        top_k: int | None = None,
    ) -> list[RetrievedDocument]:
        """Find exemplars for a query within one section.

        Business logic:
        1. Blank query or top_k <= 0 returns [] without any remote call
        2. Build the metadata filter (section, optional category, rating floor)
        3. Serve from cache when possible
        4. Embed the query and run the similarity search
        5. On any failure, log and return []

        Args:
            query: The text to search for
            section: Section to search in (title, description, content, ...)
            category: Optional category; "general" means any category
            top_k: Maximum number of results

        Returns:
            Documents sorted by descending similarity (possibly empty)
        """
        if query is None or not query.strip():
            return []

        top_k = top_k if top_k is not None else self._top_k
        if top_k <= 0:
            return []

        search_filter = SearchFilter(section=section, category=category, min_rating=self._min_rating)
        key = self.cache_key(query, search_filter, top_k)

        cached = self._cache.get_list(key)
        if cached is not None:
            logger.debug("Search cache hit section=%s", section)
            return cached

        try:
            vector = await self._embeddings.embed(query)
            documents = await asyncio.to_thread(
                self._store.similarity_search,
                vector.to_list(),
                search_filter,
                self._floor,
                top_k,
            )
        except Exception as e:
            logger.warning("Search failed (filter: %s): %s", search_filter, e)
            return []

        logger.debug("Found %d documents (filter: %s)", len(documents), search_filter)
        self._cache.set(key, documents)
        return documents

    async def search_multiple_sections_parallel(
        self,
        queries: Mapping[str, str],
        category: str | None = None,
        top_k: int | None = None,
    ) -> dict[str, list[RetrievedDocument]]:
        """Search several sections concurrently.

        All branches are awaited. A branch that fails or exceeds the
        per-section deadline yields [] for its own section and never
        cancels the others.

        Args:
            queries: Mapping of section -> query text
            category: Optional category applied to every section
            top_k: Maximum results per section

        Returns:
            Mapping of section -> documents, with an entry for every input section
        """
        start_time = time.perf_counter()
        sections = list(queries)

        results = await asyncio.gather(
            *(self._search_with_deadline(queries[section], section, category, top_k) for section in sections),
            return_exceptions=True,
        )

        by_section: dict[str, list[RetrievedDocument]] = {}
        for section, result in zip(sections, results):
            if isinstance(result, BaseException):
                logger.warning("Search for section=%s failed: %s", section, result)
                by_section[section] = []
            else:
                by_section[section] = result

        logger.info(
            "Parallel search over %d sections completed in %.0f ms",
            len(sections),
            (time.perf_counter() - start_time) * 1000,
        )
        return by_section

    async def _search_with_deadline(
        self,
        query: str,
        section: str,
        category: str | None,
        top_k: int | None,
    ) -> list[RetrievedDocument]:
        try:
            return await asyncio.wait_for(
                self.search(query, section, category, top_k),
                timeout=self._section_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Search for section=%s exceeded %.1fs", section, self._section_timeout)
            return []

    async def ingest_document(self, doc_id: str, text: str, metadata: dict[str, Any]) -> str:
        """Embed and store a single exemplar.

        Args:
            doc_id: Document id
            text: Document content
            metadata: Metadata (section, category, rating, ...)

        Returns:
            The stored document id
        """
        try:
            vector = await self._embeddings.embed(text)
            await asyncio.to_thread(self._store.add, [(doc_id, text, metadata)], [vector.to_list()])
        except PipelineError:
            raise
        except Exception as e:
            raise InternalError(f"Failed to ingest document '{doc_id}'") from e

        logger.info("Ingested document id=%s section=%s", doc_id, metadata.get("section"))
        return doc_id

    async def batch_ingest(
        self,
        documents: list[tuple[str, str, dict[str, Any]]],
        batch_size: int = INGEST_BATCH_SIZE,
    ) -> int:
        """Embed and store exemplars in batches.

        Args:
            documents: (id, text, metadata) triples
            batch_size: Documents per provider call and store write

        Returns:
            Number of documents ingested
        """
        total = 0
        for start in range(0, len(documents), batch_size):
            batch = documents[start : start + batch_size]
            try:
                vectors = await self._embeddings.embed_batch([text for _, text, _ in batch])
                await asyncio.to_thread(self._store.add, batch, [v.to_list() for v in vectors])
            except PipelineError:
                raise
            except Exception as e:
                raise InternalError(f"Failed to ingest batch starting at {start}") from e

            total += len(batch)
            logger.info("Ingested batch %d/%d", total, len(documents))

        return total

    async def delete_document(self, doc_id: str) -> bool:
        """Delete an exemplar.

        Returns:
            True if a document was deleted
        """
        try:
            deleted = await asyncio.to_thread(self._store.delete, [doc_id])
        except Exception as e:
            raise InternalError(f"Failed to delete document '{doc_id}'") from e
        return deleted > 0

    async def update_document(self, doc_id: str, text: str, metadata: dict[str, Any]) -> str:
        """Replace an exemplar's content and metadata."""
        await self.delete_document(doc_id)
        return await self.ingest_document(doc_id, text, metadata)

    @property
    def embeddings(self) -> EmbeddingService:
        return self._embeddings
