"""Cache service holding the named cache regions.

Each logical use gets its own region with its own TTL and size bound:

    embeddings  - text embeddings           (5 min,  100 entries)
    search      - retrieval results          (3 min,  500 entries)
    job_match   - job-match reports          (10 min, 200 entries)
    results     - task outputs               (1 hour, memory or Redis)
"""

from rag_pipeline.config import settings
from rag_pipeline.protocols import CacheStore
from rag_pipeline.repositories import InMemoryCacheRepository, RedisCacheRepository

EMBEDDINGS = "embeddings"
SEARCH = "search"
JOB_MATCH = "job_match"
RESULTS = "results"


class CacheService:
    """Registry of named cache regions.

    Services receive this registry (or a single region from it) instead
    of reaching for global state, so tests can pass regions with a fake
    clock or stub stores.

    Example:
        ```python
        caches = CacheService.create()
        caches.region("embeddings").set("emb:abc", vector)
        caches.region("embeddings").get("emb:abc")
        ```
    """

    def __init__(self, regions: dict[str, CacheStore]) -> None:
        """Initialize the cache service.

        Args:
            regions: Mapping of region name to store (required).
        """
        self._regions = dict(regions)

    @classmethod
    def create(cls, result_backend: str | None = None) -> "CacheService":
        """Factory method to create the standard regions from settings.

        Args:
            result_backend: "memory" or "redis" for the results region.
                If None, uses settings.result_cache_backend.

        Returns:
            Configured CacheService instance
        """
        backend = result_backend or settings.result_cache_backend

        regions: dict[str, CacheStore] = {
            EMBEDDINGS: InMemoryCacheRepository.create(
                name=EMBEDDINGS,
                max_size=settings.embedding_cache_size,
                ttl=settings.embedding_cache_ttl,
            ),
            SEARCH: InMemoryCacheRepository.create(
                name=SEARCH,
                max_size=settings.search_cache_size,
                ttl=settings.search_cache_ttl,
            ),
            JOB_MATCH: InMemoryCacheRepository.create(
                name=JOB_MATCH,
                max_size=settings.job_match_cache_size,
                ttl=settings.job_match_cache_ttl,
            ),
        }

        if backend == "redis":
            regions[RESULTS] = RedisCacheRepository.create(name=RESULTS, ttl=settings.result_cache_ttl)
        else:
            regions[RESULTS] = InMemoryCacheRepository.create(
                name=RESULTS,
                max_size=settings.result_cache_size,
                ttl=settings.result_cache_ttl,
            )

        return cls(regions=regions)

    def region(self, name: str) -> CacheStore:
        """Get a region by name.

        Raises:
            KeyError: If the region does not exist
        """
        try:
            return self._regions[name]
        except KeyError:
            raise KeyError(f"Unknown cache region: {name}") from None

    def clear(self) -> int:
        """Clear every region.

        Returns:
            Total number of entries removed
        """
        return sum(region.clear() for region in self._regions.values())

    def get_stats(self) -> dict:
        """Get per-region sizes."""
        return {name: {"size": region.size()} for name, region in self._regions.items()}

    @property
    def names(self) -> list[str]:
        """Names of the configured regions."""
        return list(self._regions)
