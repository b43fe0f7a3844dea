"""Cache storage protocol.

Defines the interface for a single cache region: a key/value store with
per-entry TTL and a size bound.

Implementations include:
- In-process TTL + LRU region (default)
- Redis-backed region (for results shared across workers)
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache regions.

    Any type that implements these methods satisfies the protocol, no
    explicit inheritance needed. Implementations must be safe to call
    from concurrent requests; a race on the same key resolves as last
    writer wins.

    Example:
        ```python
        from rag_pipeline.protocols import CacheStore

        region: CacheStore = InMemoryCacheRepository.create(max_size=100, ttl=300)
        region.set("emb:abc", vector)
        region.get("emb:abc")
        ```
    """

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None on miss or expiry.

        Args:
            key: The cache key

        Returns:
            The cached value, or None
        """
        ...

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value.

        Args:
            key: The cache key
            value: The value to store
            ttl: Time-to-live in seconds. Defaults to the region TTL.
        """
        ...

    def delete(self, key: str) -> bool:
        """Remove a key.

        Args:
            key: The cache key

        Returns:
            True if an entry was removed
        """
        ...

    def get_list(self, key: str) -> list[Any] | None:
        """Return the cached value if it is a sequence, else None.

        Args:
            key: The cache key

        Returns:
            The cached list, or None
        """
        ...

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        ...

    def size(self) -> int:
        """Number of live entries."""
        ...
