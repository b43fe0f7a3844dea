"""In-process implementation of CacheStore.

A single cache region with a default TTL and a maximum number of entries.
Expired entries are dropped lazily on read and purged before each insert;
once the region is full the least-recently-used entry is evicted.
"""

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from rag_pipeline.entities import CacheEntryEntity


class InMemoryCacheRepository:
    """TTL + LRU cache region.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    All operations take a single lock, so the region is safe to share
    between concurrent requests and worker threads. Concurrent writes to
    the same key resolve as last writer wins.

    Example:
        ```python
        region = InMemoryCacheRepository.create(name="embeddings", max_size=100, ttl=300)
        region.set("emb:abc", [0.1, 0.2])
        region.get("emb:abc")   # [0.1, 0.2] until 300s have passed
        ```
    """

    def __init__(
        self,
        name: str,
        max_size: int,
        ttl: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache region.

        Args:
            name: Region name (used in stats)
            max_size: Maximum number of entries before LRU eviction
            ttl: Default time-to-live in seconds
            clock: Monotonic clock, replaceable in tests
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        self._name = name
        self._max_size = max_size
        self._ttl = ttl
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntryEntity] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @classmethod
    def create(
        cls,
        name: str = "default",
        max_size: int = 100,
        ttl: float = 300,
    ) -> "InMemoryCacheRepository":
        """Factory method to create a region with the real clock.

        Args:
            name: Region name
            max_size: Maximum entries
            ttl: Default TTL in seconds

        Returns:
            Configured InMemoryCacheRepository
        """
        return cls(name=name, max_size=max_size, ttl=ttl)

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._misses += 1
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        expires_at = self._clock() + (ttl if ttl is not None else self._ttl)

        with self._lock:
            self._purge_expired()
            self._entries[key] = CacheEntryEntity(key=key, value=value, expires_at=expires_at)
            self._entries.move_to_end(key)

            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)
                self._evictions += 1

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def get_list(self, key: str) -> list[Any] | None:
        value = self.get(key)
        if isinstance(value, (list, tuple)):
            return list(value)
        return None

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def size(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._entries)

    def get_stats(self) -> dict:
        """Get region statistics.

        Returns:
            Dictionary with size, limits and hit/miss counters
        """
        return {
            "name": self._name,
            "size": self.size(),
            "max_size": self._max_size,
            "ttl": self._ttl,
            "hits": self._hits,
            "misses": self._misses,
            "evictions": self._evictions,
        }

    def _purge_expired(self) -> None:
        """Drop expired entries. Caller must hold the lock."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

    @property
    def name(self) -> str:
        """Get the region name."""
        return self._name
