"""Redis implementation of CacheStore.

Stores JSON-encoded values under ``<region>:<key>`` with a Redis TTL, so
cached task results survive restarts and are shared between workers.
Values must be JSON-serialisable.
"""

import json
import math
from typing import Any

import redis

from rag_pipeline.config import get_redis_client
from rag_pipeline.utils.logger import get_logger

logger = get_logger(__name__)


class RedisCacheRepository:
    """Redis-backed cache region.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Size is bounded by TTL expiry only; capacity eviction is left to the
    Redis ``maxmemory-policy``.
    """

    def __init__(
        self,
        name: str,
        ttl: float,
        redis_client: redis.Redis | None = None,
    ) -> None:
        """Initialize the Redis cache region.

        Args:
            name: Region name, used as key prefix
            ttl: Default time-to-live in seconds
            redis_client: Redis client instance. If None, creates default.
        """
        self._name = name
        self._ttl = ttl
        self._client = redis_client or get_redis_client()

    @classmethod
    def create(cls, name: str = "results", ttl: float = 3600) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with the default client.

        Args:
            name: Region name
            ttl: Default TTL in seconds

        Returns:
            Configured RedisCacheRepository
        """
        return cls(name=name, ttl=ttl)

    def _key(self, key: str) -> str:
        return f"{self._name}:{key}"

    def get(self, key: str) -> Any | None:
        try:
            raw = self._client.get(self._key(key))
        except redis.RedisError as e:
            logger.warning("Cache read failed for key=%s, treating as miss: %s", key, e)
            return None

        if raw is None:
            return None

        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Dropping undecodable cache value for key=%s", key)
            self.delete(key)
            return None

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        seconds = max(1, math.ceil(ttl if ttl is not None else self._ttl))
        payload = json.dumps(value, ensure_ascii=False)
        try:
            self._client.set(self._key(key), payload, ex=seconds)
        except redis.RedisError as e:
            logger.warning("Cache write failed for key=%s, skipping: %s", key, e)

    def delete(self, key: str) -> bool:
        try:
            result: int = self._client.delete(self._key(key))  # type: ignore[assignment]
        except redis.RedisError as e:
            logger.warning("Cache delete failed for key=%s: %s", key, e)
            return False
        return result > 0

    def get_list(self, key: str) -> list[Any] | None:
        value = self.get(key)
        return value if isinstance(value, list) else None

    def clear(self) -> int:
        count = 0
        for key in self._client.scan_iter(match=f"{self._name}:*"):
            if self._client.delete(key):
                count += 1
        return count

    def size(self) -> int:
        count = 0
        for _ in self._client.scan_iter(match=f"{self._name}:*"):
            count += 1
        return count

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def get_stats(self) -> dict:
        """Get region statistics."""
        return {
            "name": self._name,
            "size": self.size(),
            "ttl": self._ttl,
            "backend": "redis",
        }

    @property
    def name(self) -> str:
        """Get the region name."""
        return self._name
