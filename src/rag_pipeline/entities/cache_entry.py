"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """A single value held by a cache region.

    Attributes:
        key: The cache key
        value: The cached value (any object for in-memory regions)
        expires_at: Clock reading after which the entry is stale
    """

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
