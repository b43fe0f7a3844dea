"""Repository layer for data access.

This layer wraps external dependencies (Redis, the Gemini API) behind
protocol-based interfaces. This enables:
- Swapping implementations (in-memory -> Redis, Gemini -> another provider)
- Unit testing with stub implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from .gemini_embedding_provider import GeminiEmbeddingProvider
from .gemini_text_generator import GeminiTextGenerator
from .memory_cache_repository import InMemoryCacheRepository
from .redis_cache_repository import RedisCacheRepository
from .redis_vector_repository import RedisVectorRepository

__all__ = [
    "GeminiEmbeddingProvider",
    "GeminiTextGenerator",
    "InMemoryCacheRepository",
    "RedisCacheRepository",
    "RedisVectorRepository",
]
