"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping implementations (in-memory cache -> Redis, Gemini -> another provider)
- Unit testing with stub implementations
- Clear separation of concerns

Usage:
    ```python
    from rag_pipeline.protocols import CacheStore, TextGenerator

    region: CacheStore = InMemoryCacheRepository.create(max_size=100, ttl=300)
    generator: TextGenerator = GeminiTextGenerator.create()
    ```
"""

from .cache_store import CacheStore
from .embedding_provider import EmbeddingProvider
from .rate_limiter import RateLimiter
from .text_generator import TextGenerator
from .vector_store import VectorStore

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
    "RateLimiter",
    "TextGenerator",
    "VectorStore",
]
