import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Gemini
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    generation_model: str = os.getenv("GENERATION_MODEL", "gemini-2.0-flash")
    generation_timeout: float = float(os.getenv("GENERATION_TIMEOUT", "60"))
    generation_max_tokens: int = int(os.getenv("GENERATION_MAX_TOKENS", "8192"))
    generation_temperature: float = float(os.getenv("GENERATION_TEMPERATURE", "1.0"))
    generation_top_k: int = int(os.getenv("GENERATION_TOP_K", "40"))
    generation_top_p: float = float(os.getenv("GENERATION_TOP_P", "0.95"))

    # Embedding
    embedding_model: str = os.getenv("EMBEDDING_MODEL", "gemini-embedding-001")
    embedding_dimension: int = int(os.getenv("EMBEDDING_DIMENSION", "768"))
    embedding_task_type: str = os.getenv("EMBEDDING_TASK_TYPE", "RETRIEVAL_DOCUMENT")
    embedding_timeout: float = float(os.getenv("EMBEDDING_TIMEOUT", "30"))

    # Redis / vector index
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    vector_index_name: str = os.getenv("VECTOR_INDEX_NAME", "rag_templates")

    # Retrieval
    similarity_threshold: float = float(os.getenv("SIMILARITY_THRESHOLD", "0.3"))
    min_rating: int = int(os.getenv("MIN_RATING", "3"))
    retrieval_top_k: int = int(os.getenv("RETRIEVAL_TOP_K", "5"))
    section_search_timeout: float = float(os.getenv("SECTION_SEARCH_TIMEOUT", "10"))

    # Cache regions (ttl in seconds, size in entries)
    embedding_cache_ttl: int = int(os.getenv("EMBEDDING_CACHE_TTL", "300"))
    embedding_cache_size: int = int(os.getenv("EMBEDDING_CACHE_SIZE", "100"))
    search_cache_ttl: int = int(os.getenv("SEARCH_CACHE_TTL", "180"))
    search_cache_size: int = int(os.getenv("SEARCH_CACHE_SIZE", "500"))
    job_match_cache_ttl: int = int(os.getenv("JOB_MATCH_CACHE_TTL", "600"))
    job_match_cache_size: int = int(os.getenv("JOB_MATCH_CACHE_SIZE", "200"))
    result_cache_ttl: int = int(os.getenv("RESULT_CACHE_TTL", "3600"))
    result_cache_size: int = int(os.getenv("RESULT_CACHE_SIZE", "1000"))
    result_cache_backend: str = os.getenv("RESULT_CACHE_BACKEND", "memory")

    # Rate limiting (enforced by an injected limiter)
    rate_limit_requests: int = int(os.getenv("RATE_LIMIT_REQUESTS", "45"))
    rate_limit_window: int = int(os.getenv("RATE_LIMIT_WINDOW", "60"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.similarity_threshold <= 1:
            raise ValueError("SIMILARITY_THRESHOLD must be between 0 and 1")

        if self.embedding_dimension not in [128, 256, 512, 768, 1536, 3072]:
            raise ValueError(
                f"EMBEDDING_DIMENSION must be one of [128, 256, 512, 768, 1536, 3072], "
                f"got {self.embedding_dimension}"
            )

        if self.result_cache_backend not in ("memory", "redis"):
            raise ValueError(
                f"RESULT_CACHE_BACKEND must be 'memory' or 'redis', got {self.result_cache_backend!r}"
            )

        if self.generation_timeout <= 0:
            raise ValueError("GENERATION_TIMEOUT must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
