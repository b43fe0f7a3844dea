"""RAG Pipeline - retrieval-augmented generation for blog and CV content.

This package provides a layered architecture for exemplar-guided generation:

Layers:
    - protocols: Interface contracts (CacheStore, EmbeddingProvider, VectorStore, ...)
    - repositories: Data access implementations (Redis, Gemini)
    - services: Business logic (retrieval, preservation, orchestration)
    - prompts: Prompt templates and assembly
    - dto: Data transfer objects (provider payloads, reports)
    - entities: Domain models (internal)

Usage:
    ```python
    from rag_pipeline.services import PipelineService

    pipeline = PipelineService.create()
    html = await pipeline.analyze_content(html, locale="vi")
    ```
"""

from rag_pipeline.config import get_redis_client, settings
from rag_pipeline.dto import CVAnalysisReport, JobMatchReport, Suggestion
from rag_pipeline.entities import ExtractionResult, PipelineRun, PipelineState, RetrievedDocument, SearchFilter
from rag_pipeline.errors import ErrorKind, PipelineError
from rag_pipeline.protocols import CacheStore, EmbeddingProvider, RateLimiter, TextGenerator, VectorStore
from rag_pipeline.services import (
    CacheService,
    ContentPreservationService,
    EmbeddingService,
    PipelineService,
    RetrievalService,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "CacheStore",
    "EmbeddingProvider",
    "RateLimiter",
    "TextGenerator",
    "VectorStore",
    # Services (business logic)
    "CacheService",
    "ContentPreservationService",
    "EmbeddingService",
    "PipelineService",
    "RetrievalService",
    # Entities (domain models)
    "ExtractionResult",
    "PipelineRun",
    "PipelineState",
    "RetrievedDocument",
    "SearchFilter",
    # DTOs
    "CVAnalysisReport",
    "JobMatchReport",
    "Suggestion",
    # Errors
    "ErrorKind",
    "PipelineError",
]
