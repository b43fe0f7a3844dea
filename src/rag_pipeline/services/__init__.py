"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
so every gateway can be replaced by a stub in tests.

Architecture:
    PipelineService -> RetrievalService -> EmbeddingService -> Repository
                    -> TextGenerator (Repository)
                    -> ContentPreservationService
                    -> CacheService (regions)

Usage:
    ```python
    from rag_pipeline.services import PipelineService

    # Using factory method (recommended)
    pipeline = PipelineService.create()

    # Or manual creation
    pipeline = PipelineService(retriever=retriever, generator=generator, caches=caches)
    ```
"""

from .cache_service import CacheService
from .content_preservation_service import ContentPreservationService
from .embedding_service import EmbeddingService
from .pipeline_service import PipelineService
from .retrieval_service import RetrievalService

__all__ = [
    "CacheService",
    "ContentPreservationService",
    "EmbeddingService",
    "PipelineService",
    "RetrievalService",
]
