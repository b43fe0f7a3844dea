"""Domain entities for internal representation.

These are dataclasses used internally by services and repositories.
They carry no JSON serialization or Pydantic validation; provider wire
formats live in the dto package.
"""

from .cache_entry import CacheEntryEntity
from .embedding_vector import EmbeddingVector
from .extraction_result import ExtractionResult
from .generation import GenerationRequest, SamplingConfig
from .pipeline_run import PipelineRun, PipelineState
from .retrieved_document import RetrievedDocument
from .search_filter import GENERAL_CATEGORY, SearchFilter

__all__ = [
    "CacheEntryEntity",
    "EmbeddingVector",
    "ExtractionResult",
    "GenerationRequest",
    "SamplingConfig",
    "PipelineRun",
    "PipelineState",
    "RetrievedDocument",
    "SearchFilter",
    "GENERAL_CATEGORY",
]
