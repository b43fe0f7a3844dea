"""Data Transfer Objects.

These Pydantic models describe external payloads: the provider wire
formats and the structured reports returned to callers.

Internal domain logic should use entities from the entities package.
"""

from .gemini import (
    BatchEmbedContentsResponse,
    Candidate,
    ContentEmbedding,
    EmbedContentResponse,
    ErrorBody,
    GenerateContentResponse,
)
from .reports import CVAnalysisReport, DetailedScores, JobMatchReport, Suggestion

__all__ = [
    "BatchEmbedContentsResponse",
    "Candidate",
    "ContentEmbedding",
    "EmbedContentResponse",
    "ErrorBody",
    "GenerateContentResponse",
    "CVAnalysisReport",
    "DetailedScores",
    "JobMatchReport",
    "Suggestion",
]
