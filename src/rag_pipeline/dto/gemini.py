"""Wire schemas for the Gemini REST API.

Only the fields the pipeline reads are declared; everything else in the
payload is ignored. Every field is optional so that presence checks
happen in the gateway, where each absence maps to a named failure.
"""

from pydantic import BaseModel, Field


class ErrorBody(BaseModel):
    """Provider error envelope (``{"error": {...}}``)."""

    code: int | None = Field(None, description="HTTP-style status code")
    message: str | None = Field(None, description="Provider error message")
    status: str | None = Field(None, description="Canonical status name")

    model_config = {"extra": "ignore"}


class Part(BaseModel):
    """One content part of a candidate."""

    text: str | None = Field(None, description="Generated text")

    model_config = {"extra": "ignore"}


class Content(BaseModel):
    """Candidate content."""

    parts: list[Part] = Field(default_factory=list)
    role: str | None = None

    model_config = {"extra": "ignore"}


class Candidate(BaseModel):
    """A single generation candidate."""

    content: Content | None = None
    finish_reason: str | None = Field(None, alias="finishReason")

    model_config = {"extra": "ignore", "populate_by_name": True}

    @property
    def first_text(self) -> str | None:
        if self.content is None or not self.content.parts:
            return None
        return self.content.parts[0].text


class GenerateContentResponse(BaseModel):
    """Response body of ``models/{model}:generateContent``."""

    candidates: list[Candidate] | None = None
    error: ErrorBody | None = None
    prompt_feedback: dict | None = Field(None, alias="promptFeedback")

    model_config = {"extra": "ignore", "populate_by_name": True}


class ContentEmbedding(BaseModel):
    """Embedding values."""

    values: list[float] | None = None

    model_config = {"extra": "ignore"}


class EmbedContentResponse(BaseModel):
    """Response body of ``models/{model}:embedContent``."""

    embedding: ContentEmbedding | None = None
    error: ErrorBody | None = None

    model_config = {"extra": "ignore"}


class BatchEmbedContentsResponse(BaseModel):
    """Response body of ``models/{model}:batchEmbedContents``."""

    embeddings: list[ContentEmbedding] | None = None
    error: ErrorBody | None = None

    model_config = {"extra": "ignore"}
