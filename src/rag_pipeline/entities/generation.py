"""Generation request domain entities."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SamplingConfig:
    """Sampling parameters sent with every generation call.

    Attributes:
        temperature: Sampling temperature
        top_k: Top-k cutoff
        top_p: Nucleus sampling cutoff
        max_tokens: Maximum number of output tokens
    """

    temperature: float = 1.0
    top_k: int = 40
    top_p: float = 0.95
    max_tokens: int = 8192

    def to_payload(self) -> dict[str, Any]:
        """Provider ``generationConfig`` block."""
        return {
            "temperature": self.temperature,
            "maxOutputTokens": self.max_tokens,
            "topK": self.top_k,
            "topP": self.top_p,
        }


@dataclass(frozen=True)
class GenerationRequest:
    """A prompt plus the sampling configuration to generate it with."""

    prompt: str
    sampling: SamplingConfig = field(default_factory=SamplingConfig)

    def to_payload(self) -> dict[str, Any]:
        """Provider ``generateContent`` request body."""
        return {
            "contents": [{"parts": [{"text": self.prompt}]}],
            "generationConfig": self.sampling.to_payload(),
        }
