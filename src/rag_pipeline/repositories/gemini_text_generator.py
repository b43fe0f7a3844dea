"""Gemini-based text generator (the generation gateway).

Sends an assembled prompt to ``models/{model}:generateContent`` with a
fixed sampling configuration and returns the first candidate's text.

Failure checks, in order:
    1. error envelope present        -> UpstreamMalformedError
    2. no candidates                 -> UpstreamMalformedError
    3. finishReason present, not STOP -> UpstreamBlockedError
    4. no text in the first part     -> UpstreamMalformedError
A call exceeding the hard deadline raises PipelineTimeoutError.
"""

import asyncio
import time

import httpx
from pydantic import ValidationError

from rag_pipeline.config import settings
from rag_pipeline.dto import GenerateContentResponse
from rag_pipeline.entities import GenerationRequest, SamplingConfig
from rag_pipeline.errors import (
    PipelineTimeoutError,
    UpstreamBlockedError,
    UpstreamMalformedError,
)
from rag_pipeline.utils.logger import get_logger

from .gemini_client import GeminiClient

logger = get_logger(__name__)

NORMAL_STOP = "STOP"


class GeminiTextGenerator(GeminiClient):
    """Gemini implementation of the TextGenerator protocol.

    Exactly one attempt is made per call; retrying is the caller's
    decision.

    Example:
        ```python
        generator = GeminiTextGenerator.create()
        text = await generator.generate("Write a title about caching")
        ```
    """

    provider_name = "Gemini"

    def __init__(
        self,
        model_name: str | None = None,
        sampling: SamplingConfig | None = None,
        timeout: float | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            model_name: Generation model. Defaults to settings.generation_model.
            sampling: Sampling config. Defaults to values from settings.
            timeout: Hard deadline per call in seconds. Defaults to settings.generation_timeout.
            api_key: API key. Defaults to settings.gemini_api_key.
            base_url: API base URL. Defaults to settings.gemini_base_url.
            transport: Optional httpx transport (used in tests).
        """
        deadline = timeout or settings.generation_timeout
        super().__init__(api_key=api_key, base_url=base_url, timeout=deadline, transport=transport)
        self._model_name = model_name or settings.generation_model
        self._deadline = deadline
        self._sampling = sampling or SamplingConfig(
            temperature=settings.generation_temperature,
            top_k=settings.generation_top_k,
            top_p=settings.generation_top_p,
            max_tokens=settings.generation_max_tokens,
        )

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        timeout: float | None = None,
    ) -> "GeminiTextGenerator":
        """Factory method to create GeminiTextGenerator with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            timeout: Hard deadline in seconds. If None, uses settings.

        Returns:
            Configured GeminiTextGenerator
        """
        return cls(model_name=model_name, timeout=timeout)

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    @property
    def sampling(self) -> SamplingConfig:
        """Get the sampling configuration."""
        return self._sampling

    async def generate(self, prompt: str) -> str:
        """Generate text for a prompt.

        Args:
            prompt: The fully assembled instruction

        Returns:
            The generated text of the first candidate

        Raises:
            PipelineTimeoutError: If the call exceeded the deadline
            UpstreamBlockedError: If the candidate was filtered
            UpstreamMalformedError: If the response violates the contract
            RateLimitedError: If the provider throttled the request
        """
        request = GenerationRequest(prompt=prompt, sampling=self._sampling)
        url = self._url(self._model_name, "generateContent")
        start_time = time.perf_counter()

        try:
            data = await asyncio.wait_for(
                self._post_json(url, request.to_payload()),
                timeout=self._deadline,
            )
        except asyncio.TimeoutError as e:
            raise PipelineTimeoutError(
                f"Generation exceeded the {self._deadline:g}s deadline"
            ) from e

        text = self.parse_response(data)
        logger.info(
            "Generated %d chars with %s in %.0f ms",
            len(text),
            self._model_name,
            (time.perf_counter() - start_time) * 1000,
        )
        return text

    @staticmethod
    def parse_response(data: dict) -> str:
        """Extract the generated text from a decoded response body.

        Args:
            data: Decoded ``generateContent`` response

        Returns:
            The first candidate's text

        Raises:
            UpstreamBlockedError: If the finish reason is not STOP
            UpstreamMalformedError: For any other contract violation
        """
        try:
            parsed = GenerateContentResponse.model_validate(data)
        except ValidationError as e:
            raise UpstreamMalformedError("Generation response does not match the expected schema") from e

        if parsed.error is not None:
            raise UpstreamMalformedError(f"Gemini API error: {parsed.error.message or parsed.error.status}")

        if not parsed.candidates:
            raise UpstreamMalformedError("No candidates in Gemini response")

        candidate = parsed.candidates[0]
        if candidate.finish_reason is not None and candidate.finish_reason != NORMAL_STOP:
            raise UpstreamBlockedError(f"Content generation blocked: {candidate.finish_reason}")

        text = candidate.first_text
        if text is None:
            raise UpstreamMalformedError("Gemini candidate has no text part")

        return text
