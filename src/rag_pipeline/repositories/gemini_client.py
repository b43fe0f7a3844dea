"""Shared HTTP plumbing for the Gemini REST API.

Both the embedding provider and the text generator talk to the same API.
This base class owns the lazily created ``httpx.AsyncClient`` and
translates transport-level failures into the pipeline error taxonomy:

- ``httpx.TimeoutException``  -> PipelineTimeoutError
- HTTP 429                    -> RateLimitedError (with Retry-After)
- other non-2xx / non-JSON    -> UpstreamMalformedError
- other ``httpx.HTTPError``   -> InternalError
"""

from typing import Any

import httpx

from rag_pipeline.config import settings
from rag_pipeline.errors import (
    InternalError,
    PipelineTimeoutError,
    RateLimitedError,
    UpstreamMalformedError,
)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds."""
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


class GeminiClient:
    """Base class for Gemini API adapters."""

    provider_name = "Gemini"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Gemini API key. Defaults to settings.gemini_api_key.
            base_url: API base URL. Defaults to settings.gemini_base_url.
            timeout: Per-request httpx timeout in seconds.
            transport: Optional httpx transport (used in tests).
        """
        self._api_key = api_key or settings.gemini_api_key
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self._api_key:
                headers["x-goog-api-key"] = self._api_key
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
                headers=headers,
                transport=self._transport,
            )
        return self._client

    def _url(self, model: str, method: str) -> str:
        return f"{self._base_url}/models/{model}:{method}"

    async def _post_json(self, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON payload and return the decoded body.

        Args:
            url: Endpoint URL
            payload: JSON request body

        Returns:
            The decoded JSON object

        Raises:
            PipelineTimeoutError: If the request timed out
            RateLimitedError: On HTTP 429
            UpstreamMalformedError: On other non-2xx status or a non-JSON body
            InternalError: On other transport failures
        """
        try:
            response = await self.client.post(url, json=payload)
        except httpx.TimeoutException as e:
            raise PipelineTimeoutError(f"{self.provider_name} request timed out") from e
        except httpx.HTTPError as e:
            raise InternalError(f"{self.provider_name} transport error: {type(e).__name__}") from e

        if response.status_code == 429:
            raise RateLimitedError(
                f"{self.provider_name} rate limit exceeded",
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamMalformedError(
                f"{self.provider_name} returned a non-JSON body (HTTP {response.status_code})"
            ) from e

        if not isinstance(data, dict):
            raise UpstreamMalformedError(
                f"{self.provider_name} returned {type(data).__name__}, expected an object"
            )

        if not response.is_success:
            error = data.get("error") if isinstance(data.get("error"), dict) else {}
            message = error.get("message") or response.reason_phrase
            raise UpstreamMalformedError(
                f"{self.provider_name} error (HTTP {response.status_code}): {message}"
            )

        return data

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
