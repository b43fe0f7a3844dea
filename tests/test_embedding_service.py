"""
Tests for the embedding gateway and the Gemini embedding provider.
"""

import json
import math

import httpx
import pytest

from rag_pipeline.errors import (
    InternalError,
    PipelineTimeoutError,
    RateLimitedError,
    UpstreamMalformedError,
)
from rag_pipeline.repositories import GeminiEmbeddingProvider
from rag_pipeline.services import EmbeddingService

BASE_URL = "https://gemini.test/v1beta"


def make_provider(handler, dimension=4):
    return GeminiEmbeddingProvider(
        model_name="gemini-embedding-001",
        dimension=dimension,
        api_key="secret",
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
    )


class TestEmbeddingService:
    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, embeddings, provider):
        first = await embeddings.embed("hello")
        second = await embeddings.embed("hello")

        assert first == second
        assert provider.calls == ["hello"]

    @pytest.mark.asyncio
    async def test_empty_text_yields_zero_vector_without_remote_call(self, embeddings, provider):
        vector = await embeddings.embed("")

        assert vector.values == (0.0, 0.0, 0.0, 0.0)
        assert vector.is_degenerate
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_none_is_rejected(self, embeddings):
        with pytest.raises(InternalError):
            await embeddings.embed(None)

    @pytest.mark.asyncio
    async def test_wrong_dimension_is_malformed(self, embeddings, provider):
        provider.vector = [0.1, 0.2, 0.3]

        with pytest.raises(UpstreamMalformedError, match="dimension mismatch"):
            await embeddings.embed("hello")

    @pytest.mark.asyncio
    async def test_non_finite_values_are_malformed(self, embeddings, provider):
        provider.vector = [0.1, math.nan, 0.3, 0.4]

        with pytest.raises(UpstreamMalformedError, match="non-finite"):
            await embeddings.embed("hello")

    @pytest.mark.asyncio
    async def test_malformed_result_is_not_cached(self, embeddings, provider):
        provider.vector = [0.1]
        with pytest.raises(UpstreamMalformedError):
            await embeddings.embed("hello")

        provider.vector = None
        vector = await embeddings.embed("hello")

        assert vector.dimension == 4
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_batch_results_fill_the_cache(self, embeddings, provider):
        vectors = await embeddings.embed_batch(["a", "b"])
        cached = await embeddings.embed("b")

        assert len(vectors) == 2
        assert cached == vectors[1]
        assert provider.batch_calls == [["a", "b"]]
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_describe_reports_dimension_and_model(self, embeddings):
        info = await embeddings.describe("hello")

        assert info["dimension"] == 4
        assert info["model"] == "stub-embedding"
        assert len(info["preview"]) == 4


class TestGeminiEmbeddingProvider:
    @pytest.mark.asyncio
    async def test_encode_sends_model_task_and_dimension(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"embedding": {"values": [0.1, 0.2, 0.3, 0.4]}})

        provider = make_provider(handler)
        values = await provider.encode("hello")
        await provider.close()

        assert values == [0.1, 0.2, 0.3, 0.4]
        assert seen["url"] == f"{BASE_URL}/models/gemini-embedding-001:embedContent"
        assert seen["key"] == "secret"
        assert seen["body"] == {
            "model": "models/gemini-embedding-001",
            "content": {"parts": [{"text": "hello"}]},
            "taskType": "RETRIEVAL_DOCUMENT",
            "outputDimensionality": 4,
        }

    @pytest.mark.asyncio
    async def test_missing_values_are_malformed(self):
        provider = make_provider(lambda request: httpx.Response(200, json={"embedding": {}}))

        with pytest.raises(UpstreamMalformedError):
            await provider.encode("hello")

    @pytest.mark.asyncio
    async def test_rate_limit_carries_retry_after(self):
        provider = make_provider(lambda request: httpx.Response(429, headers={"Retry-After": "7"}))

        with pytest.raises(RateLimitedError) as exc_info:
            await provider.encode("hello")

        assert exc_info.value.retry_after == 7.0
        assert exc_info.value.retryable

    @pytest.mark.asyncio
    async def test_http_error_status_is_malformed(self):
        provider = make_provider(
            lambda request: httpx.Response(400, json={"error": {"code": 400, "message": "API key not valid"}})
        )

        with pytest.raises(UpstreamMalformedError, match="API key not valid"):
            await provider.encode("hello")

    @pytest.mark.asyncio
    async def test_transport_timeout_maps_to_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = make_provider(handler)

        with pytest.raises(PipelineTimeoutError):
            await provider.encode("hello")

    @pytest.mark.asyncio
    async def test_batch_posts_one_request_per_text(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            body = json.loads(request.content)
            seen["count"] = len(body["requests"])
            return httpx.Response(
                200,
                json={"embeddings": [{"values": [0.1, 0.2, 0.3, 0.4]} for _ in body["requests"]]},
            )

        provider = make_provider(handler)
        vectors = await provider.encode_batch(["a", "b", "c"])

        assert len(vectors) == 3
        assert seen["count"] == 3
        assert seen["url"].endswith(":batchEmbedContents")

    @pytest.mark.asyncio
    async def test_batch_count_mismatch_is_malformed(self):
        provider = make_provider(
            lambda request: httpx.Response(200, json={"embeddings": [{"values": [0.1, 0.2, 0.3, 0.4]}]})
        )

        with pytest.raises(UpstreamMalformedError, match="1 vectors for 2 texts"):
            await provider.encode_batch(["a", "b"])
