"""
Tests for the Gemini generation gateway.
"""

import asyncio
import json

import httpx
import pytest

from rag_pipeline.entities import SamplingConfig
from rag_pipeline.errors import (
    ErrorKind,
    InternalError,
    PipelineTimeoutError,
    RateLimitedError,
    UpstreamBlockedError,
    UpstreamMalformedError,
)
from rag_pipeline.repositories import GeminiTextGenerator

BASE_URL = "https://gemini.test/v1beta"


def ok_body(text="Generated", finish_reason="STOP"):
    candidate = {"content": {"parts": [{"text": text}], "role": "model"}}
    if finish_reason is not None:
        candidate["finishReason"] = finish_reason
    return {"candidates": [candidate]}


def make_generator(handler, timeout=5.0):
    return GeminiTextGenerator(
        model_name="gemini-2.0-flash",
        sampling=SamplingConfig(temperature=1.0, top_k=40, top_p=0.95, max_tokens=8192),
        timeout=timeout,
        api_key="secret",
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_request_shape_and_text_extraction():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=ok_body("Ten Caching Tips"))

    generator = make_generator(handler)
    text = await generator.generate("Write a title")
    await generator.close()

    assert text == "Ten Caching Tips"
    assert seen["url"] == f"{BASE_URL}/models/gemini-2.0-flash:generateContent"
    assert "key=" not in seen["url"]
    assert seen["key"] == "secret"
    assert seen["body"] == {
        "contents": [{"parts": [{"text": "Write a title"}]}],
        "generationConfig": {"temperature": 1.0, "maxOutputTokens": 8192, "topK": 40, "topP": 0.95},
    }


@pytest.mark.asyncio
async def test_missing_finish_reason_is_accepted():
    generator = make_generator(lambda request: httpx.Response(200, json=ok_body("ok", finish_reason=None)))

    assert await generator.generate("prompt") == "ok"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, error",
    [
        ({}, UpstreamMalformedError),
        ({"candidates": []}, UpstreamMalformedError),
        ({"error": {"code": 400, "message": "bad request", "status": "INVALID_ARGUMENT"}}, UpstreamMalformedError),
        ({"candidates": [{"content": {"parts": []}, "finishReason": "STOP"}]}, UpstreamMalformedError),
        ({"candidates": [{"finishReason": "SAFETY"}]}, UpstreamBlockedError),
        ({"candidates": [{"content": {"parts": [{"text": "x"}]}, "finishReason": "MAX_TOKENS"}]}, UpstreamBlockedError),
        ({"candidates": "nope"}, UpstreamMalformedError),
    ],
)
async def test_response_contract_violations(body, error):
    generator = make_generator(lambda request: httpx.Response(200, json=body))

    with pytest.raises(error):
        await generator.generate("prompt")


@pytest.mark.asyncio
async def test_blocked_only_when_candidates_exist():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    generator = make_generator(lambda request: httpx.Response(200, json=body))

    with pytest.raises(UpstreamMalformedError, match="No candidates"):
        await generator.generate("prompt")


@pytest.mark.asyncio
async def test_http_429_is_rate_limited():
    generator = make_generator(
        lambda request: httpx.Response(429, headers={"Retry-After": "30"}, json={"error": {"code": 429}})
    )

    with pytest.raises(RateLimitedError) as exc_info:
        await generator.generate("prompt")

    assert exc_info.value.kind is ErrorKind.RATE_LIMITED
    assert exc_info.value.retry_after == 30.0


@pytest.mark.asyncio
async def test_non_json_body_is_malformed():
    generator = make_generator(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))

    with pytest.raises(UpstreamMalformedError, match="non-JSON"):
        await generator.generate("prompt")


@pytest.mark.asyncio
async def test_connection_error_is_internal():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    generator = make_generator(handler)

    with pytest.raises(InternalError):
        await generator.generate("prompt")


@pytest.mark.asyncio
async def test_slow_provider_hits_deadline():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return httpx.Response(200, json=ok_body())

    generator = make_generator(handler, timeout=0.05)

    with pytest.raises(PipelineTimeoutError) as exc_info:
        await generator.generate("prompt")

    assert exc_info.value.retryable


def test_parse_response_returns_first_candidate():
    data = {
        "candidates": [
            {"content": {"parts": [{"text": "first"}]}, "finishReason": "STOP"},
            {"content": {"parts": [{"text": "second"}]}, "finishReason": "STOP"},
        ]
    }

    assert GeminiTextGenerator.parse_response(data) == "first"
