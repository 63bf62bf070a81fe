import json

import httpx
import pytest

from studygen.modules.generation.client import HttpEndpointClient
from studygen.modules.generation.errors import (
    EmptyBody,
    MissingCredentials,
    TransportError,
    UpstreamStatusError,
)
from studygen.modules.generation.models import GenerationRequest, ModelConfig, Provider

GEMINI = ModelConfig(name="gemini-2.0-flash", api_version="v1beta")
ROUTER = ModelConfig(name="x-ai/grok-code-fast-1", provider=Provider.OPENROUTER)
REQUEST = GenerationRequest(instruction="List 3 facts about $topic.", topic="lenses")


def gemini_body(*texts):
    return {"candidates": [{"content": {"parts": [{"text": t} for t in texts]}}]}


def make_client(handler, **kwargs):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    kwargs.setdefault("gemini_api_key", "test-key")
    return HttpEndpointClient(http, **kwargs)


async def test_google_request_shape_and_text_extraction():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_body('[{"a": ', "1}]"))

    client = make_client(handler)
    raw = await client.call(GEMINI, REQUEST, timeout=5)

    assert raw.text == '[{"a": 1}]'
    assert raw.config == GEMINI
    assert seen["url"].path == "/v1beta/models/gemini-2.0-flash:generateContent"
    assert seen["url"].params["key"] == "test-key"
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "List 3 facts about lenses."
    assert seen["body"]["generationConfig"] == {"responseMimeType": "application/json"}


async def test_openrouter_request_uses_bearer_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["authorization"]
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200, json={"choices": [{"message": {"content": '{"ok": true}'}}]}
        )

    client = make_client(handler, openrouter_api_key="router-key")
    raw = await client.call(ROUTER, REQUEST, timeout=5)

    assert raw.text == '{"ok": true}'
    assert seen["auth"] == "Bearer router-key"
    assert seen["path"] == "/api/v1/chat/completions"
    assert seen["body"]["model"] == "x-ai/grok-code-fast-1"
    assert seen["body"]["response_format"] == {"type": "json_object"}


async def test_non_2xx_raises_upstream_status_error():
    client = make_client(lambda r: httpx.Response(503, text="model overloaded"))

    with pytest.raises(UpstreamStatusError) as exc:
        await client.call(GEMINI, REQUEST, timeout=5)

    assert exc.value.status_code == 503
    assert "overloaded" in exc.value.body
    assert exc.value.config == GEMINI


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"candidates": []}),
        httpx.Response(200, json=gemini_body("   ")),
        httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}}),
        httpx.Response(200, text="<html>not json</html>"),
    ],
)
async def test_missing_text_raises_empty_body(response):
    client = make_client(lambda r: response)

    with pytest.raises(EmptyBody):
        await client.call(GEMINI, REQUEST, timeout=5)


@pytest.mark.parametrize(
    "error",
    [httpx.ConnectError("connection refused"), httpx.ReadTimeout("too slow")],
)
async def test_transport_failures_raise_transport_error(error):
    def handler(request):
        raise error

    client = make_client(handler)

    with pytest.raises(TransportError):
        await client.call(GEMINI, REQUEST, timeout=5)


async def test_missing_key_is_reported_without_a_request():
    calls = []
    client = make_client(lambda r: calls.append(r), gemini_api_key=None)

    with pytest.raises(MissingCredentials):
        await client.call(GEMINI, REQUEST, timeout=5)
    assert calls == []


async def test_timeout_must_be_positive():
    client = make_client(lambda r: httpx.Response(200, json=gemini_body("[]")))

    with pytest.raises(ValueError):
        await client.call(GEMINI, REQUEST, timeout=0)
