"""
Tests for the OpenAI suggestion client.

The upstream is stubbed with httpx.MockTransport injected into the SDK, so the
real request/response plumbing of `AsyncOpenAI` is exercised without network.
"""

from __future__ import annotations

import json
from typing import Any, Dict

import httpx
import pytest
from errors import MalformedResponse, MissingCredential, NoValidSuggestions, ProviderConnectionError, ProviderHttpError
from providers.openai_client import SUGGESTION_COUNT, OpenAISuggestionClient
from shared.provider_settings import ProviderConfig
from suggestion_model import Suggestion


def _completion(content: Any) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-3.5-turbo",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


@pytest.fixture
def openai_config() -> ProviderConfig:
    return ProviderConfig(
        provider="openai",
        openai_api_key="sk-test-key",
        openai_model="gpt-3.5-turbo",
        openai_api_base="https://api.openai.com/v1",
        temperature=0.7,
        max_output_tokens=500,
    )


def _client_for(config: ProviderConfig, transport: httpx.MockTransport) -> OpenAISuggestionClient:
    return OpenAISuggestionClient(config, http_client=httpx.AsyncClient(transport=transport))


@pytest.mark.anyio
async def test_fetch_suggestions_sends_chat_completion_request(openai_config: ProviderConfig, make_transport) -> None:
    transport = make_transport(
        lambda request: httpx.Response(
            200, json=_completion('[{"emoji": "💡", "reason": "Ideas"}, {"emoji": "🚀", "reason": "Launch"}]')
        )
    )
    client = _client_for(openai_config, transport)

    result = await client.fetch_suggestions("I have an idea")

    assert list(result) == [Suggestion("💡", "Ideas"), Suggestion("🚀", "Launch")]
    assert len(transport.requests) == 1

    request = transport.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.openai.com/v1/chat/completions"
    assert request.headers["authorization"] == "Bearer sk-test-key"

    body = json.loads(request.content)
    assert body["model"] == "gpt-3.5-turbo"
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 500
    assert [message["role"] for message in body["messages"]] == ["system", "user"]
    assert "JSON array" in body["messages"][0]["content"]
    assert '"I have an idea"' in body["messages"][1]["content"]
    assert f"exactly {SUGGESTION_COUNT}" in body["messages"][1]["content"]


@pytest.mark.anyio
async def test_fetch_suggestions_strips_markdown_fence(openai_config: ProviderConfig) -> None:
    content = '```json\n[{"emoji":"💡","reason":"x"}]\n```'
    client = _client_for(openai_config, httpx.MockTransport(lambda request: httpx.Response(200, json=_completion(content))))

    result = await client.fetch_suggestions("idea")

    assert list(result) == [Suggestion(emoji="💡", reason="x")]


@pytest.mark.anyio
async def test_fetch_suggestions_without_complete_entries_raises(openai_config: ProviderConfig) -> None:
    content = '[{"emoji":"💡"}, {"reason":"no emoji"}]'
    client = _client_for(openai_config, httpx.MockTransport(lambda request: httpx.Response(200, json=_completion(content))))

    with pytest.raises(NoValidSuggestions):
        await client.fetch_suggestions("idea")


@pytest.mark.anyio
async def test_fetch_suggestions_with_prose_reply_raises_malformed(openai_config: ProviderConfig, make_transport) -> None:
    content = "Sure! Here are some emojis: 💡 🚀"
    transport = make_transport(lambda request: httpx.Response(200, json=_completion(content)))
    client = _client_for(openai_config, transport)

    with pytest.raises(MalformedResponse):
        await client.fetch_suggestions("idea")
    assert len(transport.requests) == 1


@pytest.mark.anyio
@pytest.mark.parametrize("content", [None, ""])
async def test_fetch_suggestions_with_empty_content_raises_malformed(
    openai_config: ProviderConfig, content: Any
) -> None:
    client = _client_for(openai_config, httpx.MockTransport(lambda request: httpx.Response(200, json=_completion(content))))

    with pytest.raises(MalformedResponse):
        await client.fetch_suggestions("idea")


@pytest.mark.anyio
async def test_fetch_suggestions_maps_http_errors_without_retrying(openai_config: ProviderConfig, make_transport) -> None:
    transport = make_transport(
        lambda request: httpx.Response(
            429,
            json={"error": {"message": "Rate limit reached", "type": "requests", "code": "rate_limit_exceeded"}},
        )
    )
    client = _client_for(openai_config, transport)

    with pytest.raises(ProviderHttpError) as exc_info:
        await client.fetch_suggestions("idea")

    assert exc_info.value.status_code == 429
    assert exc_info.value.upstream_message == "Rate limit reached"
    assert "Rate limit reached" in str(exc_info.value)
    assert len(transport.requests) == 1


@pytest.mark.anyio
async def test_fetch_suggestions_with_non_json_body_raises_malformed(openai_config: ProviderConfig) -> None:
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            200, content=b"<html>gateway</html>", headers={"content-type": "application/json"}
        )
    )
    client = _client_for(openai_config, transport)

    with pytest.raises(MalformedResponse, match="not valid JSON"):
        await client.fetch_suggestions("idea")


@pytest.mark.anyio
async def test_fetch_suggestions_shortens_html_error_pages(openai_config: ProviderConfig) -> None:
    page = "<html><body>" + "Bad gateway " * 100 + "</body></html>"
    client = _client_for(openai_config, httpx.MockTransport(lambda request: httpx.Response(502, text=page)))

    with pytest.raises(ProviderHttpError) as exc_info:
        await client.fetch_suggestions("idea")

    assert exc_info.value.status_code == 502
    assert exc_info.value.upstream_message.startswith("<html><body>Bad gateway")
    assert len(exc_info.value.upstream_message) <= 203
    assert page not in str(exc_info.value)


@pytest.mark.anyio
async def test_fetch_suggestions_maps_transport_errors(openai_config: ProviderConfig) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client_for(openai_config, httpx.MockTransport(handler))

    with pytest.raises(ProviderConnectionError):
        await client.fetch_suggestions("idea")


@pytest.mark.anyio
@pytest.mark.parametrize("api_key", [None, ""])
async def test_fetch_suggestions_without_key_raises_before_network(
    api_key: Any, unreachable_transport: httpx.MockTransport
) -> None:
    config = ProviderConfig(provider="openai", openai_api_key=api_key)
    client = _client_for(config, unreachable_transport)

    with pytest.raises(MissingCredential, match="OpenAI API key not configured"):
        await client.fetch_suggestions("idea")
    assert unreachable_transport.requests == []


@pytest.mark.anyio
async def test_mock_mode_skips_credentials_and_network(unreachable_transport: httpx.MockTransport) -> None:
    config = ProviderConfig(provider="openai", openai_api_key=None, mock_mode=True)
    client = _client_for(config, unreachable_transport)

    result = await client.fetch_suggestions("Great IDEA")

    assert result[0] == Suggestion("💡", "Represents ideas and inspiration")
    assert unreachable_transport.requests == []
