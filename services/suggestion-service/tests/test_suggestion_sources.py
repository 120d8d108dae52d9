"""
Every suggestion source must satisfy the same list invariant: non-empty, and
each entry carries a non-empty emoji and reason.
"""

from __future__ import annotations

import json

import httpx
import pytest
from errors import MalformedResponse, NoValidSuggestions
from providers.gemini_client import GeminiSuggestionClient
from providers.openai_client import OpenAISuggestionClient
from response_normalization import parse_suggestions
from shared.provider_settings import ProviderConfig
from suggestion_model import Suggestion, SuggestionList, is_filled, validate_suggestions

MODEL_TEXT = '```json\n[{"emoji": "💼", "reason": "Work"}, {"emoji": "", "reason": "dropped"}, {"emoji": "✅", "reason": "Done"}]\n```'


def assert_valid_suggestion_list(result: SuggestionList) -> None:
    revalidated = validate_suggestions(result.items)
    assert revalidated == result
    assert len(result) >= 1
    for item in result:
        assert item.emoji.strip()
        assert item.reason.strip()


def _openai_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": "gpt-3.5-turbo",
            "choices": [{"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": MODEL_TEXT}}],
        },
    )


def _gemini_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": MODEL_TEXT}]}}]})


@pytest.mark.anyio
async def test_openai_source_satisfies_invariant() -> None:
    client = OpenAISuggestionClient(
        ProviderConfig(provider="openai", openai_api_key="sk-test"),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_openai_handler)),
    )

    result = await client.fetch_suggestions("work done")

    assert_valid_suggestion_list(result)
    assert [item.emoji for item in result] == ["💼", "✅"]


@pytest.mark.anyio
async def test_gemini_source_satisfies_invariant() -> None:
    client = GeminiSuggestionClient(
        ProviderConfig(provider="gemini", gemini_api_key="gm-test"),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_gemini_handler)),
    )

    result = await client.fetch_suggestions("work done")

    assert_valid_suggestion_list(result)
    assert [item.emoji for item in result] == ["💼", "✅"]


@pytest.mark.anyio
@pytest.mark.parametrize("phrase", ["idea", "work", "happy", "sad", "success", "anything else"])
async def test_mock_source_satisfies_invariant(phrase: str) -> None:
    client = OpenAISuggestionClient(ProviderConfig(provider="openai", mock_mode=True))

    assert_valid_suggestion_list(await client.fetch_suggestions(phrase))


def test_validator_rejects_empty_input() -> None:
    with pytest.raises(NoValidSuggestions):
        validate_suggestions([], provider="gemini")


def test_validator_rejects_foreign_entries() -> None:
    with pytest.raises(MalformedResponse):
        validate_suggestions([Suggestion("💡", "Idea"), {"emoji": "🚀", "reason": "Launch"}])


@pytest.mark.parametrize("emoji, reason", [("", "reason"), ("💡", ""), ("  ", "reason"), ("💡", None)])
def test_suggestion_rejects_blank_fields(emoji: str, reason: str) -> None:
    with pytest.raises(ValueError):
        Suggestion(emoji, reason)


def test_suggestion_list_rejects_empty_tuple() -> None:
    with pytest.raises(ValueError):
        SuggestionList(items=())


def test_suggestion_list_serializes_in_order() -> None:
    result = SuggestionList(items=(Suggestion("🚀", "Launch"), Suggestion("💡", "Idea")))

    assert result.to_list() == [{"emoji": "🚀", "reason": "Launch"}, {"emoji": "💡", "reason": "Idea"}]


@pytest.mark.parametrize("emoji, reason", [("", "reason"), ("  ", "reason"), ("💡", 7), ("💡", None)])
def test_parsing_and_construction_share_the_field_rule(emoji: object, reason: object) -> None:
    assert not (is_filled(emoji) and is_filled(reason))
    with pytest.raises(ValueError):
        Suggestion(emoji, reason)

    text = json.dumps([{"emoji": emoji, "reason": reason}, {"emoji": "💡", "reason": "Idea"}])
    assert list(parse_suggestions(text, provider="openai")) == [Suggestion("💡", "Idea")]
