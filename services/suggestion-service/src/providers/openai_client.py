"""
OpenAI-powered emoji suggestion client.

Sends one chat-completion request per phrase and parses the model's reply as a
bare JSON array of `{"emoji", "reason"}` objects. Upstream failures surface as
typed errors; nothing is retried.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from shared.observability.privacy import hash_payload
from shared.provider_settings import ProviderConfig

from errors import MalformedResponse, MissingCredential, ProviderConnectionError, ProviderHttpError
from mock_suggestions import mock_suggestions
from response_normalization import parse_suggestions, summarize_error_text
from suggestion_model import SuggestionList

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 5

SYSTEM_PROMPT = (
    "You are an emoji suggestion assistant. Respond with a bare JSON array only. "
    "Do not wrap it in markdown and do not add any prose."
)

USER_PROMPT_TEMPLATE = (
    'Given the phrase: "{phrase}", suggest exactly {count} relevant emojis with brief explanations. '
    'Return ONLY a JSON array with format: [{{"emoji": "💡", "reason": "Represents ideas"}}]'
)


def build_messages(phrase: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_TEMPLATE.format(phrase=phrase, count=SUGGESTION_COUNT)},
    ]


class OpenAISuggestionClient:
    """
    Chat-completions client built on the official `openai` SDK.

    The SDK's own retry loop is disabled (`max_retries=0`) so every failure
    reaches the caller immediately. An `httpx.AsyncClient` may be injected to
    share a connection pool or to stub the upstream in tests.
    """

    name = "openai"

    def __init__(self, config: ProviderConfig, *, http_client: Optional[httpx.AsyncClient] = None):
        self._mock_mode = config.mock_mode
        self._model = config.openai_model
        self._temperature = config.temperature
        self._max_tokens = config.max_output_tokens
        self._owns_http_client = http_client is None
        self._client: Optional[AsyncOpenAI] = None
        # None disables the deadline unless an injected client carries its own.
        timeout = config.timeout_seconds
        if timeout is None and http_client is not None:
            timeout = http_client.timeout
        if config.openai_api_key:
            self._client = AsyncOpenAI(
                api_key=config.openai_api_key,
                base_url=config.openai_api_base,
                timeout=timeout,
                max_retries=0,
                http_client=http_client,
            )

    async def fetch_suggestions(self, phrase: str) -> SuggestionList:
        if self._mock_mode:
            logger.info({"event": "mock_suggestions", "provider": self.name, "phrase_hash": hash_payload(phrase)})
            return mock_suggestions(phrase)

        if self._client is None:
            raise MissingCredential(
                "OpenAI API key not configured. Please set OPENAI_API_KEY in the environment.",
                provider=self.name,
            )

        logger.info(
            {
                "event": "openai_suggestion_request",
                "provider": self.name,
                "model": self._model,
                "phrase_hash": hash_payload(phrase),
            }
        )

        try:
            completion = await self._client.chat.completions.create(
                model=self._model,
                messages=build_messages(phrase),
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except APIStatusError as exc:
            upstream_message = _upstream_error_message(exc.body)
            logger.error(
                {
                    "event": "openai_suggestion_error",
                    "provider": self.name,
                    "status_code": exc.status_code,
                    "error_type": type(exc).__name__,
                    "error_message": upstream_message,
                }
            )
            detail = f": {upstream_message}" if upstream_message else ""
            raise ProviderHttpError(
                f"OpenAI API error ({exc.status_code}){detail}",
                provider=self.name,
                status_code=exc.status_code,
                upstream_message=upstream_message,
            ) from exc
        except APIConnectionError as exc:
            logger.error(
                {
                    "event": "openai_connection_error",
                    "provider": self.name,
                    "error_type": type(exc).__name__,
                    "error_message": str(exc),
                }
            )
            raise ProviderConnectionError(f"Could not reach OpenAI API: {exc}", provider=self.name) from exc
        except ValueError as exc:
            # The SDK decodes the body itself; a non-JSON 2xx body surfaces here.
            logger.error({"event": "openai_invalid_body", "provider": self.name, "error_message": str(exc)})
            raise MalformedResponse("OpenAI response body was not valid JSON", provider=self.name) from exc

        content = _first_choice_content(completion)
        if content is None:
            logger.error({"event": "openai_empty_completion", "provider": self.name})
            raise MalformedResponse("OpenAI response did not include any message content", provider=self.name)

        suggestions = parse_suggestions(content, provider=self.name)
        logger.info(
            {
                "event": "openai_suggestion_response",
                "provider": self.name,
                "suggestion_count": len(suggestions),
                "response_hash": hash_payload(content),
            }
        )
        return suggestions

    async def aclose(self) -> None:
        if self._client is not None and self._owns_http_client:
            await self._client.close()


def _first_choice_content(completion: Any) -> Optional[str]:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    content = getattr(message, "content", None)
    if not isinstance(content, str) or not content.strip():
        return None
    return content


def _upstream_error_message(body: Any) -> Optional[str]:
    # The SDK hands over the inner `error` object when the body is JSON.
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    if isinstance(body, str):
        return summarize_error_text(body)
    return None
