"""
Gemini-powered emoji suggestion client.

Talks to the generate-content REST endpoint directly with httpx. The API key
travels as the `key` query parameter. An empty candidate list means the prompt
was filtered upstream and is reported as ContentBlocked rather than as a
formatting problem.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from shared.observability.privacy import hash_payload
from shared.provider_settings import ProviderConfig

from errors import (
    ContentBlocked,
    MalformedResponse,
    MissingCredential,
    ProviderConnectionError,
    ProviderHttpError,
)
from mock_suggestions import mock_suggestions
from response_normalization import parse_suggestions, summarize_error_text
from suggestion_model import SuggestionList

logger = logging.getLogger(__name__)

SUGGESTION_COUNT = 4

PROMPT_TEMPLATE = (
    'Given the phrase: "{phrase}", suggest the {count} most relevant emojis with brief explanations. '
    'Return ONLY a JSON array with format: [{{"emoji": "💡", "reason": "Represents ideas"}}]'
)


def build_request_body(phrase: str, *, temperature: float, max_output_tokens: int) -> dict[str, Any]:
    return {
        "contents": [{"parts": [{"text": PROMPT_TEMPLATE.format(phrase=phrase, count=SUGGESTION_COUNT)}]}],
        "generationConfig": {"temperature": temperature, "maxOutputTokens": max_output_tokens},
    }


class GeminiSuggestionClient:
    """
    One POST per phrase to `{api_base}/models/{model}:generateContent`.

    When no `httpx.AsyncClient` is injected a short-lived client is opened for
    each call.
    """

    name = "gemini"

    def __init__(self, config: ProviderConfig, *, http_client: Optional[httpx.AsyncClient] = None):
        self._mock_mode = config.mock_mode
        self._api_key = config.gemini_api_key
        self._endpoint = f"{config.gemini_api_base}/models/{config.gemini_model}:generateContent"
        self._model = config.gemini_model
        self._temperature = config.temperature
        self._max_tokens = config.max_output_tokens
        self._timeout = config.timeout_seconds
        self._http_client = http_client

    async def fetch_suggestions(self, phrase: str) -> SuggestionList:
        if self._mock_mode:
            logger.info({"event": "mock_suggestions", "provider": self.name, "phrase_hash": hash_payload(phrase)})
            return mock_suggestions(phrase)

        if not self._api_key:
            raise MissingCredential(
                "Gemini API key not configured. Please set GEMINI_API_KEY in the environment.",
                provider=self.name,
            )

        logger.info(
            {
                "event": "gemini_suggestion_request",
                "provider": self.name,
                "model": self._model,
                "phrase_hash": hash_payload(phrase),
            }
        )

        body = build_request_body(phrase, temperature=self._temperature, max_output_tokens=self._max_tokens)
        response = await self._post(body)

        if not response.is_success:
            upstream_message = _upstream_error_message(response)
            logger.error(
                {
                    "event": "gemini_suggestion_error",
                    "provider": self.name,
                    "status_code": response.status_code,
                    "error_message": upstream_message,
                }
            )
            detail = f": {upstream_message}" if upstream_message else ""
            raise ProviderHttpError(
                f"Gemini API error ({response.status_code}){detail}",
                provider=self.name,
                status_code=response.status_code,
                upstream_message=upstream_message,
            )

        try:
            data = response.json()
        except ValueError as exc:
            logger.error({"event": "gemini_invalid_body", "provider": self.name, "error_message": str(exc)})
            raise MalformedResponse("Gemini response body was not valid JSON", provider=self.name) from exc

        if not isinstance(data, dict):
            raise MalformedResponse("Gemini response body was not a JSON object", provider=self.name)

        candidates = data.get("candidates")
        if not candidates:
            feedback = data.get("promptFeedback")
            block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            logger.warning({"event": "gemini_content_blocked", "provider": self.name, "block_reason": block_reason})
            reason = f" ({block_reason})" if block_reason else ""
            raise ContentBlocked(
                f"Gemini returned no suggestions; the content may have been blocked{reason}",
                provider=self.name,
                block_reason=block_reason,
            )

        text = _first_candidate_text(candidates)
        if text is None:
            logger.error({"event": "gemini_missing_text", "provider": self.name, "response_hash": hash_payload(data)})
            raise MalformedResponse("Gemini response did not include any text", provider=self.name)

        suggestions = parse_suggestions(text, provider=self.name)
        logger.info(
            {
                "event": "gemini_suggestion_response",
                "provider": self.name,
                "suggestion_count": len(suggestions),
                "response_hash": hash_payload(text),
            }
        )
        return suggestions

    async def aclose(self) -> None:
        # Injected clients belong to the caller; per-call clients are already closed.
        return None

    async def _post(self, body: dict[str, Any]) -> httpx.Response:
        try:
            if self._http_client is not None:
                timeout = httpx.USE_CLIENT_DEFAULT if self._timeout is None else self._timeout
                return await self._http_client.post(
                    self._endpoint, params={"key": self._api_key}, json=body, timeout=timeout
                )
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.post(self._endpoint, params={"key": self._api_key}, json=body)
        except httpx.RequestError as exc:
            # str(exc) can embed the request URL, which carries the key.
            logger.error({"event": "gemini_connection_error", "provider": self.name, "error_type": type(exc).__name__})
            raise ProviderConnectionError(
                f"Could not reach Gemini API ({type(exc).__name__})", provider=self.name
            ) from exc


def _first_candidate_text(candidates: Any) -> Optional[str]:
    try:
        text = candidates[0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text


def _upstream_error_message(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return summarize_error_text(response.text)
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return None
