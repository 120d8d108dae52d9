"""
Normalization shared by every provider client.

Both upstreams are prompted to return a bare JSON array of
`{"emoji": ..., "reason": ...}` objects but frequently wrap it in a markdown
code fence. `parse_suggestions` turns that raw text into a validated
SuggestionList or raises a typed failure.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any, List, Optional

from errors import MalformedResponse
from shared.observability.privacy import hash_payload
from suggestion_model import Suggestion, SuggestionList, is_filled, validate_suggestions

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```\s*$")

MAX_ERROR_TEXT_CHARS = 200


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    stripped = _OPENING_FENCE.sub("", stripped, count=1)
    stripped = _CLOSING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


def parse_suggestions(raw_text: str, *, provider: str) -> SuggestionList:
    """
    Parse model text into suggestions.

    Raises:
        MalformedResponse: text is not JSON, or not a non-empty JSON array.
        NoValidSuggestions: no entry carries both a non-empty emoji and reason.
    """

    payload = strip_code_fence(raw_text)
    try:
        parsed = json.loads(payload)
    except json.JSONDecodeError as exc:
        logger.error(
            {
                "event": "suggestion_json_parse_error",
                "provider": provider,
                "error_message": str(exc),
                "response_hash": hash_payload(raw_text),
            }
        )
        raise MalformedResponse(f"{_label(provider)} returned invalid JSON", provider=provider) from exc

    if not isinstance(parsed, list) or not parsed:
        logger.error(
            {
                "event": "suggestion_unexpected_shape",
                "provider": provider,
                "payload_type": type(parsed).__name__,
                "response_hash": hash_payload(raw_text),
            }
        )
        raise MalformedResponse(f"{_label(provider)} did not return a list of suggestions", provider=provider)

    suggestions = _filter_items(parsed, provider)
    return validate_suggestions(suggestions, provider=provider)


def _filter_items(items: List[Any], provider: str) -> List[Suggestion]:
    suggestions: List[Suggestion] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping) or not is_filled(item.get("emoji")) or not is_filled(item.get("reason")):
            logger.debug({"event": "suggestion_item_skipped", "provider": provider, "index": index})
            continue
        suggestions.append(Suggestion(emoji=item["emoji"].strip(), reason=item["reason"].strip()))
    return suggestions


def summarize_error_text(text: str, limit: int = MAX_ERROR_TEXT_CHARS) -> Optional[str]:
    """
    Collapse a raw, non-JSON upstream error body into a short single line.

    Error pages can be whole HTML documents; only the first `limit` characters
    are kept so they never reach the caller verbatim.
    """
    collapsed = " ".join(text.split())
    if not collapsed:
        return None
    if len(collapsed) > limit:
        return collapsed[:limit].rstrip() + "..."
    return collapsed


def _label(provider: str) -> str:
    return {"openai": "OpenAI", "gemini": "Gemini"}.get(provider, provider)
