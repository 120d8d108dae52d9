"""
Single entry point the presentation layer calls for emoji suggestions.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import httpx
from shared.observability.privacy import hash_payload
from shared.provider_settings import ProviderConfig

from errors import InvalidInput, SuggestionError
from suggestion_client import SuggestionClient, build_suggestion_client
from suggestion_model import SuggestionList

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConfigStatus:
    provider: str
    openai_configured: bool
    gemini_configured: bool
    mock_mode: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def validate_config(config: ProviderConfig) -> ConfigStatus:
    """Report the active provider and which credentials are present."""
    return ConfigStatus(
        provider=config.provider,
        openai_configured=config.openai_configured,
        gemini_configured=config.gemini_configured,
        mock_mode=config.mock_mode,
    )


class SuggestionService:
    """
    Wraps the client selected for `config.provider`.

    Construction raises `UnknownProvider` for unsupported provider names. Every
    failure from the client is logged and re-raised unchanged.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        client: Optional[SuggestionClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config
        self._client = client or build_suggestion_client(config, http_client=http_client)

    @property
    def provider_name(self) -> str:
        return self._client.name

    @property
    def config(self) -> ProviderConfig:
        return self._config

    async def get_suggestions(self, phrase: Any) -> SuggestionList:
        if not isinstance(phrase, str) or not phrase.strip():
            raise InvalidInput("Invalid phrase provided")

        try:
            suggestions = await self._client.fetch_suggestions(phrase)
        except SuggestionError as exc:
            logger.error(
                {
                    "event": "suggestion_request_failed",
                    "provider": self._client.name,
                    "error_code": exc.code,
                    "error_message": str(exc),
                    "phrase_hash": hash_payload(phrase),
                }
            )
            raise

        logger.info(
            {
                "event": "suggestion_request_completed",
                "provider": self._client.name,
                "mock_mode": self._config.mock_mode,
                "suggestion_count": len(suggestions),
                "phrase_hash": hash_payload(phrase),
            }
        )
        return suggestions

    async def aclose(self) -> None:
        await self._client.aclose()
