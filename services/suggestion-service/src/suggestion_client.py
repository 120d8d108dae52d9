from __future__ import annotations

"""
Provider abstraction for emoji suggestion generation.

Each client turns a phrase into a validated SuggestionList. The service picks
exactly one implementation when it is constructed, so request handling never
branches on the provider name.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

import httpx
from shared.provider_settings import SUPPORTED_PROVIDERS, ProviderConfig

from errors import UnknownProvider
from suggestion_model import SuggestionList

logger = logging.getLogger(__name__)


@runtime_checkable
class SuggestionClient(Protocol):
    """
    Interface for swappable suggestion sources.

    Implementations expose a descriptive `name` and an async
    `fetch_suggestions` that either returns a non-empty SuggestionList or raises
    a `SuggestionError` subclass.
    """

    name: str

    async def fetch_suggestions(self, phrase: str) -> SuggestionList:
        """Produce emoji suggestions for the phrase."""
        ...

    async def aclose(self) -> None:
        """Release pooled connections owned by the client."""
        ...


def build_suggestion_client(
    config: ProviderConfig,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> SuggestionClient:
    """
    Factory that instantiates the client for `config.provider`.

    Raises:
        UnknownProvider: the configured name is not one of SUPPORTED_PROVIDERS.
    """

    provider = config.provider
    if provider == "openai":
        from providers.openai_client import OpenAISuggestionClient

        return OpenAISuggestionClient(config, http_client=http_client)
    if provider == "gemini":
        from providers.gemini_client import GeminiSuggestionClient

        return GeminiSuggestionClient(config, http_client=http_client)

    supported = ", ".join(sorted(SUPPORTED_PROVIDERS))
    logger.error({"event": "unknown_provider", "provider": provider, "supported": supported})
    raise UnknownProvider(f"Unknown AI provider: {provider} (expected one of: {supported})", provider=provider)
