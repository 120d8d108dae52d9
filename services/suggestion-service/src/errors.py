"""
Typed failures raised by the suggestion core.

Every failure is raised to the immediate caller without retry. The HTTP surface
maps `code` to an error payload and renders the message to the user as-is.
"""

from __future__ import annotations


class SuggestionError(RuntimeError):
    """Base class for all suggestion failures."""

    code = "suggestion_error"

    def __init__(self, message: str, *, provider: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider


class InvalidInput(SuggestionError):
    code = "invalid_input"


class MissingCredential(SuggestionError):
    """No usable API key is configured for the selected provider."""

    code = "missing_credential"


class UnknownProvider(SuggestionError):
    code = "unknown_provider"


class ProviderHttpError(SuggestionError):
    """The upstream API answered with a non-success status."""

    code = "provider_http_error"

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int,
        upstream_message: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider)
        self.status_code = status_code
        self.upstream_message = upstream_message


class ProviderConnectionError(SuggestionError):
    """The upstream API could not be reached (DNS, refused connection, deadline)."""

    code = "provider_unreachable"


class ContentBlocked(SuggestionError):
    """The upstream returned no candidates, typically due to safety filtering."""

    code = "content_blocked"

    def __init__(self, message: str, *, provider: str | None = None, block_reason: str | None = None) -> None:
        super().__init__(message, provider=provider)
        self.block_reason = block_reason


class MalformedResponse(SuggestionError):
    code = "malformed_response"


class NoValidSuggestions(SuggestionError):
    code = "no_valid_suggestions"
