from __future__ import annotations

"""
Shared helpers for configuring the emoji suggestion provider.

The provider selection, credentials, and outbound call tuning are read from
the process environment exactly once at start-up. The resulting
`ProviderConfig` is frozen and passed explicitly into the suggestion service so
no other module reads the environment on its own.
"""

import os
from dataclasses import dataclass
from typing import Optional

SUPPORTED_PROVIDERS = frozenset({"openai", "gemini"})
DEFAULT_PROVIDER = "openai"

# Values shipped in .env templates; treated the same as an unset key.
OPENAI_KEY_PLACEHOLDER = "your_openai_api_key_here"
GEMINI_KEY_PLACEHOLDER = "your_gemini_api_key_here"

DEFAULT_OPENAI_MODEL = "gpt-3.5-turbo"
DEFAULT_OPENAI_API_BASE = "https://api.openai.com/v1"
DEFAULT_GEMINI_MODEL = "gemini-pro"
DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class ProviderSettingsError(RuntimeError):
    """Raised when provider configuration cannot be constructed."""


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    provider: str = DEFAULT_PROVIDER
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    mock_mode: bool = False
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_api_base: str = DEFAULT_OPENAI_API_BASE
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_api_base: str = DEFAULT_GEMINI_API_BASE
    temperature: float = 0.7
    max_output_tokens: int = 500
    timeout_seconds: Optional[float] = None

    @property
    def openai_configured(self) -> bool:
        return self.openai_api_key is not None

    @property
    def gemini_configured(self) -> bool:
        return self.gemini_api_key is not None


def load_provider_config(
    *,
    provider_env: str = "AI_PROVIDER",
    mock_mode_env: str = "AI_MOCK_MODE",
    timeout_env: str = "SUGGESTION_PROVIDER_TIMEOUT_SECONDS",
    temperature_env: str = "SUGGESTION_PROVIDER_TEMPERATURE",
    max_tokens_env: str = "SUGGESTION_PROVIDER_MAX_TOKENS",
    default_temperature: float = 0.7,
    default_max_tokens: int = 500,
) -> ProviderConfig:
    """
    Construct the ProviderConfig for the suggestion service.

    The provider name is normalized but not checked against
    `SUPPORTED_PROVIDERS`; the service rejects unsupported names when it picks a
    client so callers get a typed `UnknownProvider` failure.

    Args:
        provider_env: Env var that selects the provider implementation.
        mock_mode_env: Env var that switches clients to the offline keyword table.
        timeout_env: Env var that sets an outbound deadline. Unset means none.
        temperature_env: Env var that tunes generation randomness.
        max_tokens_env: Env var that caps model responses.
    """

    return ProviderConfig(
        provider=_normalize_provider(os.getenv(provider_env)),
        openai_api_key=_read_api_key("OPENAI_API_KEY", OPENAI_KEY_PLACEHOLDER),
        gemini_api_key=_read_api_key("GEMINI_API_KEY", GEMINI_KEY_PLACEHOLDER),
        mock_mode=parse_bool(os.getenv(mock_mode_env, "false")),
        openai_model=_read_str("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
        openai_api_base=_read_str("OPENAI_API_BASE", DEFAULT_OPENAI_API_BASE).rstrip("/"),
        gemini_model=_read_str("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
        gemini_api_base=_read_str("GEMINI_API_BASE", DEFAULT_GEMINI_API_BASE).rstrip("/"),
        temperature=_parse_float(os.getenv(temperature_env), default_temperature, temperature_env),
        max_output_tokens=_parse_int(os.getenv(max_tokens_env), default_max_tokens, max_tokens_env),
        timeout_seconds=_parse_optional_float(os.getenv(timeout_env), timeout_env),
    )


def is_placeholder_key(value: Optional[str], placeholder: str) -> bool:
    return value is None or value.strip() == "" or value.strip() == placeholder


def parse_bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _normalize_provider(raw_value: Optional[str]) -> str:
    candidate = (raw_value or "").strip().lower()
    return candidate or DEFAULT_PROVIDER


def _read_api_key(env_key: str, placeholder: str) -> Optional[str]:
    raw_value = os.getenv(env_key)
    if is_placeholder_key(raw_value, placeholder):
        return None
    return raw_value.strip()


def _read_str(env_key: str, default: str) -> str:
    raw_value = os.getenv(env_key)
    if raw_value is None or raw_value.strip() == "":
        return default
    return raw_value.strip()


def _parse_float(raw_value: Optional[str], default: float, env_key: str) -> float:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return float(raw_value)
    except ValueError as exc:
        raise ProviderSettingsError(f"{env_key} must be numeric (received '{raw_value}')") from exc


def _parse_optional_float(raw_value: Optional[str], env_key: str) -> Optional[float]:
    if raw_value is None or raw_value.strip() == "":
        return None
    return _parse_float(raw_value, 0.0, env_key)


def _parse_int(raw_value: Optional[str], default: int, env_key: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return int(raw_value)
    except ValueError as exc:
        raise ProviderSettingsError(f"{env_key} must be an integer (received '{raw_value}')") from exc
