"""
Shared utilities for the emoji suggestion services.

This package contains code shared across service entrypoints and scripts:
- provider_settings: Configuration for the pluggable AI providers
- observability: Telemetry, logging, and privacy utilities
"""

from .provider_settings import (
    SUPPORTED_PROVIDERS,
    ProviderConfig,
    ProviderSettingsError,
    load_provider_config,
)

__all__ = [
    "SUPPORTED_PROVIDERS",
    "ProviderConfig",
    "ProviderSettingsError",
    "load_provider_config",
]
