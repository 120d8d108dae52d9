#!/usr/bin/env python3
"""
Diagnostic script to check the AI provider configuration of the suggestion service.

Loads the same ProviderConfig the service builds at start-up, prints the
configuration-introspection result with API keys masked, and exits non-zero
when the selected provider cannot serve requests.
"""

import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SERVICES_ROOT = REPO_ROOT / "services"
SERVICE_SRC = SERVICES_ROOT / "suggestion-service" / "src"
for path in (SERVICES_ROOT, SERVICE_SRC):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from shared.observability.privacy import mask_secret  # noqa: E402
from shared.provider_settings import (  # noqa: E402
    SUPPORTED_PROVIDERS,
    ProviderConfig,
    ProviderSettingsError,
    load_provider_config,
)
from suggestion_service import validate_config  # noqa: E402

OPTIONAL_VARS = {
    "AI_MOCK_MODE": "false",
    "OPENAI_MODEL": "gpt-3.5-turbo",
    "OPENAI_API_BASE": "https://api.openai.com/v1",
    "GEMINI_MODEL": "gemini-pro",
    "GEMINI_API_BASE": "https://generativelanguage.googleapis.com/v1beta",
    "SUGGESTION_PROVIDER_TEMPERATURE": "0.7",
    "SUGGESTION_PROVIDER_MAX_TOKENS": "500",
    "SUGGESTION_PROVIDER_TIMEOUT_SECONDS": "none",
}


def collect_issues(config: ProviderConfig) -> list[str]:
    """Return human-readable problems that would make suggestion requests fail."""
    status = validate_config(config)
    if status.provider not in SUPPORTED_PROVIDERS:
        expected = ", ".join(sorted(SUPPORTED_PROVIDERS))
        return [f"AI_PROVIDER is set to '{status.provider}' but should be one of: {expected}"]
    if status.mock_mode:
        return []
    if status.provider == "openai" and not status.openai_configured:
        return ["OPENAI_API_KEY is not set (or still holds the template placeholder)"]
    if status.provider == "gemini" and not status.gemini_configured:
        return ["GEMINI_API_KEY is not set (or still holds the template placeholder)"]
    return []


def main() -> int:
    print("=" * 70)
    print("AI Provider Configuration Diagnostic")
    print("=" * 70)
    print()

    try:
        config = load_provider_config()
    except ProviderSettingsError as exc:
        print(f"❌ Could not load provider settings: {exc}")
        return 1

    status = validate_config(config)
    print("ACTIVE CONFIGURATION:")
    print("-" * 70)
    print(f"  {'AI_PROVIDER':40} = {status.provider}")
    print(f"  {'mock mode':40} = {status.mock_mode}")
    print(f"  {'OPENAI_API_KEY':40} = {mask_secret(config.openai_api_key) or 'NOT SET'}")
    print(f"  {'GEMINI_API_KEY':40} = {mask_secret(config.gemini_api_key) or 'NOT SET'}")
    print()

    print("OPTIONAL VARIABLES:")
    print("-" * 70)
    for key, default in OPTIONAL_VARS.items():
        value = os.getenv(key)
        if value:
            print(f"✓ {key:40} = {value}")
        else:
            print(f"○ {key:40} = NOT SET (default: {default})")

    print()
    print("=" * 70)

    issues = collect_issues(config)
    if issues:
        print("❌ ISSUES FOUND:")
        for issue in issues:
            print(f"   - {issue}")
        print()
        print("Set the variables above (or AI_MOCK_MODE=true for offline use) and restart the service.")
        return 1

    print("✓ The selected provider is ready to serve suggestions.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
