"""
Shared observability helpers (telemetry, privacy utilities).
"""

from .privacy import hash_payload, mask_secret
from .telemetry import (
    CORRELATION_ID_HEADER,
    RequestContextToken,
    bind_request_context,
    configure_logging,
    current_request_id,
    ensure_request_id,
    reset_request_context,
    setup_telemetry,
)

__all__ = [
    "hash_payload",
    "mask_secret",
    "CORRELATION_ID_HEADER",
    "RequestContextToken",
    "bind_request_context",
    "configure_logging",
    "current_request_id",
    "ensure_request_id",
    "reset_request_context",
    "setup_telemetry",
]
