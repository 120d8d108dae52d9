import hashlib
import json
from typing import Any

MASK = "***"


def hash_payload(value: Any) -> str:
    """
    Return a stable SHA-256 fingerprint so phrases and upstream bodies can be
    correlated in logs without leaking their contents.

    Strings are encoded as UTF-8, bytes are used as-is, and anything else is
    serialized via JSON (falling back to repr()) before hashing.
    """

    if value is None:
        normalized = b"null"
    elif isinstance(value, bytes):
        normalized = value
    elif isinstance(value, str):
        normalized = value.encode("utf-8")
    else:
        try:
            normalized = json.dumps(value, sort_keys=True, ensure_ascii=False, default=str).encode("utf-8")
        except TypeError:
            normalized = repr(value).encode("utf-8")

    return hashlib.sha256(normalized).hexdigest()


def mask_secret(value: str | None, *, visible: int = 4) -> str | None:
    """Keep only the edges of an API key, e.g. `sk-t***1234`."""

    if value is None:
        return None
    if len(value) <= visible * 3:
        return MASK
    return f"{value[:visible]}{MASK}{value[-visible:]}"
