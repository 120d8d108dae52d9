"""Pytest configuration for suggestion-service tests.

Ensures the service's own src directory takes precedence in sys.path
and that the shared package under services/ is importable.
"""

import sys
from pathlib import Path
from typing import Callable, List

import httpx
import pytest

SERVICES_ROOT = Path(__file__).resolve().parents[2]
if str(SERVICES_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICES_ROOT))

# Ensure this service's src is first in sys.path
SERVICE_SRC = Path(__file__).resolve().parents[1] / "src"
if str(SERVICE_SRC) not in sys.path:
    sys.path.insert(0, str(SERVICE_SRC))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    """Factory for transports that record the requests they serve."""
    return RecordingTransport


@pytest.fixture
def unreachable_transport() -> RecordingTransport:
    """Transport that fails the test if any request is attempted."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"Unexpected outbound request to {request.url}")

    return RecordingTransport(handler)
