"""Pytest configuration for root-level tests.

Adds the services root and the suggestion service src directory to sys.path
so scripts and cross-service code can be imported.
"""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SERVICES_ROOT = REPO_ROOT / "services"

SERVICE_PATHS = [
    SERVICES_ROOT / "suggestion-service" / "src",
    SERVICES_ROOT,
]

for path in SERVICE_PATHS:
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)
