"""
Pytest configuration and fixtures
"""
import json
import sys
from pathlib import Path

import httpx
import pytest

# Ensure project root is on sys.path for imports in tests
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.session import SessionState  # noqa: E402
from services.generation_client import GenerationClient  # noqa: E402

ENDPOINT = "https://generator.test/api/ai"


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def make_client():
    """Build a GenerationClient backed by httpx.MockTransport; captured request bodies land in `sent`."""
    def _make(handler):
        sent = []

        def _recording(request: httpx.Request):
            sent.append(json.loads(request.content))
            return handler(request)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(_recording))
        return GenerationClient(ENDPOINT, timeout_seconds=5, http_client=http_client), sent

    return _make
