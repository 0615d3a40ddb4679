"""
Shared pytest fixtures.

- Puts `src/` on the import path (the project uses a src layout).
- Provides a recording `httpx.MockTransport` and an in-memory object reader.
"""
from __future__ import annotations

import sys
from pathlib import Path

_src_path = Path(__file__).parent.parent / "src"
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

import httpx
import pytest

from core.config import AppSettings
from core.errors import LoadError


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, responder):
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return responder(request)

        super().__init__(handler)

    @property
    def urls(self) -> list[str]:
        return [str(r.url) for r in self.requests]


class FakeReader:
    """In-memory `ObjectReader` keyed by location."""

    def __init__(self, objects: dict[str, str]):
        self.objects = objects
        self.reads: list[str] = []

    def read_text(self, location: str) -> str:
        self.reads.append(location)
        if location not in self.objects:
            raise LoadError(f"Object not found: {location}", location=location)
        return self.objects[location]


@pytest.fixture
def settings(monkeypatch) -> AppSettings:
    """Settings isolated from the developer's env vars and .env files."""
    for key in ("HTTP_PAGINATION_MAX_CONCURRENCY", "HTTP_PAGINATION_HTTP_TIMEOUT_SECONDS",
                "HTTP_PAGINATION_LOG_LEVEL", "HTTP_PAGINATION_GCS_PROJECT"):
        monkeypatch.delenv(key, raising=False)
    return AppSettings(_env_file=None)


@pytest.fixture
def echo_transport() -> RecordingTransport:
    """Answers 200 with a body naming the requested URL."""
    return RecordingTransport(lambda request: httpx.Response(200, text=f"body for {request.url}"))


@pytest.fixture
def make_transport():
    return RecordingTransport


@pytest.fixture
def fake_reader():
    return FakeReader
