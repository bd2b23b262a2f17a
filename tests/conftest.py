"""
Shared fixtures: a fake Twelve Data upstream (httpx.MockTransport) and an app wired to it.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from stockgate.cache import ResponseCache
from stockgate.config import Settings
from stockgate.main import create_app


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """Answers by URL path and records every request it receives."""

    def __init__(self):
        self.responses: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def reply(self, path: str, json: Any = None, status_code: int = 200, **kwargs) -> None:
        self.responses[path] = {"status_code": status_code, "json": json, **kwargs}

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        spec = self.responses.get(request.url.path)
        if spec is None:
            return httpx.Response(404, json={"status": "error", "message": "not stubbed"})
        # fresh Response per call; httpx marks a Response consumed after one read
        return httpx.Response(**spec)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return Settings(twelve_data_api_key="test-key", twelve_data_base_url="https://upstream.test")


@pytest.fixture
def cache(clock: FakeClock) -> ResponseCache:
    return ResponseCache(clock=clock)


@pytest.fixture
def client(settings, cache, upstream) -> Iterator[TestClient]:
    app = create_app(settings=settings, cache=cache, transport=upstream.transport)
    with TestClient(app) as c:
        yield c
