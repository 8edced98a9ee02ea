from __future__ import annotations

import json
from typing import Any, List

import httpx
import pytest

from sentry_lookup.api.sentry_client import SentryClient
from sentry_lookup.core.config import LookupConfig
from sentry_lookup.core.logging import configure_logging


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch):
    for key in ["SENTRY_APIKEY", "SENTRY_URL", "SENTRY_ORG", "SENTRY_LOOKUP_CACHE_DIR"]:
        monkeypatch.delenv(key, raising=False)
    yield
    configure_logging()


class FakeSentry:
    """Serves the projects endpoint and records every request it sees."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.body: Any = [
            {"id": "123", "slug": "my-proj", "name": "My Project"},
            {"id": "456", "slug": "other-proj", "name": "Other"},
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, content=json.dumps(self.body).encode())

    def client(self, api_url: str = "https://sentry.io", api_key: str = "token") -> SentryClient:
        return SentryClient(api_url, api_key, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_sentry() -> FakeSentry:
    return FakeSentry()


@pytest.fixture
def config(tmp_path) -> LookupConfig:
    return LookupConfig(api_key="token", org="acme", cache_dir=tmp_path / "cache")
