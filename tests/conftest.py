"""
Pytest configuration and shared fixtures.

The provider gateway is stubbed with httpx.MockTransport, injected through
the get_transak_client dependency, so no test touches the network.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from transak_gateway.config import Settings
from transak_gateway.deps import get_transak_client
from transak_gateway.main import create_app
from transak_gateway.services.transak import TransakClient


class UpstreamStub:
    """Records outbound calls and answers with a configurable status/body."""

    def __init__(self):
        self.calls: List[httpx.Request] = []
        self.status = 200
        self.body: Any = {}
        self.raw: Optional[bytes] = None
        self.responder: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def reply(self, status: int = 200, body: Any = None, raw: Optional[bytes] = None):
        self.status = status
        self.body = {} if body is None else body
        self.raw = raw

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.responder is not None:
            return self.responder(request)
        if self.raw is not None:
            return httpx.Response(self.status, content=self.raw)
        return httpx.Response(self.status, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def sent_json(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.calls[index].content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-api-key",
        api_secret="test-api-secret",
        environment="STAGING",
        allowed_origins="*",
        env="development",
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def make_client(upstream):
    def _make(settings: Settings) -> TestClient:
        app = create_app(settings)
        app.dependency_overrides[get_transak_client] = lambda: TransakClient(settings, transport=upstream.transport)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, settings) -> TestClient:
    return make_client(settings)
