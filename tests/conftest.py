"""
Shared fixtures: a FastAPI TestClient whose AI gateway is an httpx.MockTransport.

Nothing here touches the network; every upstream request is recorded on the
`upstream` fixture so tests can assert what was (or was not) sent.
"""

import json
from typing import Callable, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from controller.controller_dependencies import get_claim_analysis_service
from core.gateway_client import GatewayClient, GatewayConfig
from main import app
from service.claim_analysis_service import ClaimAnalysisService

TEST_API_URL = "https://gateway.test/v1/chat/completions"
TEST_MODEL = "test/model"


def chat_body(content: Optional[str]) -> dict:
    """Chat-completion response body with a single choice."""
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class Upstream:
    """Scriptable stand-in for the chat-completion endpoint."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._respond: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json=chat_body("{}"))
        )

    def returns_content(self, content: Optional[str]) -> None:
        self._respond = lambda request: httpx.Response(200, json=chat_body(content))

    def returns(self, status_code: int, **kwargs) -> None:
        self._respond = lambda request: httpx.Response(status_code, **kwargs)

    def raises(self, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self._respond = _raise

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def called(self) -> bool:
        return bool(self.requests)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)

    def last_user_prompt(self) -> str:
        messages = self.last_payload()["messages"]
        return next(m["content"] for m in messages if m["role"] == "user")


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def make_client(upstream):
    """Build a TestClient wired to `upstream` with the given gateway credential."""

    def _make(api_key: Optional[str] = "test-key", max_retries: int = 0) -> TestClient:
        config = GatewayConfig(
            api_url=TEST_API_URL,
            model=TEST_MODEL,
            api_key=api_key,
            timeout=5.0,
            max_retries=max_retries,
        )
        gateway = GatewayClient(config, transport=httpx.MockTransport(upstream.handler))
        app.dependency_overrides[get_claim_analysis_service] = (
            lambda: ClaimAnalysisService(gateway)
        )
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()
