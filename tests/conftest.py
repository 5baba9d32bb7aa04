"""Shared test fixtures for MergeGuard."""

from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from mergeguard.config import Settings
from mergeguard.core.ollama_client import OllamaRiskClient
from mergeguard.core.signature import compute_signature

WEBHOOK_SECRET = "It's a Secret to Everybody"
OLLAMA_BASE_URL = "http://ollama.test/api"

GOOD_MODEL_CONTENT = json.dumps(
    {"riskScore": 42, "riskLevel": "Medium", "reasons": ["r1"], "recommendedTests": ["t1"]}
)


def ollama_reply(content) -> dict:
    return {"model": "gemma3:1b", "message": {"role": "assistant", "content": content}, "done": True}


class FakeOllama:
    """Records /api/chat calls and answers with a canned reply."""

    def __init__(self):
        self.calls: list[dict] = []
        self.status_code = 200
        self.reply: dict = ollama_reply(GOOD_MODEL_CONTENT)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": []})
        self.calls.append({"path": request.url.path, "body": json.loads(request.content)})
        return httpx.Response(self.status_code, json=self.reply)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        GITHUB_WEBHOOK_SECRET=WEBHOOK_SECRET,
        OLLAMA_BASE_URL=OLLAMA_BASE_URL,
    )


@pytest.fixture
def fake_ollama() -> FakeOllama:
    return FakeOllama()


@pytest.fixture
def risk_client(fake_ollama: FakeOllama, settings: Settings) -> OllamaRiskClient:
    http = httpx.AsyncClient(base_url=OLLAMA_BASE_URL, transport=httpx.MockTransport(fake_ollama.handler))
    return OllamaRiskClient(http, settings)


@pytest.fixture
def sign() -> Callable[[bytes], str]:
    def _sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
        return "sha256=" + compute_signature(body, secret)

    return _sign


@pytest.fixture
def client(settings: Settings, risk_client: OllamaRiskClient):
    """FastAPI TestClient with settings and the Ollama client swapped for test doubles."""
    from fastapi.testclient import TestClient

    from mergeguard.api.endpoints import get_risk_client, get_settings
    from mergeguard.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_risk_client] = lambda: risk_client
    yield TestClient(app)
    app.dependency_overrides.clear()
