# tests/conftest.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

# ---------- Paths & .env ----------
ROOT = Path(__file__).resolve().parents[1]  # repo root
# Optional: load .env from repo root for local runs (CI may inject env separately)
try:
    from dotenv import load_dotenv  # type: ignore
    env_path = ROOT / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=True)
except ImportError:
    pass

# With src/ layout and `pip install -e .`, we can import the app package directly:
from chat_relay.app import app, get_transport  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    print("\n=== Environment Summary ===")
    print(f"LOG_LEVEL={os.getenv('LOG_LEVEL')}")
    print(f"RELAY_TRACE={os.getenv('RELAY_TRACE')}")
    print(f"CHAT_RELAY_CONFIG={os.getenv('CHAT_RELAY_CONFIG')}")
    for var in ("GEMINI_API_KEY", "OPENAI_API_KEY", "GROQ_API_KEY", "ANTHROPIC_API_KEY"):
        print(f"{var}={'set' if os.getenv(var) else '<none>'}")
    print("===========================\n")


# ---------- Simulated upstream ----------
class FakeUpstream:
    """
    Stands in for every provider API. Records each outbound request and
    answers with `body` (JSON) / `raw` (bytes) and `status`, or raises `error`.
    """

    def __init__(self) -> None:
        self.calls: List[httpx.Request] = []
        self.status: int = 200
        self.body: Any = {}
        self.raw: Optional[bytes] = None
        self.error: Optional[Exception] = None

    def reply(self, body: Any, status: int = 200) -> "FakeUpstream":
        self.body, self.status = body, status
        return self

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        if self.raw is not None:
            return httpx.Response(self.status, content=self.raw)
        return httpx.Response(self.status, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def last(self) -> httpx.Request:
        assert self.calls, "no upstream call recorded"
        return self.calls[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


# ---------- Fixtures ----------
@pytest.fixture(scope="session")
def base_client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def relay_client(upstream: FakeUpstream):
    """TestClient whose outbound provider calls go to `upstream`."""
    app.dependency_overrides[get_transport] = lambda: upstream.transport
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_transport, None)


@pytest.fixture
def hello() -> List[dict]:
    return [{"role": "user", "content": "hello"}]


@pytest.fixture
def convo() -> List[dict]:
    return [
        {"role": "user", "content": "What is the capital of France?"},
        {"role": "assistant", "content": "Paris."},
        {"role": "user", "content": "And of Japan?"},
    ]
