from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app


def completion_envelope(content: str | None) -> dict[str, Any]:
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "deepseek-chat",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }


class FakeDeepSeek:
    """Stands in for the completion endpoint behind an ``httpx.MockTransport``."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responder: Callable[[httpx.Request], httpx.Response] = lambda _: httpx.Response(
            200, json=completion_envelope('{"suggestions": []}')
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def reply_with_content(self, content: str | None) -> None:
        self._responder = lambda _: httpx.Response(200, json=completion_envelope(content))

    def reply_with_suggestions(self, suggestions: list[Any]) -> None:
        self.reply_with_content(json.dumps({"suggestions": suggestions}))

    def reply_with(self, response: httpx.Response) -> None:
        self._responder = lambda _: response

    def fail_with(self, exc_type: type[httpx.TransportError]) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type("simulated transport failure", request=request)

        self._responder = _raise

    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake_deepseek() -> FakeDeepSeek:
    return FakeDeepSeek()


@pytest.fixture
def http_client(fake_deepseek: FakeDeepSeek) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_deepseek))


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "environment": "test",
            "rate_limit": "1000/minute",
            "deepseek_api_key": "test-key",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def make_client(
    make_settings: Callable[..., Settings],
    http_client: httpx.AsyncClient,
) -> Callable[..., TestClient]:
    def _make(**overrides: Any) -> TestClient:
        app = create_app(make_settings(**overrides), http_client=http_client)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()
