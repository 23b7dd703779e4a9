"""Pytest configuration and fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from ai_code_review.core.models import AIConfig
from ai_code_review.utils.config import Settings, get_settings

TransportFactory = Callable[..., tuple[httpx.MockTransport, list[httpx.Request]]]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep settings, storage and project files inside a temporary directory."""
    for name in ("ACR_PROVIDER", "ACR_API_KEY", "ACR_BASE_URL", "ACR_MODEL", "ACR_STORAGE_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ACR_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at the temporary config directory."""
    return Settings(config_dir=tmp_path / "config", request_timeout=5.0)


@pytest.fixture
def sample_code() -> str:
    """Return sample code for review."""
    return '''
def fetch_user(db, user_id):
    query = f"SELECT * FROM users WHERE id = {user_id}"
    return db.execute(query)
'''


@pytest.fixture
def openai_config() -> AIConfig:
    return AIConfig(provider="openai", api_key="sk-test")


@pytest.fixture
def provider_configs() -> dict[str, AIConfig]:
    """One valid configuration per supported provider."""
    return {
        "openai": AIConfig(provider="openai", api_key="sk-test"),
        "gemini": AIConfig(provider="gemini", api_key="sk-test"),
        "claude": AIConfig(provider="claude", api_key="sk-test"),
        "openai-compatible": AIConfig(
            provider="openai-compatible",
            api_key="sk-test",
            base_url="https://llm.example.com/v1",
        ),
    }


@pytest.fixture
def openai_success_body() -> dict[str, Any]:
    """Chat-completions response carrying one success finding."""
    return {
        "choices": [
            {
                "message": {
                    "content": json.dumps([{"type": "success", "title": "ok"}]),
                },
                "finish_reason": "stop",
            }
        ]
    }


@pytest.fixture
def mock_transport() -> TransportFactory:
    """Build an httpx.MockTransport that records the requests it receives."""

    def factory(
        status_code: int = 200,
        body: Any = None,
        text: str | None = None,
        error: Exception | None = None,
    ) -> tuple[httpx.MockTransport, list[httpx.Request]]:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if error is not None:
                raise error
            if text is not None:
                return httpx.Response(status_code, text=text)
            return httpx.Response(status_code, json=body if body is not None else {})

        return httpx.MockTransport(handler), requests

    return factory
