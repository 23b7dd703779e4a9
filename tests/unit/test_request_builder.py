"""Unit tests for per-provider request construction."""

from __future__ import annotations

import pytest

from ai_code_review.core.errors import UnsupportedProviderError
from ai_code_review.core.models import AIConfig
from ai_code_review.core.request_builder import build_request

PROMPT = "Review this"


class TestOpenAIRequest:
    """Tests for the OpenAI chat-completions request."""

    def test_exact_request(self) -> None:
        request = build_request(AIConfig(provider="openai", api_key="sk-test"), PROMPT)

        assert request.method == "POST"
        assert request.url == "https://api.openai.com/v1/chat/completions"
        assert request.headers == {
            "Authorization": "Bearer sk-test",
            "Content-Type": "application/json",
        }
        assert request.body == (
            '{"model":"gpt-4","messages":[{"role":"user","content":"Review this"}],'
            '"temperature":0.1,"max_tokens":4000}'
        )

    def test_explicit_model(self) -> None:
        config = AIConfig(provider="openai", api_key="sk-test", model="gpt-4o")
        assert build_request(config, PROMPT).json()["model"] == "gpt-4o"

    def test_prompt_is_not_escaped_beyond_json(self) -> None:
        """Test that non-ASCII prompt text survives unchanged."""
        request = build_request(AIConfig(provider="openai", api_key="k"), "naïve café")
        assert request.json()["messages"][0]["content"] == "naïve café"


class TestGeminiRequest:
    """Tests for the Gemini generateContent request."""

    def test_exact_request(self) -> None:
        request = build_request(AIConfig(provider="gemini", api_key="sk-test"), PROMPT)

        assert request.url == (
            "https://generativelanguage.googleapis.com/v1beta/models/"
            "gemini-1.5-pro:generateContent?key=sk-test"
        )
        assert request.headers == {"Content-Type": "application/json"}
        assert request.json() == {
            "contents": [{"parts": [{"text": "Review this"}]}],
            "generationConfig": {"temperature": 0.1, "maxOutputTokens": 4000},
        }

    def test_key_travels_only_in_url(self) -> None:
        request = build_request(AIConfig(provider="gemini", api_key="sk-test"), PROMPT)
        assert "Authorization" not in request.headers
        assert "sk-test" not in request.body

    def test_model_in_path(self) -> None:
        config = AIConfig(provider="gemini", api_key="k", model="gemini-1.5-flash")
        assert "/models/gemini-1.5-flash:generateContent" in build_request(config, PROMPT).url


class TestClaudeRequest:
    """Tests for the Anthropic messages request."""

    def test_exact_request(self) -> None:
        request = build_request(AIConfig(provider="claude", api_key="sk-test"), PROMPT)

        assert request.url == "https://api.anthropic.com/v1/messages"
        assert request.headers == {
            "Authorization": "Bearer sk-test",
            "Content-Type": "application/json",
            "x-api-key": "sk-test",
            "anthropic-version": "2023-06-01",
        }
        assert request.body == (
            '{"model":"claude-3-5-sonnet-20241022","max_tokens":4000,"temperature":0.1,'
            '"messages":[{"role":"user","content":"Review this"}]}'
        )


class TestOpenAICompatibleRequest:
    """Tests for the OpenAI-compatible request."""

    def test_exact_request(self) -> None:
        config = AIConfig(
            provider="openai-compatible",
            api_key="sk-test",
            base_url="https://llm.example.com/v1",
        )
        request = build_request(config, PROMPT)

        assert request.url == "https://llm.example.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        assert request.json() == {
            "model": "gpt-3.5-turbo",
            "messages": [{"role": "user", "content": "Review this"}],
            "temperature": 0.1,
            "max_tokens": 4000,
        }

    def test_trailing_slash_is_trimmed(self) -> None:
        config = AIConfig(
            provider="openai-compatible",
            api_key="k",
            base_url="http://localhost:11434/v1/",
        )
        assert build_request(config, PROMPT).url == "http://localhost:11434/v1/chat/completions"


class TestDispatch:
    """Tests for provider dispatch."""

    def test_unsupported_provider(self) -> None:
        with pytest.raises(UnsupportedProviderError, match="Unsupported provider: mistral"):
            build_request(AIConfig(provider="mistral", api_key="k"), PROMPT)

    @pytest.mark.parametrize("provider", ["openai", "gemini", "claude", "openai-compatible"])
    def test_body_is_valid_json(self, provider: str) -> None:
        config = AIConfig(provider=provider, api_key="k", base_url="https://x/v1")
        assert isinstance(build_request(config, PROMPT).json(), dict)
