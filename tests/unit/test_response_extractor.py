"""Unit tests for response text extraction."""

from __future__ import annotations

import pytest

from ai_code_review.core.errors import UnsupportedProviderError
from ai_code_review.core.response_extractor import extract_text


class TestExtractText:
    """Tests for extract_text."""

    @pytest.mark.parametrize("provider", ["openai", "openai-compatible"])
    def test_chat_completions(self, provider: str) -> None:
        body = {"choices": [{"message": {"content": "X"}}]}
        assert extract_text(provider, body) == "X"

    def test_gemini(self) -> None:
        body = {"candidates": [{"content": {"parts": [{"text": "X"}]}}]}
        assert extract_text("gemini", body) == "X"

    def test_claude(self) -> None:
        assert extract_text("claude", {"content": [{"text": "X", "type": "text"}]}) == "X"

    @pytest.mark.parametrize(
        "body",
        [
            {},
            None,
            [],
            "text",
            {"choices": []},
            {"choices": {"0": {}}},
            {"choices": [{"message": None}]},
            {"choices": [{"message": {"content": None}}]},
            {"choices": [{"message": {"content": 42}}]},
        ],
    )
    def test_malformed_bodies_yield_empty_text(self, body: object) -> None:
        """Test that missing or mistyped paths never raise."""
        assert extract_text("openai", body) == ""

    def test_other_provider_shape_is_ignored(self) -> None:
        """Test that a body shaped for another provider yields nothing."""
        assert extract_text("claude", {"choices": [{"message": {"content": "X"}}]}) == ""

    def test_unsupported_provider(self) -> None:
        with pytest.raises(UnsupportedProviderError):
            extract_text("mistral", {})
