"""Unit tests for settings and project configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ai_code_review.utils.config import (
    PROJECT_CONFIG_FILE,
    Settings,
    get_effective_settings,
    get_settings,
    load_project_config,
    merge_settings,
)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.request_timeout == 120.0
        assert settings.storage_file == "storage.json"
        assert settings.provider is None
        assert settings.log_level == "WARNING"

    def test_environment_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ACR_REQUEST_TIMEOUT", "30")
        monkeypatch.setenv("ACR_PROVIDER", "gemini")

        settings = Settings()

        assert settings.request_timeout == 30.0
        assert settings.provider == "gemini"

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(request_timeout=0)

    def test_storage_path(self, tmp_path: Path) -> None:
        settings = Settings(config_dir=tmp_path, storage_file="acr.json")
        assert settings.get_storage_path() == tmp_path / "acr.json"

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()


class TestProjectConfig:
    """Tests for .ai-code-review.yaml handling."""

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_project_config(tmp_path) == {}

    def test_load(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_FILE).write_text("request_timeout: 45\nmodel: gpt-4o\n")
        assert load_project_config(tmp_path) == {"request_timeout": 45, "model": "gpt-4o"}

    def test_non_mapping_is_ignored(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_FILE).write_text("- a\n- b\n")
        assert load_project_config(tmp_path) == {}

    def test_merge_ignores_unknown_keys(self) -> None:
        merged = merge_settings(Settings(), {"request_timeout": 10, "colour": "blue"})

        assert merged.request_timeout == 10
        assert not hasattr(merged, "colour")

    def test_effective_settings(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_FILE).write_text("provider: claude\n")
        assert get_effective_settings(tmp_path).provider == "claude"
