"""Configuration management for AI Code Review."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_CONFIG_FILE = ".ai-code-review.yaml"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="ACR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".config" / "ai-code-review",
        description="Directory holding the persisted provider configuration",
    )
    storage_file: str = Field(default="storage.json", description="Storage file name")

    # Transport
    request_timeout: float = Field(
        default=120.0, gt=0, description="HTTP timeout in seconds for provider calls"
    )

    log_level: str = Field(
        default="WARNING", description="CLI log level when neither --verbose nor --quiet is given"
    )

    # Provider record supplied through the environment (e.g. in CI)
    provider: str | None = Field(default=None, description="Provider id")
    api_key: str | None = Field(default=None, description="Provider API key")
    base_url: str | None = Field(default=None, description="Base URL for openai-compatible")
    model: str | None = Field(default=None, description="Model override")

    def get_storage_path(self) -> Path:
        """Get the full path to the storage file."""
        return Path(self.config_dir).expanduser() / self.storage_file


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_project_config(project_path: Path | None = None) -> dict[str, Any]:
    """Load project-specific overrides from .ai-code-review.yaml."""
    if project_path is None:
        project_path = Path.cwd()

    config_path = project_path / PROJECT_CONFIG_FILE

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        return {}

    return config


def merge_settings(base: Settings, project_config: dict[str, Any]) -> Settings:
    """Merge project config into base settings."""
    if not project_config:
        return base

    merged_data = base.model_dump()
    for key, value in project_config.items():
        if key in merged_data and value is not None:
            merged_data[key] = value

    return Settings(**merged_data)


def get_effective_settings(project_path: Path | None = None) -> Settings:
    """Get settings with project-specific overrides applied."""
    base = get_settings()
    project_config = load_project_config(project_path)
    return merge_settings(base, project_config)
