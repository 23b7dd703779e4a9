"""Persisted provider configuration (a single named slot in a JSON file)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ai_code_review.core.models import AIConfig
from ai_code_review.utils.config import Settings, get_effective_settings
from ai_code_review.utils.file_ops import read_file_safe, write_file_safe
from ai_code_review.utils.logger import get_logger

logger = get_logger(__name__)

STORAGE_KEY = "code-reviewer-ai-config"


class ConfigStore:
    """Read, write and clear the stored configuration record."""

    def __init__(self, path: Path | str | None = None, settings: Settings | None = None):
        """
        Initialize the store.

        Args:
            path: Storage file (defaults to the path derived from settings)
            settings: Settings instance (uses effective settings if None)
        """
        if path is None:
            path = (settings or get_effective_settings()).get_storage_path()
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}

        content = read_file_safe(self.path)
        if not content:
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt storage file {self.path}: {e}")
            return {}

        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, Any]) -> bool:
        return write_file_safe(self.path, json.dumps(data, indent=2))

    def get(self) -> AIConfig | None:
        """Return the stored record, or None when nothing usable is stored."""
        stored = self._load().get(STORAGE_KEY)
        if not isinstance(stored, dict):
            return None
        return AIConfig.from_dict(stored)

    def save(self, config: AIConfig) -> bool:
        """Overwrite the stored record."""
        data = self._load()
        data[STORAGE_KEY] = config.to_dict()

        if self._dump(data):
            logger.info(f"Saved {config.provider} configuration to {self.path}")
            return True

        logger.error(f"Failed to save configuration to {self.path}")
        return False

    def clear(self) -> bool:
        """Remove the stored record. Returns False only when the write fails."""
        data = self._load()
        if STORAGE_KEY not in data:
            return True

        del data[STORAGE_KEY]
        if self._dump(data):
            logger.info(f"Cleared configuration in {self.path}")
            return True

        logger.error(f"Failed to clear configuration in {self.path}")
        return False
