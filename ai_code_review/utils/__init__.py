"""Utility modules for AI Code Review."""

from ai_code_review.utils.config import Settings, get_effective_settings, get_settings
from ai_code_review.utils.file_ops import read_file_safe, write_file_safe
from ai_code_review.utils.logger import get_logger, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "get_effective_settings",
    "read_file_safe",
    "write_file_safe",
    "get_logger",
    "setup_logging",
]
