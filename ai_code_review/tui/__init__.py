"""TUI components for AI Code Review."""

from ai_code_review.tui.config_app import (
    ConfigFormApp,
    FormState,
    form_to_config,
    on_provider_change,
    run_config_tui,
)

__all__ = [
    "ConfigFormApp",
    "FormState",
    "form_to_config",
    "on_provider_change",
    "run_config_tui",
]
