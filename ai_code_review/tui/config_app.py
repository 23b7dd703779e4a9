"""Textual form for configuring the AI provider."""

from __future__ import annotations

from dataclasses import dataclass, replace

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Center, Horizontal, Vertical
from textual.widgets import Button, Footer, Header, Input, Label, Select, Static

from ai_code_review.core.errors import ConfigurationError, UnsupportedProviderError
from ai_code_review.core.models import AIConfig
from ai_code_review.core.providers import ProviderIdentity, get_provider, list_providers
from ai_code_review.utils.logger import get_logger
from ai_code_review.utils.storage import ConfigStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class FormState:
    """Values currently entered in the form."""

    provider: str = ProviderIdentity.OPENAI.value
    api_key: str = ""
    base_url: str = ""
    model: str = ""

    @classmethod
    def from_config(cls, config: AIConfig | None) -> FormState:
        if config is None:
            return cls()
        try:
            provider = ProviderIdentity.parse(config.provider).value
        except UnsupportedProviderError:
            logger.warning(f"Ignoring stored configuration for unknown provider {config.provider!r}")
            return cls()
        return cls(
            provider=provider,
            api_key=config.api_key,
            base_url=config.base_url or "",
            model=config.model or "",
        )


def on_provider_change(state: FormState, provider: str) -> FormState:
    """Switch provider: model resets to its default, base URL only survives for openai-compatible."""
    is_compatible = provider == ProviderIdentity.OPENAI_COMPATIBLE.value
    return replace(
        state,
        provider=provider,
        model=get_provider(provider).default_model,
        base_url=state.base_url if is_compatible else "",
    )


def form_to_config(state: FormState) -> AIConfig:
    """
    Build a validated configuration record from the form values.

    Raises:
        ConfigurationError: If a required value is missing
    """
    config = AIConfig(
        provider=state.provider,
        api_key=state.api_key.strip(),
        base_url=state.base_url.strip() or None,
        model=state.model.strip() or None,
    )
    config.validate()
    return config


class ConfigFormApp(App[AIConfig | None]):
    """Textual app for editing the stored provider configuration."""

    CSS = """
    Screen {
        align: center middle;
    }

    #container {
        width: 70;
        height: auto;
        border: solid $accent;
        padding: 1 2;
    }

    #title {
        text-align: center;
        text-style: bold;
        padding: 1;
        background: $surface-lighten-1;
        margin-bottom: 1;
    }

    #notice {
        color: $text-muted;
        margin-bottom: 1;
    }

    Label {
        margin-top: 1;
    }

    #buttons {
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, store: ConfigStore | None = None) -> None:
        super().__init__()
        self.store = store or ConfigStore()
        self.state = FormState.from_config(self.store.get())

    def compose(self) -> ComposeResult:
        yield Header()
        with Center():
            with Vertical(id="container"):
                yield Static("AI Provider Configuration", id="title")
                yield Static(
                    f"[dim]Keys are stored locally in {self.store.path}[/dim]",
                    id="notice",
                )
                yield Label("AI Provider")
                yield Select(
                    [(info.name, info.id) for info in list_providers()],
                    value=self.state.provider,
                    allow_blank=False,
                    id="provider",
                )
                yield Label("API Key")
                yield Input(
                    value=self.state.api_key,
                    placeholder="Enter your API key",
                    password=True,
                    id="api-key",
                )
                yield Label("Base URL")
                yield Input(
                    value=self.state.base_url,
                    placeholder="https://api.example.com/v1",
                    id="base-url",
                )
                yield Label("Model (Optional)")
                yield Input(value=self.state.model, id="model")
                with Horizontal(id="buttons"):
                    yield Button("Cancel", id="cancel")
                    yield Button("Save Configuration", variant="primary", id="save")
        yield Footer()

    def on_mount(self) -> None:
        self._sync_provider_fields()
        self.query_one("#api-key", Input).focus()

    def _sync_provider_fields(self) -> None:
        base_url = self.query_one("#base-url", Input)
        base_url.disabled = self.state.provider != ProviderIdentity.OPENAI_COMPATIBLE.value
        base_url.value = self.state.base_url

        model = self.query_one("#model", Input)
        model.placeholder = f"Default: {get_provider(self.state.provider).default_model}"
        model.value = self.state.model

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value == self.state.provider or event.value is Select.BLANK:
            return
        self.state = on_provider_change(self._read_state(), str(event.value))
        self._sync_provider_fields()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save":
            self.action_save()
        else:
            self.action_cancel()

    def _read_state(self) -> FormState:
        return replace(
            self.state,
            api_key=self.query_one("#api-key", Input).value,
            base_url=self.query_one("#base-url", Input).value,
            model=self.query_one("#model", Input).value,
        )

    def action_save(self) -> None:
        """Validate and persist the configuration."""
        self.state = self._read_state()
        try:
            config = form_to_config(self.state)
        except ConfigurationError as e:
            self.notify(e.message, title="Configuration incomplete", severity="error")
            return

        if not self.store.save(config):
            self.notify(
                "Failed to save configuration. Please try again.",
                title="Save Failed",
                severity="error",
            )
            return

        self.exit(config)

    def action_cancel(self) -> None:
        """Close without saving."""
        self.exit(None)


def run_config_tui(store: ConfigStore | None = None) -> AIConfig | None:
    """Run the configuration form and return the saved record, or None if cancelled."""
    app = ConfigFormApp(store)
    return app.run()
