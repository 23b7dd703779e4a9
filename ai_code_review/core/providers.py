"""Catalog of supported AI providers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ai_code_review.core.errors import UnsupportedProviderError


class ProviderIdentity(str, Enum):
    """Supported provider backends, valued by their persisted id."""

    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"
    OPENAI_COMPATIBLE = "openai-compatible"

    @classmethod
    def parse(cls, value: ProviderIdentity | str) -> ProviderIdentity:
        """Resolve a provider id, raising UnsupportedProviderError for unknown ones."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedProviderError(value) from None


@dataclass(frozen=True)
class ProviderInfo:
    """Static description of one provider."""

    identity: ProviderIdentity
    name: str
    default_model: str
    error_label: str
    default_base_url: str | None = None
    requires_api_key: bool = True

    @property
    def id(self) -> str:
        return self.identity.value


PROVIDERS: dict[ProviderIdentity, ProviderInfo] = {
    ProviderIdentity.OPENAI: ProviderInfo(
        identity=ProviderIdentity.OPENAI,
        name="OpenAI",
        default_model="gpt-4",
        error_label="OpenAI API error",
    ),
    ProviderIdentity.GEMINI: ProviderInfo(
        identity=ProviderIdentity.GEMINI,
        name="Google Gemini",
        default_model="gemini-1.5-pro",
        error_label="Gemini API error",
    ),
    ProviderIdentity.CLAUDE: ProviderInfo(
        identity=ProviderIdentity.CLAUDE,
        name="Anthropic Claude",
        default_model="claude-3-5-sonnet-20241022",
        error_label="Claude API error",
    ),
    ProviderIdentity.OPENAI_COMPATIBLE: ProviderInfo(
        identity=ProviderIdentity.OPENAI_COMPATIBLE,
        name="OpenAI Compatible",
        default_model="gpt-3.5-turbo",
        error_label="API error",
        default_base_url="https://api.openai.com/v1",
    ),
}


def get_provider(provider: ProviderIdentity | str) -> ProviderInfo:
    """
    Look up a provider by identity or id.

    Raises:
        UnsupportedProviderError: If the provider is not in the catalog
    """
    return PROVIDERS[ProviderIdentity.parse(provider)]


def get_default_model(provider: ProviderIdentity | str) -> str:
    """Return the default model for a provider."""
    return get_provider(provider).default_model


def list_providers() -> list[ProviderInfo]:
    """Return all providers in catalog order."""
    return list(PROVIDERS.values())


def get_all_provider_ids() -> list[str]:
    """Return the ids of all supported providers."""
    return [identity.value for identity in PROVIDERS]
