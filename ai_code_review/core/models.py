"""Data models shared by the review pipeline."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ai_code_review.core.errors import ConfigurationError, ReviewError
from ai_code_review.core.providers import ProviderIdentity, get_default_model, get_provider


class Severity(str, Enum):
    """Severity of a single finding."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"

    @classmethod
    def from_value(cls, value: Any) -> Severity:
        """Map a loosely typed value to a severity, defaulting to INFO."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.INFO


@dataclass(frozen=True)
class AIConfig:
    """Provider, credential and model selection for one review."""

    provider: str
    api_key: str
    base_url: str | None = None
    model: str | None = None

    def __post_init__(self) -> None:
        # Store the plain id so the record serializes and formats the same either way.
        if isinstance(self.provider, ProviderIdentity):
            object.__setattr__(self, "provider", self.provider.value)

    @property
    def resolved_model(self) -> str:
        """The configured model, or the provider default when empty."""
        return self.model or get_default_model(self.provider)

    @property
    def masked_api_key(self) -> str:
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:4]}...{self.api_key[-4:]}"

    def validate(self) -> None:
        """
        Check the record is complete enough to dispatch.

        Raises:
            ConfigurationError: If the API key is missing, or the base URL is
                missing for an OpenAI-compatible provider
            UnsupportedProviderError: If the provider is not supported
        """
        info = get_provider(self.provider)
        if info.requires_api_key and not (self.api_key and self.api_key.strip()):
            raise ConfigurationError("API key required: please enter your API key.")
        if self.provider == ProviderIdentity.OPENAI_COMPATIBLE.value and not (
            self.base_url and self.base_url.strip()
        ):
            raise ConfigurationError(
                "Base URL required: please enter the base URL for your "
                "OpenAI-compatible API."
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON shape."""
        return {
            "provider": self.provider,
            "apiKey": self.api_key,
            "baseUrl": self.base_url or "",
            "model": self.model or "",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AIConfig:
        """Build a record from the persisted JSON shape."""
        provider = data.get("provider") or ProviderIdentity.OPENAI.value
        if isinstance(provider, ProviderIdentity):
            provider = provider.value
        return cls(
            provider=str(provider),
            api_key=str(data.get("apiKey") or ""),
            base_url=data.get("baseUrl") or None,
            model=data.get("model") or None,
        )


@dataclass
class Finding:
    """One structured unit of review feedback."""

    id: str
    severity: Severity
    category: str
    title: str
    description: str = ""
    line: int | None = None
    suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire shape the model is asked to produce."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.severity.value,
            "category": self.category,
            "title": self.title,
            "description": self.description,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        return data


@dataclass(frozen=True)
class HttpRequestSpec:
    """A fully built provider request."""

    method: str
    url: str
    headers: dict[str, str]
    body: str

    def json(self) -> Any:
        """Decode the body, mostly for inspection and tests."""
        return json.loads(self.body)


@dataclass
class ReviewOutcome:
    """Result of one review: findings or a single categorized failure."""

    findings: list[Finding] | None = None
    error: ReviewError | None = None
    provider: str | None = None
    model: str | None = None
    elapsed_ms: int = 0

    def __post_init__(self) -> None:
        if (self.findings is None) == (self.error is None):
            raise ValueError("ReviewOutcome needs exactly one of findings or error")

    @classmethod
    def success(cls, findings: list[Finding], **kwargs: Any) -> ReviewOutcome:
        return cls(findings=findings, **kwargs)

    @classmethod
    def failure(cls, error: ReviewError, **kwargs: Any) -> ReviewOutcome:
        return cls(error=error, **kwargs)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> str | None:
        """Failure category, or None for a successful review."""
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> str | None:
        return self.error.message if self.error is not None else None

    def count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings or [] if f.severity == severity)

    def counts(self) -> dict[Severity, int]:
        """Count findings by severity (all severities present, zero-filled)."""
        tally = Counter(f.severity for f in self.findings or [])
        return {severity: tally[severity] for severity in Severity}
