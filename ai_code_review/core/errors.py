"""Error taxonomy for review requests."""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for failures that end a review without findings."""

    kind: str = "review"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ReviewError):
    """The configuration record is missing a required value."""

    kind = "configuration"


class UnsupportedProviderError(ReviewError):
    """The configured provider is not one of the supported backends."""

    kind = "unsupported_provider"

    def __init__(self, provider: object) -> None:
        super().__init__(f"Unsupported provider: {provider}")
        self.provider = provider


class TransportError(ReviewError):
    """The provider could not be reached or rejected the request."""

    kind = "transport"

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status_code: int | None = None,
        status_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.status_text = status_text
