"""Provider normalization layer: request building, extraction and parsing."""

from ai_code_review.core.ai_service import AIService, review_code
from ai_code_review.core.errors import (
    ConfigurationError,
    ReviewError,
    TransportError,
    UnsupportedProviderError,
)
from ai_code_review.core.models import (
    AIConfig,
    Finding,
    HttpRequestSpec,
    ReviewOutcome,
    Severity,
)
from ai_code_review.core.prompt_builder import CodeContext, PromptBuilder
from ai_code_review.core.providers import (
    ProviderIdentity,
    ProviderInfo,
    get_default_model,
    get_provider,
    list_providers,
)
from ai_code_review.core.request_builder import build_request
from ai_code_review.core.response_extractor import extract_text
from ai_code_review.core.result_parser import parse_findings

__all__ = [
    "AIConfig",
    "AIService",
    "CodeContext",
    "ConfigurationError",
    "Finding",
    "HttpRequestSpec",
    "PromptBuilder",
    "ProviderIdentity",
    "ProviderInfo",
    "ReviewError",
    "ReviewOutcome",
    "Severity",
    "TransportError",
    "UnsupportedProviderError",
    "build_request",
    "extract_text",
    "get_default_model",
    "get_provider",
    "list_providers",
    "parse_findings",
    "review_code",
]
