"""AI Code Review - review pasted code with a configurable LLM provider."""

__version__ = "0.1.0"
__author__ = "AI Code Review Contributors"

from ai_code_review.core.ai_service import AIService, review_code
from ai_code_review.core.models import AIConfig, Finding, ReviewOutcome, Severity
from ai_code_review.core.providers import ProviderIdentity

__all__ = [
    "__version__",
    "AIConfig",
    "AIService",
    "Finding",
    "ProviderIdentity",
    "ReviewOutcome",
    "Severity",
    "review_code",
]
