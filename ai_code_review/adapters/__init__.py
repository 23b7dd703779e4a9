"""Adapters for running reviews outside the interactive CLI."""

from ai_code_review.adapters.ci_runner import CIReviewResult, CIRunner

__all__ = ["CIRunner", "CIReviewResult"]
