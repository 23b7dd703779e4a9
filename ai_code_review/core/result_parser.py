"""Tolerant decoding of model output into findings."""

from __future__ import annotations

import json
import re
from typing import Any

from ai_code_review.core.models import Finding, Severity
from ai_code_review.utils.logger import get_logger

logger = get_logger(__name__)

# Greedy: first "[" through last "]".
JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")

DEFAULT_CATEGORY = "General"
DEFAULT_TITLE = "Analysis Result"

PARSE_ERROR_ID = "parse-error"


def parse_error_finding() -> Finding:
    """The single finding returned when the model output cannot be decoded."""
    return Finding(
        id=PARSE_ERROR_ID,
        severity=Severity.ERROR,
        category="AI Response",
        title="Failed to parse AI response",
        description="The AI response could not be parsed. The response format may be invalid.",
        suggestion="Try the analysis again or check your API configuration.",
    )


def extract_json_candidate(text: str) -> str:
    """Return the bracketed span of text, or the whole text when there is none."""
    match = JSON_ARRAY_PATTERN.search(text)
    return match.group(0) if match else text


def _text_field(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def _line_field(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float) and value.is_integer() and value > 0:
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        line = int(value.strip())
        return line if line > 0 else None
    return None


def to_finding(raw: Any, index: int) -> Finding:
    """Map one decoded element to a Finding, defaulting each field on its own."""
    if not isinstance(raw, dict):
        raw = {}

    return Finding(
        id=_text_field(raw, "id") or f"result-{index}",
        severity=Severity.from_value(raw.get("type") or raw.get("severity")),
        category=_text_field(raw, "category") or DEFAULT_CATEGORY,
        title=_text_field(raw, "title") or DEFAULT_TITLE,
        description=_text_field(raw, "description") or "",
        line=_line_field(raw.get("line")),
        suggestion=_text_field(raw, "suggestion"),
    )


def _ensure_unique_ids(findings: list[Finding]) -> None:
    seen: set[str] = set()
    for index, finding in enumerate(findings):
        if finding.id in seen:
            candidate = f"result-{index}"
            suffix = 1
            while candidate in seen:
                candidate = f"result-{index}-{suffix}"
                suffix += 1
            logger.debug(f"Duplicate finding id {finding.id!r} renamed to {candidate!r}")
            finding.id = candidate
        seen.add(finding.id)


def parse_findings(text: str) -> list[Finding]:
    """
    Decode model output into an ordered list of findings.

    Never raises: output that is not a JSON array (after locating the
    bracketed span inside any surrounding prose) yields a single
    parse-error finding.

    Args:
        text: Plain-text model output

    Returns:
        Findings in the order the model returned them
    """
    candidate = extract_json_candidate(text or "")

    try:
        decoded = json.loads(candidate)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.warning(f"Failed to parse AI response: {e}")
        return [parse_error_finding()]

    if not isinstance(decoded, list):
        logger.warning(f"AI response is not an array (got {type(decoded).__name__})")
        return [parse_error_finding()]

    findings = [to_finding(raw, index) for index, raw in enumerate(decoded)]
    _ensure_unique_ids(findings)
    return findings
