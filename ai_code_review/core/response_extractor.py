"""Extract generated text from each provider's response envelope."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from ai_code_review.core.providers import ProviderIdentity

# Path to the generated text inside each provider's JSON body.
TEXT_PATHS: dict[ProviderIdentity, Sequence[str | int]] = {
    ProviderIdentity.OPENAI: ("choices", 0, "message", "content"),
    ProviderIdentity.OPENAI_COMPATIBLE: ("choices", 0, "message", "content"),
    ProviderIdentity.GEMINI: ("candidates", 0, "content", "parts", 0, "text"),
    ProviderIdentity.CLAUDE: ("content", 0, "text"),
}


def _walk(data: Any, path: Sequence[str | int]) -> Any:
    node = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(node, list) or len(node) <= key:
                return None
        elif not isinstance(node, dict):
            return None
        node = node[key] if isinstance(key, int) else node.get(key)
    return node


def extract_text(provider: ProviderIdentity | str, raw_body: Any) -> str:
    """
    Pull the plain-text model output out of a provider response body.

    Missing or malformed paths yield an empty string; this never raises
    for a supported provider.

    Raises:
        UnsupportedProviderError: If the provider is not supported
    """
    identity = ProviderIdentity.parse(provider)
    text = _walk(raw_body, TEXT_PATHS[identity])
    return text if isinstance(text, str) else ""
