"""Per-provider HTTP request construction."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from ai_code_review.core.models import AIConfig, HttpRequestSpec
from ai_code_review.core.providers import ProviderIdentity, get_provider

OPENAI_URL = "https://api.openai.com/v1/chat/completions"
GEMINI_URL_TEMPLATE = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent?key={api_key}"
)
CLAUDE_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"

TEMPERATURE = 0.1
MAX_OUTPUT_TOKENS = 4000


def _dumps(payload: dict[str, Any]) -> str:
    # Compact separators keep the body identical to a browser's JSON.stringify.
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _chat_completions_payload(model: str, prompt: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "temperature": TEMPERATURE,
        "max_tokens": MAX_OUTPUT_TOKENS,
    }


def _bearer_headers(api_key: str) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def build_openai_request(config: AIConfig, prompt: str) -> HttpRequestSpec:
    return HttpRequestSpec(
        method="POST",
        url=OPENAI_URL,
        headers=_bearer_headers(config.api_key),
        body=_dumps(_chat_completions_payload(config.resolved_model, prompt)),
    )


def build_gemini_request(config: AIConfig, prompt: str) -> HttpRequestSpec:
    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "temperature": TEMPERATURE,
            "maxOutputTokens": MAX_OUTPUT_TOKENS,
        },
    }
    return HttpRequestSpec(
        method="POST",
        url=GEMINI_URL_TEMPLATE.format(model=config.resolved_model, api_key=config.api_key),
        headers={"Content-Type": "application/json"},
        body=_dumps(payload),
    )


def build_claude_request(config: AIConfig, prompt: str) -> HttpRequestSpec:
    payload = {
        "model": config.resolved_model,
        "max_tokens": MAX_OUTPUT_TOKENS,
        "temperature": TEMPERATURE,
        "messages": [{"role": "user", "content": prompt}],
    }
    headers = _bearer_headers(config.api_key)
    headers["x-api-key"] = config.api_key
    headers["anthropic-version"] = ANTHROPIC_VERSION
    return HttpRequestSpec(
        method="POST",
        url=CLAUDE_URL,
        headers=headers,
        body=_dumps(payload),
    )


def build_openai_compatible_request(config: AIConfig, prompt: str) -> HttpRequestSpec:
    base_url = config.base_url or get_provider(ProviderIdentity.OPENAI_COMPATIBLE).default_base_url
    return HttpRequestSpec(
        method="POST",
        url=f"{base_url.rstrip('/')}/chat/completions",
        headers=_bearer_headers(config.api_key),
        body=_dumps(_chat_completions_payload(config.resolved_model, prompt)),
    )


REQUEST_BUILDERS: dict[ProviderIdentity, Callable[[AIConfig, str], HttpRequestSpec]] = {
    ProviderIdentity.OPENAI: build_openai_request,
    ProviderIdentity.GEMINI: build_gemini_request,
    ProviderIdentity.CLAUDE: build_claude_request,
    ProviderIdentity.OPENAI_COMPATIBLE: build_openai_compatible_request,
}


def build_request(config: AIConfig, prompt: str) -> HttpRequestSpec:
    """
    Build the HTTP request for the configured provider.

    Args:
        config: Configuration record for this review
        prompt: Natural-language prompt to send

    Returns:
        HttpRequestSpec with method, URL, headers and serialized JSON body

    Raises:
        UnsupportedProviderError: If the provider is not supported
    """
    identity = ProviderIdentity.parse(config.provider)
    return REQUEST_BUILDERS[identity](config, prompt)
