"""Review orchestration: prompt, dispatch, extract, parse."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx

from ai_code_review.core.errors import ReviewError, TransportError
from ai_code_review.core.models import AIConfig, Finding, HttpRequestSpec, ReviewOutcome
from ai_code_review.core.prompt_builder import CodeContext, PromptBuilder
from ai_code_review.core.providers import get_provider
from ai_code_review.core.request_builder import build_request
from ai_code_review.core.response_extractor import extract_text
from ai_code_review.core.result_parser import parse_findings
from ai_code_review.utils.config import Settings, get_effective_settings
from ai_code_review.utils.logger import get_logger

logger = get_logger(__name__)

LoadingCallback = Callable[[bool], None]


class AIService:
    """Runs one review per call against the configured provider.

    The service holds no per-review state: the configuration record is
    passed to every call and each call opens and closes its own HTTP
    client, so one instance can serve concurrent reviews.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        timeout: float | None = None,
        transport: Any = None,
        prompt_builder: PromptBuilder | None = None,
    ):
        """
        Initialize the service.

        Args:
            settings: Settings instance (uses effective settings if None)
            timeout: HTTP timeout in seconds (defaults to settings.request_timeout)
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests
            prompt_builder: Prompt builder (uses the default template if None)
        """
        if settings is None:
            settings = get_effective_settings()

        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.transport = transport
        self.prompt_builder = prompt_builder or PromptBuilder()

    def prepare_request(self, config: AIConfig, code: CodeContext | str) -> HttpRequestSpec:
        """
        Validate the record and build the provider request for this code.

        Raises:
            ConfigurationError: If the record is incomplete
            UnsupportedProviderError: If the provider is not supported
        """
        config.validate()
        prompt = self.prompt_builder.build_review_prompt(code)
        return build_request(config, prompt)

    def handle_response(self, config: AIConfig, response: httpx.Response) -> list[Finding]:
        """
        Turn a provider response into findings.

        Raises:
            TransportError: If the provider answered with a non-success status
        """
        info = get_provider(config.provider)

        if not response.is_success:
            status_text = response.reason_phrase or str(response.status_code)
            raise TransportError(
                f"{info.error_label}: {status_text}",
                provider=info.id,
                status_code=response.status_code,
                status_text=status_text,
            )

        try:
            body = response.json()
        except ValueError:
            logger.warning(f"{info.name} returned a non-JSON body")
            body = {}

        text = extract_text(info.identity, body)
        findings = parse_findings(text)
        logger.info(f"Review completed with {len(findings)} finding(s)")
        return findings

    def review(
        self,
        config: AIConfig,
        code: CodeContext | str,
        on_loading: LoadingCallback | None = None,
    ) -> ReviewOutcome:
        """
        Perform a synchronous code review.

        Args:
            config: Provider configuration for this review
            code: Code content or a CodeContext
            on_loading: Called with True before dispatch and False when done

        Returns:
            ReviewOutcome with findings, or with the failure that stopped the review
        """
        start = time.monotonic()
        if on_loading:
            on_loading(True)

        try:
            request = self.prepare_request(config, code)
            self._log_dispatch(config)
            response = self._send(request, config)
            outcome = ReviewOutcome.success(self.handle_response(config, response))
        except ReviewError as e:
            outcome = self._failure(e)
        except Exception as e:
            logger.exception("Unexpected error during review")
            outcome = self._failure(ReviewError(f"Failed to analyze code: {e}"))
        finally:
            if on_loading:
                on_loading(False)

        return self._finish(outcome, config, start)

    async def review_async(
        self,
        config: AIConfig,
        code: CodeContext | str,
        on_loading: LoadingCallback | None = None,
    ) -> ReviewOutcome:
        """
        Perform an asynchronous code review.

        Cancelling the awaiting task cancels the in-flight request; the
        cancellation propagates instead of producing an outcome.

        Args:
            config: Provider configuration for this review
            code: Code content or a CodeContext
            on_loading: Called with True before dispatch and False when done

        Returns:
            ReviewOutcome with findings, or with the failure that stopped the review
        """
        start = time.monotonic()
        if on_loading:
            on_loading(True)

        try:
            request = self.prepare_request(config, code)
            self._log_dispatch(config)
            response = await self._send_async(request, config)
            outcome = ReviewOutcome.success(self.handle_response(config, response))
        except ReviewError as e:
            outcome = self._failure(e)
        except Exception as e:
            logger.exception("Unexpected error during async review")
            outcome = self._failure(ReviewError(f"Failed to analyze code: {e}"))
        finally:
            if on_loading:
                on_loading(False)

        return self._finish(outcome, config, start)

    def _send(self, request: HttpRequestSpec, config: AIConfig) -> httpx.Response:
        try:
            with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
                return client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.body.encode("utf-8"),
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise self._network_error(config, e) from e

    async def _send_async(self, request: HttpRequestSpec, config: AIConfig) -> httpx.Response:
        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                return await client.request(
                    request.method,
                    request.url,
                    headers=request.headers,
                    content=request.body.encode("utf-8"),
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise self._network_error(config, e) from e

    @staticmethod
    def _network_error(config: AIConfig, error: Exception) -> TransportError:
        info = get_provider(config.provider)
        detail = str(error) or type(error).__name__
        return TransportError(f"{info.error_label}: {detail}", provider=info.id)

    @staticmethod
    def _log_dispatch(config: AIConfig) -> None:
        # Never log the request itself: Gemini carries the key in its URL.
        logger.info(f"Sending review request to {config.provider} ({config.resolved_model})")

    @staticmethod
    def _failure(error: ReviewError) -> ReviewOutcome:
        logger.error(f"Review failed ({error.kind}): {error.message}")
        return ReviewOutcome.failure(error)

    @staticmethod
    def _finish(outcome: ReviewOutcome, config: AIConfig, start: float) -> ReviewOutcome:
        outcome.provider = config.provider
        try:
            outcome.model = config.resolved_model
        except ReviewError:
            outcome.model = config.model
        outcome.elapsed_ms = int((time.monotonic() - start) * 1000)
        return outcome


def review_code(
    config: AIConfig,
    code: CodeContext | str,
    settings: Settings | None = None,
    **kwargs: Any,
) -> ReviewOutcome:
    """Convenience wrapper: one synchronous review with a fresh service."""
    return AIService(settings=settings, **kwargs).review(config, code)
