"""
AI Gateway Client - Retrying client for the external AI endpoint.

Builds the request body for the configured endpoint (chat-completion or
raw), posts it with a per-attempt timeout and linear backoff between
attempts, and normalizes the reply into GeneratedCode or TestIntent.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Union
from urllib.parse import urlparse

import httpx

from web_test_recorder.config.settings import AISettings
from web_test_recorder.exceptions import ConfigurationError, InvalidResponseError, UpstreamError
from web_test_recorder.llm.models import AIRequest, AIRequestKind, GeneratedCode, TestIntent
from web_test_recorder.llm.normalize import normalize_code, normalize_intent
from web_test_recorder.llm.prompts import build_chat_payload, build_raw_payload
from web_test_recorder.utils.retry import RetryConfig, retry_async

logger = logging.getLogger(__name__)

AIResult = Union[GeneratedCode, TestIntent]


def is_openai_compatible(endpoint: str) -> bool:
    """Whether the endpoint URL looks like an OpenAI-style chat-completion API."""
    parsed = urlparse(endpoint)
    host = (parsed.hostname or "").lower()
    path = parsed.path.lower()
    return "openai" in host or "/chat/completions" in path or "/v1/" in path


def validate_endpoint(endpoint: Optional[str]) -> str:
    """
    Check the configured endpoint before any network attempt.

    Raises:
        ConfigurationError: Endpoint missing or not an http(s) URL with a host
    """
    if not endpoint or not endpoint.strip():
        raise ConfigurationError(
            "AI endpoint is not configured. Set ai.endpoint or WEB_TEST_RECORDER__AI__ENDPOINT.",
            {"key": "ai.endpoint"},
        )
    endpoint = endpoint.strip()
    parsed = urlparse(endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"AI endpoint is not a valid URL: {endpoint}",
            {"key": "ai.endpoint", "value": endpoint},
        )
    return endpoint


class AIGatewayClient:
    """
    Client for the AI endpoint.

    Example:
        >>> client = AIGatewayClient(AISettings(endpoint="https://api.openai.com/v1/chat/completions"))
        >>> intent = await client.call(AIRequest.analyze(code=recorded_code))
        >>> intent.steps
        ['Open the login page', ...]
    """

    def __init__(
        self,
        settings: Optional[AISettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            settings: Endpoint, credentials and retry defaults
            transport: httpx transport override (tests use httpx.MockTransport)
            sleep: Coroutine used for backoff waits
        """
        self._settings = settings or AISettings()
        self._transport = transport
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def settings(self) -> AISettings:
        return self._settings

    @property
    def is_configured(self) -> bool:
        try:
            validate_endpoint(self._settings.endpoint)
        except ConfigurationError:
            return False
        return True

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self._settings.api_key is not None:
                headers["Authorization"] = f"Bearer {self._settings.api_key.get_secret_value()}"
            self._client = httpx.AsyncClient(headers=headers, transport=self._transport)
        return self._client

    async def call(
        self,
        request: AIRequest,
        timeout_ms: Optional[int] = None,
        max_retries: Optional[int] = None,
    ) -> AIResult:
        """
        Send a request and return its normalized result.

        Args:
            request: What to ask
            timeout_ms: Per-attempt timeout (default from settings)
            max_retries: Total attempts (default from settings)

        Returns:
            GeneratedCode for generate requests, TestIntent for analyze requests

        Raises:
            ConfigurationError: Endpoint missing or malformed
            UpstreamError: Every attempt failed
        """
        endpoint = validate_endpoint(self._settings.endpoint)
        timeout_ms = timeout_ms if timeout_ms is not None else self._settings.timeout_ms
        attempts = max(1, max_retries if max_retries is not None else self._settings.max_retries)

        if is_openai_compatible(endpoint):
            body = build_chat_payload(request, self._settings.model)
        else:
            body = build_raw_payload(request)

        retry_config = RetryConfig(
            max_attempts=attempts,
            delay_step_ms=1000,
            retry_on=(httpx.HTTPError, asyncio.TimeoutError, InvalidResponseError),
            sleep=self._sleep,
        )

        logger.info(f"AI {request.kind.value} request to {endpoint} (max {attempts} attempts)")
        try:
            raw = await retry_async(self._post, retry_config, endpoint, body, timeout_ms)
        except (httpx.HTTPError, asyncio.TimeoutError, InvalidResponseError) as e:
            message = _describe(e, timeout_ms)
            logger.error(f"AI request failed after {attempts} attempts: {message}")
            raise UpstreamError(
                f"AI request failed after {attempts} attempts: {message}",
                attempts=attempts,
                last_error=message,
            ) from e

        if request.kind == AIRequestKind.GENERATE:
            return GeneratedCode(code=normalize_code(raw))
        return normalize_intent(raw)

    async def _post(self, endpoint: str, body: Dict[str, Any], timeout_ms: int) -> str:
        """One attempt. Returns the raw response text."""
        # httpx timeouts are per phase; bound the whole attempt.
        response = await asyncio.wait_for(
            self._get_client().post(endpoint, json=body, timeout=timeout_ms / 1000),
            timeout_ms / 1000,
        )
        if response.status_code >= 400:
            raise InvalidResponseError(
                f"AI endpoint returned HTTP {response.status_code}",
                raw_response=response.text,
            )
        return response.text

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AIGatewayClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()


def _describe(error: BaseException, timeout_ms: int) -> str:
    if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError)):
        return f"Timed out after {timeout_ms}ms"
    if isinstance(error, InvalidResponseError):
        return error.message
    return str(error) or type(error).__name__
