"""OpenAI-compatible chat client built on httpx, with tenacity retry.

Transient failures (429, 5xx, connection errors) are retried with
exponential backoff; authentication failures are raised immediately.
Configuration comes from constructor arguments or environment variables.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
import tenacity

from digital_twin.llm.errors import (
    LLMAuthError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from digital_twin.reasoning import DEFAULT_REASONING_TAG, extract_reasoning

logger = logging.getLogger(__name__)

API_KEY_ENV = "DIGITAL_TWIN_OPENAI_API_KEY"
BASE_URL_ENV = "DIGITAL_TWIN_OPENAI_BASE_URL"
DEFAULT_BASE_URL = "https://api.openai.com/v1"

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_AUTH_ERROR_STATUS_CODES = {401, 403}


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, LLMAuthError):
        return False
    if isinstance(exc, LLMRateLimitError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in _RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


def _retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


class OpenAIClient:
    """Sync client for OpenAI-compatible ``/chat/completions`` endpoints.

    Implements the LLMClient protocol.

    Usage::

        with OpenAIClient() as client:
            response = client.chat([{"role": "user", "content": "Hello"}])
            text = OpenAIClient.extract_content(response)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str = "gpt-4o-mini",
        timeout: float = 120.0,
        max_retries: int = 3,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key. Falls back to DIGITAL_TWIN_OPENAI_API_KEY.
            base_url: API base URL. Falls back to DIGITAL_TWIN_OPENAI_BASE_URL,
                then to the OpenAI endpoint.
            default_model: Model used when chat() is not given one.
            timeout: Request timeout in seconds.
            max_retries: Attempts per request for retryable errors.

        Raises:
            LLMConfigError: If no API key is provided or found in environment.
        """
        self._api_key = api_key or os.environ.get(API_KEY_ENV, "")
        if not self._api_key:
            raise LLMConfigError(
                f"No API key provided. Pass api_key= or set {API_KEY_ENV}."
            )
        self._base_url = (
            base_url or os.environ.get(BASE_URL_ENV, DEFAULT_BASE_URL)
        ).rstrip("/")
        self._default_model = default_model
        self._max_retries = max_retries
        self._client = httpx.Client(
            timeout=timeout,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self._api_key}",
            },
        )

    @property
    def default_model(self) -> str:
        return self._default_model

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send a chat completion request, retrying transient failures.

        Args:
            messages: Message dicts with 'role' and 'content'.
            model: Model to use. Falls back to default_model.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            **kwargs: Extra payload fields forwarded to the API.

        Returns:
            The decoded response dict.

        Raises:
            LLMAuthError: On 401/403 (no retry).
            LLMRateLimitError: On 429 after all attempts.
            LLMResponseError: When the response has no 'choices'.
            httpx.HTTPStatusError: On other HTTP errors.
        """
        payload: dict[str, Any] = {
            "model": model or self._default_model,
            "messages": messages,
        }
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        payload.update(kwargs)

        retryer = tenacity.Retrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=(
                tenacity.wait_exponential(multiplier=1, min=1, max=30)
                + tenacity.wait_random(0, 2)
            ),
            stop=tenacity.stop_after_attempt(self._max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return retryer(self._post, payload)

    def _post(self, payload: dict[str, Any]) -> dict:
        """Execute a single request (no retry)."""
        response = self._client.post(f"{self._base_url}/chat/completions", json=payload)

        if response.status_code in _AUTH_ERROR_STATUS_CODES:
            raise LLMAuthError(
                f"Authentication failed: HTTP {response.status_code} - {response.text}",
                status_code=response.status_code,
            )
        if response.status_code == 429:
            raise LLMRateLimitError(
                f"Rate limited: HTTP 429 - {response.text}",
                retry_after=_retry_after(response),
            )
        response.raise_for_status()

        data = response.json()
        if "choices" not in data:
            raise LLMResponseError(
                f"Unexpected response format: missing 'choices' key. Response: {data}",
                response=data,
            )
        return data

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> OpenAIClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @staticmethod
    def extract_content(response: dict) -> str:
        """Return the first choice's message content ("" if absent).

        Raises:
            LLMResponseError: If the response has no first choice.
        """
        try:
            return response["choices"][0]["message"].get("content") or ""
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise LLMResponseError(
                f"Cannot extract content from response: {exc}. Response: {response}",
                response=response,
            ) from exc

    @staticmethod
    def extract_reasoning(response: dict, tag: str = DEFAULT_REASONING_TAG) -> str | None:
        """Return the model's reasoning trace, if the response carries one.

        Looks at the provider fields ``reasoning`` and ``reasoning_content``
        first, then at ``<think>``-style segments inside the content.
        """
        try:
            message = response["choices"][0]["message"]
        except (KeyError, IndexError, TypeError):
            return None
        for key in ("reasoning", "reasoning_content"):
            if message.get(key):
                return message[key]
        return extract_reasoning(message.get("content") or "", tag)
