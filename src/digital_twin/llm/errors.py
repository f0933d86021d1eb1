"""Errors raised while talking to a model endpoint.

Everything here derives from LLMClientError, itself a DigitalTwinError.
ask_llm_object() lets these propagate: only unusable answers are retried
there, never transport or API failures.
"""

from __future__ import annotations

from typing import Any

from digital_twin.exceptions import DigitalTwinError


class LLMClientError(DigitalTwinError):
    """Base for all LLM client errors."""


class LLMConfigError(LLMClientError):
    """The client cannot be built (e.g. no API key in arguments or environment)."""


class LLMRateLimitError(LLMClientError):
    """HTTP 429 from the endpoint.

    Attributes:
        retry_after: Seconds from the Retry-After header, or None when the
            header is missing or not a number.
    """

    def __init__(self, message: str = "Rate limited", retry_after: float | None = None) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message)


class LLMAuthError(LLMClientError):
    """The endpoint rejected the credentials (401/403). Never retried."""

    def __init__(self, message: str = "Authentication failed", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class LLMResponseError(LLMClientError):
    """The endpoint answered, but not with a chat completion.

    Attributes:
        response: The decoded body that could not be used, when available.
    """

    def __init__(self, message: str = "Unexpected response", response: Any = None) -> None:
        self.response = response
        super().__init__(message)
