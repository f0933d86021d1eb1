"""LLM client infrastructure.

Provides an OpenAI-compatible HTTP client, the pluggable client protocol,
the LLM error hierarchy and ask_llm_object() for structured XML answers.
"""

from digital_twin.llm.ask import ask_llm_object, missing_fields, response_text
from digital_twin.llm.client import OpenAIClient
from digital_twin.llm.errors import (
    LLMAuthError,
    LLMClientError,
    LLMConfigError,
    LLMRateLimitError,
    LLMResponseError,
)
from digital_twin.llm.protocols import LLMClient

__all__ = [
    "OpenAIClient",
    "LLMClient",
    "LLMClientError",
    "LLMConfigError",
    "LLMRateLimitError",
    "LLMAuthError",
    "LLMResponseError",
    "ask_llm_object",
    "missing_fields",
    "response_text",
]
