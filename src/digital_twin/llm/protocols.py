"""LLM client protocol.

Any object with chat() and close() methods matching this signature can be
handed to ask_llm_object() and CharacterModeler. The built-in OpenAIClient
implements it.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for pluggable LLM clients.

    Responses are expected in the OpenAI chat completion shape
    (``choices[0].message.content``). Clients for other formats can expose
    an ``extract_content(response)`` method, which callers prefer when
    present.
    """

    def chat(
        self,
        messages: list[dict[str, str]],
        *,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        **kwargs: Any,
    ) -> dict:
        """Send messages, return response dict."""
        ...

    def close(self) -> None:
        """Release underlying resources."""
        ...
