"""Ask a model for an XML answer and parse it into a dict.

ask_llm_object() sends the prompt, strips the reasoning trace, parses the
XML answer and checks that the required top-level keys are present. Bad
answers are retried up to the configured budget.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from digital_twin.exceptions import RetryExhaustedError
from digital_twin.llm.errors import LLMResponseError
from digital_twin.llm.protocols import LLMClient
from digital_twin.models.config import ModelerConfig
from digital_twin.parsing import ParseOptions, parse_xml
from digital_twin.reasoning import strip_reasoning
from digital_twin.retry import retry_with_steering

logger = logging.getLogger(__name__)

STEERING_TEMPLATE = (
    "Your previous response could not be used: {diagnosis}. "
    "Respond again with only the XML block, including every required tag."
)


def missing_fields(result: Any, required_fields: Iterable[str]) -> list[str]:
    """Return the required keys absent from *result* (None values count as present)."""
    if not isinstance(result, dict):
        return list(required_fields)
    return [f for f in required_fields if f not in result]


def response_text(client: Any, response: dict) -> str:
    """Extract the assistant text from a chat response.

    Uses the client's own ``extract_content`` when it has one, else the
    OpenAI response shape.
    """
    extract = getattr(client, "extract_content", None)
    if callable(extract):
        return extract(response)
    try:
        return response["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError) as exc:
        raise LLMResponseError(
            f"Cannot extract content from LLM response: {exc}. Response: {response}",
            response=response,
        ) from exc


def ask_llm_object(
    client: LLMClient | Any,
    prompt: str,
    *,
    required_fields: Iterable[str] | None = None,
    system: str | None = None,
    config: ModelerConfig | None = None,
    parse_options: ParseOptions | None = None,
) -> dict[str, Any] | None:
    """Ask *client* for an XML answer and return it parsed.

    Args:
        client: An LLM client conforming to the LLMClient protocol.
        prompt: The user prompt.
        required_fields: Top-level keys the parsed answer must contain.
            Defaults to ``config.required_fields``.
        system: Optional system prompt.
        config: Model settings and retry budget. Defaults to ModelerConfig().
        parse_options: Options for parse_xml().

    Returns:
        The parsed answer, or None when every attempt came back without
        the required keys.

    Raises:
        LLMClientError: Transport and API errors from the client are not
            retried here.
    """
    cfg = config or ModelerConfig()
    required = tuple(required_fields if required_fields is not None else cfg.required_fields)

    messages: list[dict[str, str]] = []
    if system:
        messages.append({"role": "system", "content": system})
    else:
        logger.info("ask_llm_object: omitting system prompt")
    messages.append({"role": "user", "content": prompt})

    last_text: list[str] = []

    def attempt() -> Any:
        response = client.chat(list(messages), **cfg.chat_kwargs())
        text = response_text(client, response)
        logger.debug("Model response: %s", text)
        last_text[:] = [text]
        return parse_xml(strip_reasoning(text, cfg.reasoning_tag), parse_options)

    def validate(result: Any) -> tuple[bool, str | None]:
        if result is None:
            logger.warning("No structured response, retrying")
            return False, "no XML structure was found"
        missing = missing_fields(result, required)
        if missing:
            logger.warning("Missing required fields %s in %r, retrying", missing, result)
            return False, f"missing required field(s): {', '.join(missing)}"
        return True, None

    def steer(diagnosis: str) -> None:
        messages.append({"role": "assistant", "content": last_text[0] if last_text else ""})
        messages.append({"role": "user", "content": STEERING_TEMPLATE.format(diagnosis=diagnosis)})

    try:
        outcome = retry_with_steering(
            attempt=attempt,
            validate=validate,
            steer=steer if cfg.steer_on_retry else None,
            max_retries=cfg.max_retries,
        )
    except RetryExhaustedError as exc:
        logger.warning(
            "Giving up after %d attempts: %s", exc.attempts, exc.last_diagnosis
        )
        return None
    return outcome.value
