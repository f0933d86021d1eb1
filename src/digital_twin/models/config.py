"""Configuration models for the modeler.

ModelerConfig holds the model-call settings and the retry budget used by
ask_llm_object() and CharacterModeler.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from digital_twin.reasoning import DEFAULT_REASONING_TAG


class ModelerConfig(BaseModel):
    """Settings for asking the model for a structured answer."""

    model_config = {"frozen": True}

    model: Optional[str] = None  # None = client default
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    max_retries: int = Field(default=3, ge=1)
    required_fields: tuple[str, ...] = ("updates",)
    reasoning_tag: str = DEFAULT_REASONING_TAG
    steer_on_retry: bool = False

    def chat_kwargs(self) -> dict:
        """Keyword arguments for LLMClient.chat(); None keeps the client default."""
        return {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
