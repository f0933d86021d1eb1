"""Prompt templates."""

from digital_twin.prompts.modeler import (
    CLOSING_RULES,
    MODELER_TASK,
    OUTPUT_RULES,
    RESPONSE_FORMAT,
    build_modeler_prompt,
)

__all__ = [
    "CLOSING_RULES",
    "MODELER_TASK",
    "OUTPUT_RULES",
    "RESPONSE_FORMAT",
    "build_modeler_prompt",
]
