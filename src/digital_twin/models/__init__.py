"""Data models: modeler configuration, the character record and proposed updates."""

from digital_twin.models.character import (
    Character,
    KnowledgeDirectory,
    KnowledgePath,
    MessageContent,
    MessageExample,
    Style,
)
from digital_twin.models.config import ModelerConfig
from digital_twin.models.update import ProposedUpdate, extract_updates

__all__ = [
    "Character",
    "KnowledgeDirectory",
    "KnowledgePath",
    "MessageContent",
    "MessageExample",
    "ModelerConfig",
    "ProposedUpdate",
    "Style",
    "extract_updates",
]
