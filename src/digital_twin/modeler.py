"""Character modeling: ask the model which character fields to update.

CharacterModeler ties the pieces together for one evaluation pass:
schema description -> prompt -> model call with retry -> proposed updates.
Loading and saving the character is left to the host runtime.
"""

from __future__ import annotations

import logging
from typing import Any

from digital_twin.llm.ask import ask_llm_object
from digital_twin.llm.protocols import LLMClient
from digital_twin.models.character import Character
from digital_twin.models.config import ModelerConfig
from digital_twin.models.update import ProposedUpdate, extract_updates
from digital_twin.prompts.modeler import build_modeler_prompt

logger = logging.getLogger(__name__)


class CharacterModeler:
    """Proposes updates to a character record from a conversation.

    Usage::

        with OpenAIClient() as client:
            modeler = CharacterModeler(client)
            updates = modeler.propose_updates(character, conversation_text)
    """

    def __init__(
        self,
        client: LLMClient | Any,
        config: ModelerConfig | None = None,
        *,
        schema: Any = Character,
        system_prompt: str | None = None,
    ) -> None:
        """Initialize the modeler.

        Args:
            client: An LLM client conforming to the LLMClient protocol.
            config: Model settings and retry budget.
            schema: Schema of the character record (pydantic model,
                SchemaNode, JSON Schema dict, ...).
            system_prompt: Optional system prompt sent with every request.
        """
        self._client = client
        self._config = config or ModelerConfig()
        self._schema = schema
        self._system_prompt = system_prompt

    @property
    def config(self) -> ModelerConfig:
        return self._config

    def build_prompt(self, character: dict[str, Any] | None, conversation: str = "") -> str:
        return build_modeler_prompt(self._schema, character, conversation)

    def propose_updates(
        self,
        character: dict[str, Any] | None,
        conversation: str = "",
    ) -> list[ProposedUpdate]:
        """Ask the model for updates to *character*.

        Returns:
            The proposed updates; empty when the model proposed none or no
            usable answer came back within the retry budget.
        """
        prompt = self.build_prompt(character, conversation)
        response = ask_llm_object(
            self._client,
            prompt,
            system=self._system_prompt,
            config=self._config,
        )
        if response is None:
            logger.warning("No usable modeler response, no updates proposed")
            return []
        updates = extract_updates(response)
        logger.info("Modeler proposed %d update(s)", len(updates))
        return updates
