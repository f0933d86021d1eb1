"""Prompts for character modeling.

The modeler shows the model the character format, the current character
and the recent conversation, and asks for proposed updates as XML.
"""

from __future__ import annotations

import json
from typing import Any

from digital_twin.schema import schema_to_prompt

# ---------------------------------------------------------------------------
# Answer format -- parsed with parse_xml(); "updates" is the required key
# ---------------------------------------------------------------------------

RESPONSE_FORMAT: str = """\
Respond using XML format like this:
<response>
  <updates>
    <!-- Ok to return none -->
    <update>
      <field>address or name of fields you want to change</field>
      <reason>Your thought here</reason>
      <confidence>0-100 of how confidence you are about this change</confidence>
      <weight>0-100 how important this change is to capture this users personality</weight>
      <new>new value</new>
      <old>old value</old>
    </update>
    <!-- Add more updates as needed -->
  </updates>
</response>"""

MODELER_TASK: str = (
    "Review existing character file for user and recent conversation "
    "and see if we need to make any updates"
)

OUTPUT_RULES: str = (
    "Do NOT include any thinking, reasoning, or <think> sections in your response.\n"
    "Go directly to the XML response format without any preamble or explanation."
)

CLOSING_RULES: str = (
    "IMPORTANT: Your response must ONLY contain the <response></response> XML block above. "
    "Do not include any text, thinking, or reasoning before or after this XML block. "
    "Start your response immediately with <response> and end with </response>."
)


def build_modeler_prompt(
    schema: Any,
    character: dict[str, Any] | None = None,
    conversation: str = "",
) -> str:
    """Build the user prompt asking for character updates.

    Args:
        schema: The character schema (anything schema_to_prompt() accepts).
        character: The current character record. Rendered as JSON.
        conversation: Recent conversation text. The section is left out
            when empty.

    Returns:
        The formatted prompt string.
    """
    character_text = json.dumps(character or {}, indent=2, ensure_ascii=False, default=str)
    sections = [
        f"<task>{MODELER_TASK}</task>",
        f"<character_structure>\n{schema_to_prompt(schema)}\n</character_structure>",
        f"<character>\n{character_text}\n</character>",
    ]
    if conversation.strip():
        sections.append(f"<conversation>\n{conversation.strip()}\n</conversation>")
    sections.append(
        f"<output>\n{OUTPUT_RULES}\n\n{RESPONSE_FORMAT}\n\n{CLOSING_RULES}\n</output>"
    )
    return "\n\n".join(sections)
