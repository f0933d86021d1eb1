"""Proposed character updates returned by the modeler.

The model answers with::

    <response>
      <updates>
        <update><field>bio</field><new>...</new><reason>...</reason></update>
      </updates>
    </response>

which parses into ``{"updates": {"update": {...}}}`` for one update and
``{"updates": {"update": [{...}, {...}]}}`` for several. extract_updates()
accepts those shapes as well as a bare descriptor or list under
``updates``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError, field_validator

from digital_twin.exceptions import UpdateFormatError

logger = logging.getLogger(__name__)


class ProposedUpdate(BaseModel):
    """One proposed change to a character record.

    ``confidence`` and ``weight`` are on a 0-100 scale; values the model
    writes in another form (``"high"``) are dropped to None.
    """

    model_config = {"extra": "ignore"}

    field: str
    new: Any = None
    reason: Optional[str] = None
    confidence: Optional[float] = None
    weight: Optional[float] = None
    old: Any = None
    difference: Any = None

    @field_validator("field", "reason", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Leaf coercion turns "42" into 42 and "true" into True.
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("confidence", "weight", mode="before")
    @classmethod
    def _score(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return value
        if isinstance(value, str):
            try:
                return float(value.strip().rstrip("%"))
            except ValueError:
                return None
        return None


def _as_list(node: Any) -> list[Any]:
    if node is None or node == "" or node == {}:
        return []
    if isinstance(node, dict) and set(node) == {"update"}:
        node = node["update"]
    if isinstance(node, list):
        return node
    return [node]


def extract_updates(response: Any, strict: bool = False) -> list[ProposedUpdate]:
    """Read the proposed updates out of a parsed model response.

    Args:
        response: The dict returned by ask_llm_object() / parse_xml().
        strict: Raise on a malformed entry instead of skipping it.

    Returns:
        The updates in document order. Empty when the model proposed none.

    Raises:
        UpdateFormatError: In strict mode, for an entry that is not a
            valid update descriptor.
    """
    if not isinstance(response, dict):
        return []
    updates: list[ProposedUpdate] = []
    for index, item in enumerate(_as_list(response.get("updates"))):
        if not isinstance(item, dict):
            reason = f"expected a mapping, got {type(item).__name__}"
        else:
            try:
                updates.append(ProposedUpdate.model_validate(item))
                continue
            except ValidationError as exc:
                reason = str(exc)
        if strict:
            raise UpdateFormatError(index, reason)
        logger.warning("Skipping update %d: %s", index, reason)
    return updates
