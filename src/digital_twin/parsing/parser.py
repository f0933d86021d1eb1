"""Lenient XML-to-dict parsing for language model output.

parse_xml() is the entry point. It picks the ElementTree strategy when a
structural parser is available and falls back to the regex scanner when it
is not, or when the text does not parse. It never raises.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
from typing import Any

from digital_twin.parsing.fallback import parse_with_regex
from digital_twin.parsing.options import Node, ParseOptions
from digital_twin.parsing.tree import parse_with_tree

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=1)
def has_dom_parser() -> bool:
    """Return True if the expat-backed ElementTree parser can be used."""
    try:
        import xml.etree.ElementTree as ET

        ET.XMLParser()
    except ImportError:
        return False
    return True


def parse_xml(
    text: Any,
    options: ParseOptions | None = None,
    **overrides: bool,
) -> Node:
    """Convert XML-like text into nested dicts, lists and primitives.

    Text-only elements become coerced primitives, elements with children
    become dicts keyed by child tag, and repeated sibling tags become lists
    (see ParseOptions). The value of the root element is returned, so
    ``<response><updates>...</updates></response>`` yields
    ``{"updates": ...}``.

    Args:
        text: The text to parse. Anything that is not a non-blank string
            yields None.
        options: Parse options. Defaults to ParseOptions().
        **overrides: Individual ParseOptions fields, applied on top of
            *options* (e.g. ``arrayize=False``).

    Returns:
        The parsed node, or None when no structure was recognised.
    """
    if not isinstance(text, str) or not text.strip():
        return None
    opts = options or ParseOptions()
    if overrides:
        opts = dataclasses.replace(opts, **overrides)

    if has_dom_parser():
        try:
            return parse_with_tree(text, opts)
        except Exception as exc:
            logger.debug("XML parse failed (%s), using regex fallback", exc)

    try:
        return parse_with_regex(text, opts)
    except RecursionError:
        logger.debug("Regex fallback exceeded recursion depth")
        return None
