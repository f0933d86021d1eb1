"""Lenient structured-text parsing.

Converts XML-like model output into plain Python values, with a regex
fallback for text a real XML parser rejects.
"""

from digital_twin.parsing.fallback import parse_with_regex
from digital_twin.parsing.options import (
    ATTRS_KEY,
    Node,
    ParseOptions,
    coerce_scalar,
    merge_child,
    to_number,
)
from digital_twin.parsing.parser import has_dom_parser, parse_xml
from digital_twin.parsing.tree import parse_with_tree

__all__ = [
    "ATTRS_KEY",
    "Node",
    "ParseOptions",
    "coerce_scalar",
    "has_dom_parser",
    "merge_child",
    "parse_with_regex",
    "parse_with_tree",
    "parse_xml",
    "to_number",
]
