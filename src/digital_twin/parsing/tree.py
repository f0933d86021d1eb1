"""Full-mode parsing on top of xml.etree.ElementTree.

Walks the element tree from the root and converts it into plain dicts,
lists and coerced primitives. Parse errors propagate to the caller, which
decides whether to fall back to the regex scanner.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

from digital_twin.parsing.options import (
    ATTRS_KEY,
    Node,
    ParseOptions,
    coerce_scalar,
    merge_child,
)


def parse_with_tree(text: str, options: ParseOptions) -> Node:
    """Parse *text* as an XML document and walk its root element.

    Raises:
        xml.etree.ElementTree.ParseError: If the text is not well-formed.
    """
    root = ET.fromstring(text.strip())
    value = _walk(root, options)
    if options.keep_root:
        return {_local_name(root.tag): value}
    return value


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{uri}name".
    return tag.rpartition("}")[2]


def _walk(elem: ET.Element, options: ParseOptions) -> Node:
    children = list(elem)
    if not children and elem.text is not None:
        return coerce_scalar(elem.text.strip(), options.coerce_primitives)

    out: dict[str, Any] = {}
    if options.include_attributes and elem.attrib:
        out[ATTRS_KEY] = {
            _local_name(name): coerce_scalar(raw, options.coerce_primitives)
            for name, raw in elem.attrib.items()
        }
    for child in children:
        # Comments and processing instructions only appear here when a
        # caller-supplied TreeBuilder inserts them.
        if not isinstance(child.tag, str):
            continue
        merge_child(out, _local_name(child.tag), _walk(child, options), options.arrayize)
    return out
