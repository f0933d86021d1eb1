"""Degraded-mode parsing with regular expressions.

Used when no structural XML parser is available or the text is not
well-formed (prose around the answer, stray ``&``, unclosed tags).

This is not a parser: attributes are skipped, quoted ``>`` inside an
attribute value ends the tag, entities are left encoded and CDATA is not
told apart from text. A tag nested inside a same-named tag is cut at the
first closing tag. It only has to recover the simple shapes language models
produce.
"""

from __future__ import annotations

import re
from typing import Any

from digital_twin.parsing.options import (
    Node,
    ParseOptions,
    coerce_scalar,
    merge_child,
)

# First opening tag with a matching closing tag; the body is greedy so it
# runs to the last closing tag of that name.
_ROOT_RE = re.compile(r"<([A-Za-z0-9:_-]+)[^>]*>([\s\S]*)</\1>")

# One sibling span; lazy so consecutive siblings are matched one by one.
_TAG_RE = re.compile(r"<([A-Za-z0-9:_-]+)(\s[^>]*)?>([\s\S]*?)</\1>")


def parse_with_regex(text: str, options: ParseOptions) -> Node:
    """Scan *text* for the outermost tag pair and its children.

    Returns None when no tag pair is found or the root body holds no
    child tags.
    """
    match = _ROOT_RE.search(text)
    if match is None:
        return None
    value = _scan(match.group(2), options)
    if value is not None and options.keep_root:
        return {match.group(1): value}
    return value


def _scan(inner: str, options: ParseOptions) -> dict[str, Any] | None:
    out: dict[str, Any] = {}
    for match in _TAG_RE.finditer(inner):
        tag, _attrs, body = match.groups()
        if _TAG_RE.search(body):
            value = _scan(body, options)
        else:
            value = coerce_scalar(body.strip(), options.coerce_primitives)
        merge_child(out, tag, value, options.arrayize)
    return out or None
