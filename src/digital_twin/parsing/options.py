"""Parse options and the value helpers shared by both parse strategies.

ParseOptions controls arrayization, attribute capture, primitive coercion
and root wrapping. coerce_scalar() and merge_child() are the two policies
that must behave identically in the ElementTree walker and the regex
fallback.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Union

# Reserved key for captured attributes. Never a valid XML tag name.
ATTRS_KEY = "@attrs"

Scalar = Union[str, int, float, bool, None]
Node = Union[Scalar, dict[str, Any]]

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER_RE = re.compile(r"[+-]?\d+")
_PREFIXED_RE = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


@dataclass(frozen=True)
class ParseOptions:
    """Options for parse_xml().

    Attributes:
        arrayize: Combine repeated sibling tags into a list. When False the
            last occurrence wins.
        include_attributes: Capture element attributes under ATTRS_KEY.
        coerce_primitives: Convert leaf text to bool/None/int/float where
            the whole string allows it.
        keep_root: Wrap the result as ``{root_tag: value}`` instead of
            returning the root element's value.
    """

    arrayize: bool = True
    include_attributes: bool = False
    coerce_primitives: bool = True
    keep_root: bool = False


def to_number(text: str) -> int | float | None:
    """Return the finite number spelled by the whole of *text*, else None.

    Accepts decimal and exponent forms plus unsigned 0x/0o/0b literals.
    The empty string, ``inf``, ``nan`` and digit separators are rejected.
    """
    if _INTEGER_RE.fullmatch(text):
        return int(text)
    if _PREFIXED_RE.fullmatch(text):
        return int(text, 0)
    if _DECIMAL_RE.fullmatch(text):
        value = float(text)
        if math.isfinite(value):
            return value
    return None


def coerce_scalar(text: str, coerce: bool = True) -> Scalar:
    """Convert leaf text into a primitive.

    ``true``/``false`` become booleans, ``null`` becomes None and numeric
    text becomes int or float. Anything else is the trimmed string.
    """
    if not coerce:
        return text
    s = text.strip()
    if s == "true":
        return True
    if s == "false":
        return False
    if s == "null":
        return None
    number = to_number(s)
    if number is not None:
        return number
    return s


def merge_child(out: dict[str, Any], key: str, value: Any, arrayize: bool) -> None:
    """Store *value* under *key*, promoting to a list on the second occurrence."""
    if key not in out:
        out[key] = value
    elif arrayize:
        existing = out[key]
        if isinstance(existing, list):
            existing.append(value)
        else:
            out[key] = [existing, value]
    else:
        out[key] = value
