"""Render schemas as field listings for language model prompts.

schema_to_prompt() turns a record schema into lines such as::

    Schema: Complete character definition
    - name (string, required) — The name of the character
    - style.chat (array<string>, optional)

Everything here is best-effort documentation: unrecognised shapes render as
``unknown`` or produce no rows, and nothing raises.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from digital_twin.schema.adapters import to_schema_node
from digital_twin.schema.nodes import SchemaKind, SchemaNode

_SIMPLE_NAMES: dict[SchemaKind, str] = {
    SchemaKind.STRING: "string",
    SchemaKind.NUMBER: "number",
    SchemaKind.BOOLEAN: "boolean",
    SchemaKind.DATE: "date",
    SchemaKind.BIGINT: "bigint",
    SchemaKind.NATIVE_ENUM: "enum",
    SchemaKind.NULL: "null",
    SchemaKind.UNDEFINED: "undefined",
    SchemaKind.UNKNOWN: "unknown",
    SchemaKind.ANY: "any",
    SchemaKind.OBJECT: "object",
}

_ALWAYS_OPTIONAL = frozenset({
    SchemaKind.OPTIONAL,
    SchemaKind.DEFAULT,
    SchemaKind.CATCH,
    SchemaKind.ANY,
    SchemaKind.UNKNOWN,
    SchemaKind.UNDEFINED,
})


@dataclass(frozen=True)
class FieldDescriptor:
    """One row of a schema listing.

    Attributes:
        path: Location of the field, e.g. ``style.chat``,
            ``knowledge[].path`` or ``settings{value}.enabled``.
        type: Rendered type signature.
        optional: Whether the field may be left out.
        description: Human-readable annotation, if any.
    """

    path: str
    type: str
    optional: bool
    description: str | None = None

    def __str__(self) -> str:
        opt = "optional" if self.optional else "required"
        suffix = f" — {self.description}" if self.description else ""
        return f"- {self.path} ({self.type}, {opt}){suffix}"


def _links(node: SchemaNode) -> list[Any]:
    return [node.inner_type, node.schema, node.wrapped]


def unwrap(node: Any) -> Any:
    """Peel wrapper layers until a node with no wrapper link remains.

    Links are followed one layer at a time, preferring ``inner_type``, then
    ``schema``, then ``wrapped``. Values that are not SchemaNodes are
    returned unchanged. A cyclic wrapper chain stops at the first repeat.
    """
    seen: set[int] = set()
    while isinstance(node, SchemaNode) and id(node) not in seen:
        seen.add(id(node))
        nxt = next((n for n in _links(node) if isinstance(n, SchemaNode)), None)
        if nxt is None:
            return node
        node = nxt
    return node


def is_optional(node: Any) -> bool:
    """Return True if a missing value would be accepted by *node*."""
    seen: set[int] = set()

    def check(n: Any) -> bool:
        if not isinstance(n, SchemaNode) or id(n) in seen:
            return False
        seen.add(id(n))
        if n.kind in _ALWAYS_OPTIONAL:
            return True
        if n.kind in (SchemaKind.UNION, SchemaKind.DISCRIMINATED_UNION):
            return any(check(o) for o in n.options)
        inner = next((x for x in _links(n) if isinstance(x, SchemaNode)), None)
        return check(inner) if inner is not None else False

    return check(node)


def get_description(node: Any) -> str | None:
    """Return the description on *node*, else on its unwrapped form."""
    if isinstance(node, SchemaNode) and node.description:
        return node.description
    inner = unwrap(node)
    if isinstance(inner, SchemaNode) and inner.description:
        return inner.description
    return None


def type_to_string(node: Any) -> str:
    """Render the unwrapped kind of *node* as a compact type signature."""
    return _render(node, frozenset())


def _render(node: Any, active: frozenset[int]) -> str:
    t = unwrap(node)
    if not isinstance(t, SchemaNode) or id(t) in active:
        return "unknown"
    active = active | {id(t)}
    kind = t.kind

    if kind in _SIMPLE_NAMES:
        return _SIMPLE_NAMES[kind]
    if kind is SchemaKind.LITERAL:
        try:
            return json.dumps(t.literal, default=str)
        except (TypeError, ValueError):
            return repr(t.literal)
    if kind is SchemaKind.ENUM:
        return f"enum<{' | '.join(str(v) for v in t.values)}>"
    if kind is SchemaKind.ARRAY:
        return f"array<{_render(t.element, active)}>"
    if kind is SchemaKind.RECORD:
        return f"record<string, {_render(t.value_type, active)}>"
    if kind in (SchemaKind.UNION, SchemaKind.DISCRIMINATED_UNION):
        return " | ".join(_render(o, active) for o in t.options)
    if kind is SchemaKind.TUPLE:
        return f"tuple<{', '.join(_render(i, active) for i in t.items)}>"
    return "unknown"


def _object_of(node: Any) -> SchemaNode | None:
    t = unwrap(node)
    if isinstance(t, SchemaNode) and t.kind is SchemaKind.OBJECT:
        return t
    return None


def collect_fields(schema: Any, prefix: str = "") -> list[FieldDescriptor]:
    """Flatten an object schema into field descriptors.

    Each declared key yields one row, followed by the rows of a nested
    object, an array of objects (``path[]``) or a record of objects
    (``path{value}``). A schema that is not an object yields no rows.
    """
    return _collect(to_schema_node(schema), prefix, frozenset())


def _collect(
    schema: Any, prefix: str, active: frozenset[int]
) -> list[FieldDescriptor]:
    out: list[FieldDescriptor] = []
    obj = _object_of(schema)
    if obj is None or id(obj) in active:
        return out
    active = active | {id(obj)}

    for key, original in obj.fields.items():
        path = f"{prefix}.{key}" if prefix else key
        out.append(FieldDescriptor(
            path=path,
            type=type_to_string(original),
            optional=is_optional(original),
            description=get_description(original),
        ))

        inner = unwrap(original)
        if not isinstance(inner, SchemaNode):
            continue
        if inner.kind is SchemaKind.OBJECT:
            out.extend(_collect(inner, path, active))
        elif inner.kind is SchemaKind.ARRAY and _object_of(inner.element):
            out.extend(_collect(inner.element, f"{path}[]", active))
        elif inner.kind is SchemaKind.RECORD and _object_of(inner.value_type):
            out.extend(_collect(inner.value_type, f"{path}{{value}}", active))
    return out


def schema_to_prompt(schema: Any) -> str:
    """Describe *schema* as text for a language model prompt.

    Accepts a SchemaNode or anything to_schema_node() understands (pydantic
    models, dataclasses, TypedDicts, typing annotations, JSON Schema dicts).
    """
    node = to_schema_node(schema)
    desc = get_description(node)
    lines = [f"Schema: {desc}" if desc else "Schema:"]
    lines.extend(str(f) for f in collect_fields(node))
    return "\n".join(lines)
