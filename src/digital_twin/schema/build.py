"""Constructors for SchemaNode trees.

Meant to be imported as a namespace::

    from digital_twin.schema import build as s

    profile = s.object_({
        "name": s.string().describe("Display name"),
        "tags": s.optional(s.array(s.string())),
    })
"""

from __future__ import annotations

from typing import Any, Mapping

from digital_twin.schema.nodes import SchemaKind, SchemaNode


def string() -> SchemaNode:
    return SchemaNode(SchemaKind.STRING)


def number() -> SchemaNode:
    return SchemaNode(SchemaKind.NUMBER)


def boolean() -> SchemaNode:
    return SchemaNode(SchemaKind.BOOLEAN)


def date() -> SchemaNode:
    return SchemaNode(SchemaKind.DATE)


def bigint() -> SchemaNode:
    return SchemaNode(SchemaKind.BIGINT)


def literal(value: Any) -> SchemaNode:
    return SchemaNode(SchemaKind.LITERAL, literal=value)


def enum(*values: Any) -> SchemaNode:
    return SchemaNode(SchemaKind.ENUM, values=tuple(values))


def native_enum(enum_cls: type) -> SchemaNode:
    """An opaque enumeration (an ``enum.Enum`` subclass)."""
    return SchemaNode(SchemaKind.NATIVE_ENUM, values=tuple(enum_cls))


def null() -> SchemaNode:
    return SchemaNode(SchemaKind.NULL)


def undefined() -> SchemaNode:
    return SchemaNode(SchemaKind.UNDEFINED)


def unknown() -> SchemaNode:
    return SchemaNode(SchemaKind.UNKNOWN)


def any_() -> SchemaNode:
    return SchemaNode(SchemaKind.ANY)


def array(element: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.ARRAY, element=element)


def record(value_type: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.RECORD, value_type=value_type)


def union(*options: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.UNION, options=tuple(options))


def discriminated_union(discriminator: str, *options: SchemaNode) -> SchemaNode:
    return SchemaNode(
        SchemaKind.DISCRIMINATED_UNION,
        options=tuple(options),
        discriminator=discriminator,
    )


def object_(fields: Mapping[str, SchemaNode]) -> SchemaNode:
    return SchemaNode(SchemaKind.OBJECT, fields=dict(fields))


def tuple_(*items: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.TUPLE, items=tuple(items))


# -- wrappers ------------------------------------------------------------------


def optional(inner: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.OPTIONAL, inner_type=inner)


def nullable(inner: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.NULLABLE, inner_type=inner)


def default(inner: SchemaNode, value: Any) -> SchemaNode:
    return SchemaNode(SchemaKind.DEFAULT, inner_type=inner, default=value)


def readonly(inner: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.READONLY, inner_type=inner)


def catch(inner: SchemaNode, fallback: Any = None) -> SchemaNode:
    return SchemaNode(SchemaKind.CATCH, inner_type=inner, default=fallback)


def effects(schema: SchemaNode) -> SchemaNode:
    """A refined or transformed schema (validators, constraints)."""
    return SchemaNode(SchemaKind.EFFECTS, schema=schema)


def branded(wrapped: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.BRANDED, wrapped=wrapped)


def pipeline(wrapped: SchemaNode) -> SchemaNode:
    return SchemaNode(SchemaKind.PIPELINE, wrapped=wrapped)
