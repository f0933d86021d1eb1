"""Neutral schema model.

SchemaNode is a small tagged variant describing the shape of a record:
value kinds (string, array, object, ...) and transparent wrapper kinds
(optional, default, effects, ...). The introspector only reads this model;
adapters translate pydantic models, typing annotations and JSON Schema into
it.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from typing import Any


class SchemaKind(str, enum.Enum):
    """Kind tag of a SchemaNode."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    BIGINT = "bigint"
    LITERAL = "literal"
    ENUM = "enum"
    NATIVE_ENUM = "native_enum"
    NULL = "null"
    UNDEFINED = "undefined"
    UNKNOWN = "unknown"
    ANY = "any"
    ARRAY = "array"
    RECORD = "record"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    OBJECT = "object"
    TUPLE = "tuple"

    # Wrappers
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    BRANDED = "branded"
    READONLY = "readonly"
    PIPELINE = "pipeline"
    EFFECTS = "effects"
    CATCH = "catch"


WRAPPER_KINDS: frozenset[SchemaKind] = frozenset({
    SchemaKind.OPTIONAL,
    SchemaKind.NULLABLE,
    SchemaKind.DEFAULT,
    SchemaKind.BRANDED,
    SchemaKind.READONLY,
    SchemaKind.PIPELINE,
    SchemaKind.EFFECTS,
    SchemaKind.CATCH,
})


@dataclass(eq=False)
class SchemaNode:
    """One node of a schema tree.

    Only the fields relevant to ``kind`` are set:

    - wrappers link to what they wrap through ``inner_type`` (optional,
      nullable, default, readonly, catch), ``schema`` (effects) or
      ``wrapped`` (branded, pipeline);
    - ``element`` for arrays, ``value_type`` for records, ``options`` for
      unions, ``items`` for tuples, ``fields`` for objects (declaration
      order), ``literal`` for literals, ``values`` for enums.

    Nodes compare by identity; the graph may be shared or even cyclic.
    """

    kind: SchemaKind
    description: str | None = None
    inner_type: SchemaNode | None = None
    schema: SchemaNode | None = None
    wrapped: SchemaNode | None = None
    element: SchemaNode | None = None
    value_type: SchemaNode | None = None
    options: tuple[SchemaNode, ...] = ()
    items: tuple[SchemaNode, ...] = ()
    fields: dict[str, SchemaNode] = field(default_factory=dict)
    literal: Any = None
    values: tuple[Any, ...] = ()
    discriminator: str | None = None
    default: Any = None

    @property
    def is_wrapper(self) -> bool:
        return self.kind in WRAPPER_KINDS

    def describe(self, description: str) -> SchemaNode:
        """Return a copy of this node carrying *description*."""
        return dataclasses.replace(self, description=description)

    def optional(self) -> SchemaNode:
        return SchemaNode(SchemaKind.OPTIONAL, inner_type=self)

    def nullable(self) -> SchemaNode:
        return SchemaNode(SchemaKind.NULLABLE, inner_type=self)

    def __repr__(self) -> str:
        desc = f" {self.description!r}" if self.description else ""
        return f"SchemaNode({self.kind.value}{desc})"
