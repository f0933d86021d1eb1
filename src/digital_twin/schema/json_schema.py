"""Translate JSON Schema documents into SchemaNodes.

Covers the subset produced by pydantic's ``model_json_schema()`` and by
typical tool/function definitions: ``$ref`` into ``$defs``, typed scalars,
objects, arrays, tuples, enums, ``const``, ``anyOf``/``oneOf`` and
defaults. Keywords outside that subset are ignored.
"""

from __future__ import annotations

from typing import Any

from digital_twin.schema import build as s
from digital_twin.schema.nodes import SchemaKind, SchemaNode

_SCALARS = {
    "string": s.string,
    "number": s.number,
    "integer": s.number,
    "boolean": s.boolean,
    "null": s.null,
}
_DATE_FORMATS = frozenset({"date", "date-time"})


def from_json_schema(doc: dict[str, Any]) -> SchemaNode:
    """Translate a JSON Schema document (a dict) into a SchemaNode."""
    defs: dict[str, Any] = {}
    for key in ("$defs", "definitions"):
        if isinstance(doc.get(key), dict):
            defs.update(doc[key])
    return _JsonSchemaReader(defs).read(doc)


class _JsonSchemaReader:
    def __init__(self, defs: dict[str, Any]) -> None:
        self._defs = defs
        self._active: set[str] = set()

    def read(self, doc: Any) -> SchemaNode:
        if doc is True or doc == {}:
            return s.any_()
        if not isinstance(doc, dict):
            return s.unknown()

        ref = doc.get("$ref")
        if isinstance(ref, str):
            node = self._ref(ref)
        else:
            node = self._body(doc)

        if "default" in doc:
            node = s.default(node, doc["default"])
        description = doc.get("description")
        if isinstance(description, str) and description:
            node = node.describe(description)
        return node

    def _ref(self, ref: str) -> SchemaNode:
        name = ref.rsplit("/", 1)[-1]
        target = self._defs.get(name)
        if not isinstance(target, dict):
            return s.unknown()
        if name in self._active:
            # Recursive reference: stop with an empty object.
            description = target.get("description")
            if not isinstance(description, str):
                description = None
            return SchemaNode(SchemaKind.OBJECT, description=description)
        self._active.add(name)
        try:
            return self.read(target)
        finally:
            self._active.discard(name)

    def _body(self, doc: dict[str, Any]) -> SchemaNode:
        if "const" in doc:
            return s.literal(doc["const"])
        if isinstance(doc.get("enum"), list):
            values = doc["enum"]
            if all(isinstance(v, str) for v in values):
                return s.enum(*values)
            return s.union(*(s.literal(v) for v in values))
        for key in ("anyOf", "oneOf"):
            if isinstance(doc.get(key), list):
                return self._union(doc[key], doc.get("discriminator"))
        all_of = doc.get("allOf")
        if isinstance(all_of, list) and len(all_of) == 1:
            return self.read(all_of[0])

        kind = doc.get("type")
        if isinstance(kind, list):
            nullable = "null" in kind
            rest = [k for k in kind if k != "null"]
            if len(rest) == 1:
                inner = self._typed(rest[0], doc)
            elif rest:
                inner = s.union(*(self._typed(k, doc) for k in rest))
            else:
                return s.null()
            return s.nullable(inner) if nullable else inner
        if isinstance(kind, str):
            return self._typed(kind, doc)
        if "properties" in doc:
            return self._typed("object", doc)
        return s.unknown()

    def _typed(self, kind: Any, doc: dict[str, Any]) -> SchemaNode:
        if not isinstance(kind, str):
            return s.unknown()
        fmt = doc.get("format")
        if kind == "string" and isinstance(fmt, str) and fmt in _DATE_FORMATS:
            return s.date()
        if kind in _SCALARS:
            return _SCALARS[kind]()
        if kind == "array":
            prefix = doc.get("prefixItems")
            items = doc.get("items")
            if isinstance(prefix, list):
                return s.tuple_(*(self.read(i) for i in prefix))
            if isinstance(items, list):
                return s.tuple_(*(self.read(i) for i in items))
            return s.array(self.read(items) if items is not None else s.any_())
        if kind == "object":
            return self._object(doc)
        return s.unknown()

    def _object(self, doc: dict[str, Any]) -> SchemaNode:
        properties = doc.get("properties")
        extra = doc.get("additionalProperties")
        if not isinstance(properties, dict):
            if isinstance(extra, dict):
                return s.record(self.read(extra))
            return s.record(s.any_()) if extra is not False else s.object_({})
        required = doc.get("required")
        if isinstance(required, list):
            required = {r for r in required if isinstance(r, str)}
        else:
            required = set()
        fields: dict[str, SchemaNode] = {}
        for name, prop in properties.items():
            node = self.read(prop)
            if name not in required and (not isinstance(prop, dict) or "default" not in prop):
                node = s.optional(node)
            fields[name] = node
        return s.object_(fields)

    def _union(self, options: list[Any], discriminator: Any) -> SchemaNode:
        nodes = [self.read(o) for o in options]
        rest = [n for n in nodes if n.kind is not SchemaKind.NULL]
        nullable = len(rest) < len(nodes)
        if isinstance(discriminator, dict) and len(rest) > 1:
            inner = s.discriminated_union(str(discriminator.get("propertyName", "")), *rest)
        elif len(rest) == 1:
            inner = rest[0]
        elif rest:
            inner = s.union(*rest)
        else:
            return s.null()
        return s.nullable(inner) if nullable else inner
