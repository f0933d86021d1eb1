"""Translate pydantic models and typing annotations into SchemaNodes.

to_schema_node() is the single entry point used by the introspector. It
accepts SchemaNodes unchanged, pydantic models (classes or instances),
dataclasses, TypedDicts, JSON Schema dicts and plain annotations such as
``list[str] | None``. Unrecognised input becomes an ``unknown`` node.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import enum
import inspect
import logging
import types
import typing
import uuid
from collections import abc
from typing import Any, Annotated, Literal, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from digital_twin.schema import build as s
from digital_twin.schema.json_schema import from_json_schema
from digital_twin.schema.nodes import SchemaKind, SchemaNode

logger = logging.getLogger(__name__)

_STRING_TYPES = (str, uuid.UUID)
_NUMBER_TYPES = (int, float, decimal.Decimal)
_DATE_TYPES = (datetime.date, datetime.datetime)
_ARRAY_ORIGINS = (list, set, frozenset, abc.Sequence, abc.MutableSequence, abc.Set, abc.Iterable)
_RECORD_ORIGINS = (dict, abc.Mapping, abc.MutableMapping)
_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)
# TypedDict key qualifiers; newer ones are missing on older interpreters.
_KEY_QUALIFIERS = tuple(
    form
    for form in (getattr(typing, name, None) for name in ("Required", "NotRequired", "ReadOnly"))
    if form is not None
)


def to_schema_node(obj: Any) -> SchemaNode:
    """Translate *obj* into the neutral schema model."""
    if isinstance(obj, SchemaNode):
        return obj
    if isinstance(obj, BaseModel):
        obj = type(obj)
    elif isinstance(obj, dict):
        return from_json_schema(obj)
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        obj = type(obj)
    return from_annotation(obj)


def from_annotation(tp: Any) -> SchemaNode:
    """Translate a type annotation into a SchemaNode."""
    return _Translator().translate(tp)


class _Translator:
    """Stateful walk over annotations; tracks classes being expanded."""

    def __init__(self) -> None:
        self._active: set[type] = set()

    def translate(self, tp: Any) -> SchemaNode:
        if isinstance(tp, SchemaNode):
            return tp
        if tp is None or tp is type(None):
            return s.null()
        if tp is Any:
            return s.any_()
        if tp is object:
            return s.unknown()

        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None:
            return s.branded(self.translate(supertype))

        origin = get_origin(tp)
        if origin is not None:
            return self._generic(tp, origin, get_args(tp))

        if isinstance(tp, type):
            return self._class(tp)
        return s.unknown()

    # -- generics --------------------------------------------------------------

    def _generic(self, tp: Any, origin: Any, args: tuple[Any, ...]) -> SchemaNode:
        if origin is Annotated:
            return self._annotated(args[0], args[1:])
        if origin in _KEY_QUALIFIERS:
            return self.translate(args[0])
        if origin is Literal:
            return _literal(args)
        if origin in _UNION_ORIGINS:
            return self._union(args)
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return s.array(self.translate(args[0]))
            if not args:
                return s.array(s.any_())
            return s.tuple_(*(self.translate(a) for a in args))
        if origin in _RECORD_ORIGINS:
            value = args[1] if len(args) == 2 else Any
            return s.record(self.translate(value))
        if origin in _ARRAY_ORIGINS:
            return s.array(self.translate(args[0] if args else Any))
        return s.unknown()

    def _union(self, args: tuple[Any, ...]) -> SchemaNode:
        rest = [a for a in args if a is not type(None)]
        if not rest:
            return s.null()
        if len(rest) == 1:
            inner = self.translate(rest[0])
        else:
            inner = s.union(*(self.translate(a) for a in rest))
        if len(rest) < len(args):
            return s.nullable(inner)
        return inner

    def _annotated(self, base: Any, metadata: tuple[Any, ...]) -> SchemaNode:
        node = self.translate(base)
        description = None
        refined = False
        for meta in metadata:
            if isinstance(meta, FieldInfo):
                description = meta.description or description
                if meta.discriminator is not None:
                    node = _discriminate(node, meta.discriminator)
                if meta.metadata:
                    refined = True
            else:
                refined = True
        if refined:
            node = s.effects(node)
        if description:
            node = node.describe(description)
        return node

    # -- classes ---------------------------------------------------------------

    def _class(self, cls: type) -> SchemaNode:
        if issubclass(cls, bool):
            return s.boolean()
        if issubclass(cls, enum.Enum):
            return s.native_enum(cls)
        if issubclass(cls, _STRING_TYPES):
            return s.string()
        if issubclass(cls, _NUMBER_TYPES):
            return s.number()
        if issubclass(cls, _DATE_TYPES):
            return s.date()
        if cls in (list, set, frozenset, tuple):
            return s.array(s.any_())
        if cls is dict:
            return s.record(s.any_())

        if issubclass(cls, BaseModel):
            return self._guarded(cls, self._model)
        if dataclasses.is_dataclass(cls):
            return self._guarded(cls, self._dataclass)
        if typing.is_typeddict(cls):
            return self._guarded(cls, self._typeddict)
        return s.unknown()

    def _guarded(self, cls: type, expand: typing.Callable[[type], SchemaNode]) -> SchemaNode:
        description = _class_doc(cls)
        if cls in self._active:
            # Recursive reference: stop with an empty object.
            return SchemaNode(SchemaKind.OBJECT, description=description)
        self._active.add(cls)
        try:
            node = expand(cls)
        finally:
            self._active.discard(cls)
        node.description = description
        return node

    def _model(self, cls: type[BaseModel]) -> SchemaNode:
        fields: dict[str, SchemaNode] = {}
        for name, info in cls.model_fields.items():
            node = self.translate(info.annotation)
            if info.discriminator is not None:
                node = _discriminate(node, info.discriminator)
            if info.metadata:
                node = s.effects(node)
            if not info.is_required():
                node = _defaulted(node, info.default, info.default_factory)
            if info.description:
                node = node.describe(info.description)
            fields[info.alias or name] = node
        return s.object_(fields)

    def _dataclass(self, cls: type) -> SchemaNode:
        hints = _type_hints(cls)
        fields: dict[str, SchemaNode] = {}
        for f in dataclasses.fields(cls):
            node = self.translate(hints.get(f.name, f.type))
            if f.default is not dataclasses.MISSING:
                node = _defaulted(node, f.default, None)
            elif f.default_factory is not dataclasses.MISSING:
                node = _defaulted(node, None, f.default_factory)
            description = f.metadata.get("description") if f.metadata else None
            if description:
                node = node.describe(description)
            fields[f.name] = node
        return s.object_(fields)

    def _typeddict(self, cls: type) -> SchemaNode:
        hints = _type_hints(cls)
        required = getattr(cls, "__required_keys__", frozenset(hints))
        fields: dict[str, SchemaNode] = {}
        for name, hint in hints.items():
            node = self.translate(hint)
            fields[name] = node if name in required else s.optional(node)
        return s.object_(fields)


def _literal(values: tuple[Any, ...]) -> SchemaNode:
    if len(values) == 1:
        return s.literal(values[0])
    if all(isinstance(v, str) for v in values):
        return s.enum(*values)
    return s.union(*(s.literal(v) for v in values))


def _discriminate(node: SchemaNode, discriminator: Any) -> SchemaNode:
    """Mark a union as discriminated; other nodes are returned as-is."""
    if node.kind is SchemaKind.UNION:
        key = discriminator if isinstance(discriminator, str) else None
        return s.discriminated_union(key or "", *node.options)
    if node.kind is SchemaKind.NULLABLE and node.inner_type is not None:
        return s.nullable(_discriminate(node.inner_type, discriminator))
    return node


def _defaulted(node: SchemaNode, default: Any, factory: Any) -> SchemaNode:
    if factory is None and default is None:
        return s.optional(node)
    if factory is not None:
        return s.default(node, factory)
    return s.default(node, default)


def _class_doc(cls: type) -> str | None:
    doc = cls.__dict__.get("__doc__")
    if not doc:
        return None
    return inspect.cleandoc(doc) or None


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except Exception as exc:
        logger.debug("Cannot resolve type hints of %s: %s", cls.__name__, exc)
        return dict(getattr(cls, "__annotations__", {}))
