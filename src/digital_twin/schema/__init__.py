"""Schema introspection for prompt building.

A neutral schema model (SchemaNode), adapters from pydantic / typing /
JSON Schema, and the serializer that renders a schema as a field listing.
"""

from digital_twin.schema.adapters import from_annotation, to_schema_node
from digital_twin.schema.introspect import (
    FieldDescriptor,
    collect_fields,
    get_description,
    is_optional,
    schema_to_prompt,
    type_to_string,
    unwrap,
)
from digital_twin.schema.json_schema import from_json_schema
from digital_twin.schema.nodes import WRAPPER_KINDS, SchemaKind, SchemaNode

__all__ = [
    "FieldDescriptor",
    "SchemaKind",
    "SchemaNode",
    "WRAPPER_KINDS",
    "collect_fields",
    "from_annotation",
    "from_json_schema",
    "get_description",
    "is_optional",
    "schema_to_prompt",
    "to_schema_node",
    "type_to_string",
    "unwrap",
]
