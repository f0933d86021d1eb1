"""Digital twin: model the people an agent talks to as character records.

Parses XML answers from language models leniently, describes record
schemas for prompts, and asks a model which character fields to update.
"""

from digital_twin._version import __version__

# Parsing
from digital_twin.parsing import ATTRS_KEY, ParseOptions, has_dom_parser, parse_xml

# Schema introspection
from digital_twin.schema import (
    FieldDescriptor,
    SchemaKind,
    SchemaNode,
    collect_fields,
    from_json_schema,
    get_description,
    is_optional,
    schema_to_prompt,
    to_schema_node,
    type_to_string,
    unwrap,
)

# Reasoning traces and retry
from digital_twin.reasoning import extract_reasoning, strip_reasoning
from digital_twin.retry import RetryResult, retry_with_steering

# LLM
from digital_twin.llm import LLMClient, OpenAIClient, ask_llm_object

# Models and modeler
from digital_twin.models import Character, ModelerConfig, ProposedUpdate, extract_updates
from digital_twin.modeler import CharacterModeler
from digital_twin.prompts import build_modeler_prompt

# Exceptions
from digital_twin.exceptions import DigitalTwinError, RetryExhaustedError, UpdateFormatError

__all__ = [
    "__version__",
    "ATTRS_KEY",
    "ParseOptions",
    "has_dom_parser",
    "parse_xml",
    "FieldDescriptor",
    "SchemaKind",
    "SchemaNode",
    "collect_fields",
    "from_json_schema",
    "get_description",
    "is_optional",
    "schema_to_prompt",
    "to_schema_node",
    "type_to_string",
    "unwrap",
    "extract_reasoning",
    "strip_reasoning",
    "RetryResult",
    "retry_with_steering",
    "LLMClient",
    "OpenAIClient",
    "ask_llm_object",
    "Character",
    "ModelerConfig",
    "ProposedUpdate",
    "extract_updates",
    "CharacterModeler",
    "build_modeler_prompt",
    "DigitalTwinError",
    "RetryExhaustedError",
    "UpdateFormatError",
]
