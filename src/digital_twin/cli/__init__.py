"""digital-twin CLI -- inspect parsing and schema prompts from the terminal.

This module is NEVER imported from digital_twin/__init__.py.
It is only loaded via the ``digital-twin`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import importlib
import json
import os
from typing import Any

try:
    import click
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install digital-twin[cli]"
    ) from None


@click.group()
@click.version_option(package_name="digital-twin")
def cli() -> None:
    """digital-twin: lenient XML parsing and schema prompts for LLM output."""


def load_schema(target: str) -> Any:
    """Resolve a schema target.

    ``path/to/schema.json`` loads a JSON Schema document;
    ``package.module:Name`` (dotted attributes allowed after the colon)
    imports an object such as a pydantic model or a SchemaNode.

    Raises:
        click.BadParameter: If the target cannot be resolved.
    """
    if os.path.isfile(target):
        with open(target, encoding="utf-8") as fh:
            try:
                return json.load(fh)
            except json.JSONDecodeError as exc:
                raise click.BadParameter(f"{target} is not valid JSON: {exc}") from None

    module_name, sep, attr_path = target.partition(":")
    if not sep or not attr_path:
        raise click.BadParameter(
            f"Expected a JSON file or 'module:attribute', got {target!r}"
        )
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(f"Cannot import {module_name!r}: {exc}") from None
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError:
            raise click.BadParameter(f"{module_name!r} has no attribute {attr_path!r}") from None
    return obj


# Register subcommands after cli group is defined
from digital_twin.cli.commands.parse import parse  # noqa: E402
from digital_twin.cli.commands.describe import describe, fields  # noqa: E402

cli.add_command(parse)
cli.add_command(describe)
cli.add_command(fields)
