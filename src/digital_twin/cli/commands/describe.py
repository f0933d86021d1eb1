"""digital-twin describe / fields -- render a schema for prompts."""

from __future__ import annotations

import click

from digital_twin.cli.formatting import format_error, format_fields, get_console
from digital_twin.schema import collect_fields, schema_to_prompt


@click.command()
@click.argument("target")
def describe(target: str) -> None:
    """Print the prompt description of TARGET.

    TARGET is a JSON Schema file or 'module:attribute' naming a pydantic
    model, dataclass, TypedDict or SchemaNode.
    """
    from digital_twin.cli import load_schema

    console = get_console()
    try:
        schema = load_schema(target)
    except click.BadParameter as e:
        format_error(e.format_message(), console)
        raise SystemExit(1) from None
    click.echo(schema_to_prompt(schema))


@click.command()
@click.argument("target")
def fields(target: str) -> None:
    """Show the flattened fields of TARGET as a table."""
    from digital_twin.cli import load_schema

    console = get_console()
    try:
        schema = load_schema(target)
    except click.BadParameter as e:
        format_error(e.format_message(), console)
        raise SystemExit(1) from None
    format_fields(collect_fields(schema), console)
