"""digital-twin parse -- parse XML-like text into JSON."""

from __future__ import annotations

from typing import TextIO

import click

from digital_twin.cli.formatting import format_error, format_tree, get_console
from digital_twin.parsing import ParseOptions, parse_with_regex, parse_xml
from digital_twin.reasoning import DEFAULT_REASONING_TAG, strip_reasoning


@click.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--no-arrayize", is_flag=True, help="Last repeated tag wins instead of a list.")
@click.option("--attributes", is_flag=True, help="Capture attributes under '@attrs'.")
@click.option("--raw", is_flag=True, help="Keep leaf text as strings.")
@click.option("--keep-root", is_flag=True, help="Wrap the result in the root tag name.")
@click.option("--degraded", is_flag=True, help="Use the regex fallback only.")
@click.option(
    "--strip-reasoning",
    "strip_reasoning_",
    is_flag=True,
    help="Remove reasoning segments before parsing.",
)
@click.option(
    "--reasoning-tag",
    default=DEFAULT_REASONING_TAG,
    show_default=True,
    help="Tag delimiting reasoning segments.",
)
def parse(
    source: TextIO,
    no_arrayize: bool,
    attributes: bool,
    raw: bool,
    keep_root: bool,
    degraded: bool,
    strip_reasoning_: bool,
    reasoning_tag: str,
) -> None:
    """Parse SOURCE (default: stdin) and print the result as JSON."""
    console = get_console()
    text = source.read()
    if strip_reasoning_:
        text = strip_reasoning(text, reasoning_tag)

    options = ParseOptions(
        arrayize=not no_arrayize,
        include_attributes=attributes,
        coerce_primitives=not raw,
        keep_root=keep_root,
    )
    if degraded:
        result = parse_with_regex(text, options) if text.strip() else None
    else:
        result = parse_xml(text, options)

    if result is None:
        format_error("No XML structure found.", console)
        raise SystemExit(1)
    format_tree(result, console)
