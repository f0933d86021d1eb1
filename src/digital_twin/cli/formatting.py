"""Rich formatting helpers for the digital-twin CLI.

Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from digital_twin.schema import FieldDescriptor


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def format_tree(value: Any, console: Console) -> None:
    """Display a parsed node as JSON."""
    console.print_json(json.dumps(value, ensure_ascii=False, default=str))


def format_fields(descriptors: list[FieldDescriptor], console: Console) -> None:
    """Display field descriptors as a table."""
    if not descriptors:
        console.print("[dim]No fields.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Path", style="cyan")
    table.add_column("Type", style="yellow")
    table.add_column("Required")
    table.add_column("Description")

    for d in descriptors:
        table.add_row(
            escape(d.path),
            escape(d.type),
            "[dim]no[/dim]" if d.optional else "[green]yes[/green]",
            escape(d.description or ""),
        )
    console.print(table)


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
