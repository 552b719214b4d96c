"""Output formatters for CLI commands.

Admin API entities are plain dictionaries. Lists can be rendered as a
Rich table, JSON, or YAML; nested structures only as JSON or YAML.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from enum import StrEnum
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table


class OutputFormat(StrEnum):
    """Supported output formats for CLI commands."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


def format_cell(value: Any) -> str:
    """Format a value for a compact table cell."""
    if isinstance(value, dict):
        if "id" in value:
            return str(value["id"])
        return json.dumps(value)
    elif isinstance(value, list):
        if len(value) == 0:
            return "-"
        items = [str(v) for v in value[:3]]
        result = ", ".join(items)
        if len(value) > 3:
            result += f" (+{len(value) - 3})"
        return result
    elif isinstance(value, bool):
        return "Yes" if value else "No"
    elif value is None:
        return "-"
    else:
        return str(value)


def render_data(console: Console, data: Any, output: OutputFormat) -> None:
    """Print arbitrary JSON-compatible data as JSON or YAML."""
    if output == OutputFormat.YAML:
        console.print(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False),
            end="",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
    else:
        console.print(
            json.dumps(data, indent=2, default=str),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


def render_records(
    console: Console,
    records: Sequence[dict[str, Any]],
    columns: list[tuple[str, str]],
    output: OutputFormat = OutputFormat.TABLE,
    title: str = "",
) -> None:
    """Print a list of entities.

    Args:
        console: Rich console for output.
        records: Entities to display.
        columns: (field_name, header) pairs used for table output.
        output: Output format.
        title: Table title.
    """
    if output != OutputFormat.TABLE:
        render_data(console, list(records), output)
        return

    table = Table(title=title, show_header=True)
    for _field_name, header in columns:
        style = "cyan" if header.lower() in ("name", "id", "username") else None
        table.add_column(header, style=style, overflow="fold")

    for record in records:
        table.add_row(*(format_cell(record.get(field_name)) for field_name, _ in columns))

    console.print(table)
    console.print(f"\n[dim]Total: {len(records)}[/dim]")
