"""Centralized CLI output utilities."""

from kong_admin_api.cli.output.formatters import (
    OutputFormat,
    format_cell,
    render_data,
    render_records,
)

__all__ = ["OutputFormat", "format_cell", "render_data", "render_records"]
