"""Dump command: print a snapshot of Kong configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import structlog
import typer
import yaml

from kong_admin_api.cli.commands.base import (
    OutputOption,
    console,
    get_config,
    require_document_output,
    run_with_api,
)
from kong_admin_api.cli.output import OutputFormat, render_data
from kong_admin_api.services.kong.state_reader import read_kong_state

logger = structlog.get_logger()


def dump(
    ctx: typer.Context,
    output: OutputOption = OutputFormat.YAML,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", help="Write the snapshot to a file instead of stdout"),
    ] = None,
) -> None:
    """Dump APIs, consumers, plugins, upstreams and certificates.

    Examples:
        kong-admin dump
        kong-admin dump --output json
        kong-admin --cache dump --file kong.yaml
    """
    require_document_output(output)
    state = run_with_api(get_config(ctx), read_kong_state)

    if file is None:
        render_data(console, state, output)
        return

    if output == OutputFormat.JSON:
        file.write_text(json.dumps(state, indent=2, default=str) + "\n")
    else:
        file.write_text(yaml.safe_dump(state, default_flow_style=False, sort_keys=False))
    logger.info("Wrote Kong snapshot", path=str(file))
    console.print(f"[green]Snapshot written to {file}[/green]")
