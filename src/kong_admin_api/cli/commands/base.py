"""Base utilities for CLI commands.

Common Typer options, error handling, and the bridge from synchronous
Typer commands to the async facade.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Annotated, Any, NoReturn, TypeVar

import typer
from rich.console import Console

from kong_admin_api.cli.output import OutputFormat
from kong_admin_api.integrations.kong.config import KongAdminApiConfig
from kong_admin_api.integrations.kong.exceptions import (
    KongAPIError,
    KongConnectionError,
    KongHTTPError,
    KongNotFoundError,
    KongRouteError,
)
from kong_admin_api.services.kong.admin_api import KongAdminApi

# Shared console instance for all commands
console = Console()

R = TypeVar("R")

OutputOption = Annotated[
    OutputFormat,
    typer.Option(
        "--output",
        "-o",
        help="Output format: table, json, or yaml",
        case_sensitive=False,
    ),
]


def require_document_output(output: OutputFormat) -> None:
    """Reject table output for commands that print nested documents.

    Raises:
        typer.BadParameter: If ``output`` is ``table``.
    """
    if output == OutputFormat.TABLE:
        raise typer.BadParameter(
            "table output is not available for this command, use json or yaml",
            param_hint="'--output'",
        )


def get_config(ctx: typer.Context) -> KongAdminApiConfig:
    """Return the configuration built by the root callback."""
    config = ctx.obj
    if not isinstance(config, KongAdminApiConfig):
        config = KongAdminApiConfig.from_env()
        ctx.obj = config
    return config


def run_with_api(
    config: KongAdminApiConfig, action: Callable[[KongAdminApi], Awaitable[R]]
) -> R:
    """Run an async action against a facade built from config.

    Kong API errors are reported and turned into exit code 1.
    """

    async def runner() -> R:
        async with KongAdminApi(config) as api:
            return await action(api)

    try:
        return asyncio.run(runner())
    except KongAPIError as e:
        handle_kong_error(e)


def handle_kong_error(error: KongAPIError) -> NoReturn:
    """Handle Kong API errors with user-friendly output.

    Args:
        error: The Kong API error to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, KongConnectionError):
        console.print("[red]Error:[/red] Cannot connect to Kong Admin API")
        console.print(f"  {error.message}", markup=False)
        if error.original_error:
            console.print(f"  Cause: {error.original_error}", markup=False)
        console.print("\n[dim]Hint: Check that Kong is running and the host is correct.[/dim]")

    elif isinstance(error, KongNotFoundError):
        console.print("[red]Error:[/red] Resource not found")
        console.print(f"  {error.message}", markup=False)

    elif isinstance(error, KongHTTPError):
        console.print("[red]Error:[/red] Kong API request failed")
        console.print(f"  {error.message}", markup=False)

    elif isinstance(error, KongRouteError):
        console.print("[red]Error:[/red] Invalid endpoint")
        console.print(f"  {error.message}", markup=False)

    else:
        console.print(f"[red]Error:[/red] {error.message}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")
        if error.endpoint:
            console.print(f"  Endpoint: {error.endpoint}", markup=False)

    raise typer.Exit(1)


def parse_params(items: list[str] | None) -> dict[str, str]:
    """Parse --param key=value options into a dictionary.

    Raises:
        typer.BadParameter: If an item is malformed.

    Example:
        >>> parse_params(["upstream_id=backend"])
        {'upstream_id': 'backend'}
    """
    result: dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise typer.BadParameter(f"Invalid param format: '{item}'. Expected 'key=value'.")

        key, _, value = item.partition("=")
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in param: '{item}'")
        result[key] = value.strip()

    return result


def describe_response(status_code: int, reason: str, body: Any) -> dict[str, Any]:
    """Summarize a raw endpoint response for display."""
    return {"status": status_code, "reason": reason, "body": body}
