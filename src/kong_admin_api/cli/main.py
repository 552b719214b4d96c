"""Main CLI entry point using Typer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from kong_admin_api import __version__
from kong_admin_api.cli.commands import dump, resources
from kong_admin_api.integrations.kong.config import KongAdminApiConfig
from kong_admin_api.logging.config import configure_logging, get_logger

app = typer.Typer(
    name="kong-admin",
    help="Kong Admin API client - read gateway state and send admin requests.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"kong-admin version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug mode."),
    log_file: Path | None = typer.Option(
        None, "--log-file", help="Also write JSON logs to this file."
    ),
    host: str | None = typer.Option(
        None, "--host", "-H", help="Admin API host:port [env: OPS_KONG_HOST]"
    ),
    https: bool | None = typer.Option(
        None, "--https/--http", help="Use https for the Admin API [env: OPS_KONG_HTTPS]"
    ),
    cache: bool | None = typer.Option(
        None, "--cache/--no-cache", help="Cache reads until the next mutation."
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", "-c", min=1, help="Maximum parallel plugin schema fetches."
    ),
    ignore_consumers: bool | None = typer.Option(
        None, "--ignore-consumers/--include-consumers", help="Skip consumer fetches entirely."
    ),
    ignore_undeclared: bool | None = typer.Option(
        None,
        "--ignore-undeclared-consumers/--keep-undeclared-consumers",
        help="Keep only consumers named with --consumer (plus anonymous).",
    ),
    consumers: list[str] | None = typer.Option(
        None,
        "--consumer",
        help="Declared consumer username (repeatable) [env: OPS_KONG_CONSUMERS]",
    ),
) -> None:
    """Kong Admin API client."""
    configure_logging(verbose=verbose, debug=debug, log_file=log_file)

    overrides: dict[str, Any] = {
        "host": host,
        "use_https": https,
        "enable_cache": cache,
        "concurrency": concurrency,
        "ignore_consumers": ignore_consumers,
        "ignore_undeclared_consumers": ignore_undeclared,
        "consumers": consumers or None,
    }
    try:
        config = KongAdminApiConfig.from_env()
        config = KongAdminApiConfig.model_validate(
            {
                **config.model_dump(),
                **{key: value for key, value in overrides.items() if value is not None},
            }
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        raise typer.Exit(2) from e

    get_logger(__name__).debug("Configured Kong Admin API", base_url=config.base_url)
    ctx.obj = config


# Register subcommands
app.command("version")(resources.show_version)
app.command("list")(resources.list_resources)
app.command("schemas")(resources.list_schemas)
app.command("request")(resources.request)
app.command("dump")(dump.dump)


if __name__ == "__main__":
    app()
