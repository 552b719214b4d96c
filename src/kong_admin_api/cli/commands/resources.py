"""Read and request commands for Kong Admin API resources."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Annotated, Any

import typer

from kong_admin_api.cli.commands.base import (
    OutputOption,
    console,
    describe_response,
    get_config,
    parse_params,
    require_document_output,
    run_with_api,
)
from kong_admin_api.cli.output import OutputFormat, render_data, render_records
from kong_admin_api.integrations.kong.models.base import Endpoint
from kong_admin_api.services.kong.admin_api import KongAdminApi


class Resource(StrEnum):
    """Resource kinds available to the list command."""

    APIS = "apis"
    PLUGINS = "plugins"
    CONSUMERS = "consumers"
    UPSTREAMS = "upstreams"
    CERTIFICATES = "certificates"


RESOURCE_COLUMNS: dict[Resource, list[tuple[str, str]]] = {
    Resource.APIS: [("id", "ID"), ("name", "Name"), ("upstream_url", "Upstream URL")],
    Resource.PLUGINS: [("id", "ID"), ("name", "Name"), ("api_id", "API"), ("enabled", "Enabled")],
    Resource.CONSUMERS: [("id", "ID"), ("username", "Username"), ("custom_id", "Custom ID")],
    Resource.UPSTREAMS: [("id", "ID"), ("name", "Name"), ("slots", "Slots")],
    Resource.CERTIFICATES: [("id", "ID"), ("snis", "SNIs")],
}


def _fetcher(api: KongAdminApi, resource: Resource) -> Any:
    return {
        Resource.APIS: api.fetch_apis,
        Resource.PLUGINS: api.fetch_global_plugins,
        Resource.CONSUMERS: api.fetch_consumers,
        Resource.UPSTREAMS: api.fetch_upstreams,
        Resource.CERTIFICATES: api.fetch_certificates,
    }[resource]


def show_version(ctx: typer.Context) -> None:
    """Show the version of the Kong node."""

    async def action(api: KongAdminApi) -> str:
        return str(await api.fetch_kong_version())

    version = run_with_api(get_config(ctx), action)
    console.print(f"Kong {version}")


def list_resources(
    ctx: typer.Context,
    resource: Annotated[Resource, typer.Argument(help="Resource kind to list")],
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """List every entity of a resource kind, across all pages.

    Examples:
        kong-admin list apis
        kong-admin list consumers --output json
    """

    async def action(api: KongAdminApi) -> list[dict[str, Any]]:
        return await _fetcher(api, resource)()

    records = run_with_api(get_config(ctx), action)
    render_records(
        console,
        records,
        RESOURCE_COLUMNS[resource],
        output=output,
        title=f"Kong {resource.value.capitalize()}",
    )


def list_schemas(
    ctx: typer.Context,
    output: OutputOption = OutputFormat.TABLE,
) -> None:
    """List enabled plugins and the number of fields in their schema."""
    schemas = run_with_api(get_config(ctx), KongAdminApi.fetch_plugin_schemas)

    if output != OutputFormat.TABLE:
        render_data(console, schemas, output)
        return

    records = [
        {"name": name, "fields": len(fields or {})} for name, fields in sorted(schemas.items())
    ]
    render_records(console, records, [("name", "Plugin"), ("fields", "Fields")], title="Plugins")


def request(
    ctx: typer.Context,
    method: Annotated[str, typer.Argument(help="HTTP method, e.g. GET, POST, PATCH, DELETE")],
    name: Annotated[str, typer.Argument(help="Endpoint name, e.g. api, upstream-targets")],
    params: Annotated[
        list[str] | None,
        typer.Option("--param", "-p", help="Endpoint parameter as key=value (repeatable)"),
    ] = None,
    body: Annotated[
        str | None,
        typer.Option("--body", "-b", help="JSON request body"),
    ] = None,
    output: OutputOption = OutputFormat.JSON,
) -> None:
    """Send a single request to an Admin API endpoint.

    Examples:
        kong-admin request DELETE api -p name=mockbin
        kong-admin request POST upstream-targets -p upstream_id=backend \\
            --body '{"target": "10.0.0.1:80"}'
    """
    require_document_output(output)
    endpoint = Endpoint(name=name, params=parse_params(params))

    payload: Any = None
    if body is not None:
        try:
            payload = json.loads(body)
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"Invalid JSON body: {e}") from e

    async def action(api: KongAdminApi) -> dict[str, Any]:
        response = await api.request_endpoint(endpoint, method=method.upper(), body=payload)
        try:
            content: Any = response.json() if response.content else None
        except ValueError:
            content = response.text
        return describe_response(response.status_code, response.reason_phrase, content)

    result = run_with_api(get_config(ctx), action)
    render_data(console, result, output)
    if result["status"] >= 400:
        raise typer.Exit(1)
