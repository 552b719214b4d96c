"""Read a full snapshot of Kong configuration through the facade.

The snapshot nests related entities under their owner: plugins under
APIs, credentials and ACLs under consumers, targets under upstreams.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

if TYPE_CHECKING:
    from kong_admin_api.services.kong.admin_api import KongAdminApi

logger = structlog.get_logger()

# Auth plugins whose credentials live under /consumers/{id}/{plugin}
CREDENTIAL_PLUGINS = ("key-auth", "basic-auth", "oauth2", "hmac-auth", "jwt")

T = TypeVar("T")


async def _gather_bounded(limit: int, aws: Iterable[Awaitable[T]]) -> list[T]:
    """Await every awaitable with at most ``limit`` running at once."""
    semaphore = asyncio.Semaphore(limit)

    async def run(aw: Awaitable[T]) -> T:
        async with semaphore:
            return await aw

    return list(await asyncio.gather(*(run(aw) for aw in aws)))


async def _read_apis(api: KongAdminApi) -> list[dict[str, Any]]:
    apis = await api.fetch_apis()
    plugins = await _gather_bounded(
        api.concurrency, (api.fetch_plugins(item["id"]) for item in apis)
    )
    return [{**item, "plugins": item_plugins} for item, item_plugins in zip(apis, plugins)]


async def _read_consumer(
    api: KongAdminApi,
    consumer: dict[str, Any],
    credential_plugins: list[str],
    read_acls: bool,
) -> dict[str, Any]:
    credentials: dict[str, Any] = {}
    for plugin in credential_plugins:
        credentials[plugin] = await api.fetch_consumer_credentials(consumer["id"], plugin)

    entry = {**consumer, "credentials": credentials}
    if read_acls:
        entry["acls"] = await api.fetch_consumer_acls(consumer["id"])
    return entry


async def _read_consumers(api: KongAdminApi) -> list[dict[str, Any]]:
    consumers = await api.fetch_consumers()
    if not consumers:
        return []

    schemas = await api.fetch_plugin_schemas()
    credential_plugins = [name for name in CREDENTIAL_PLUGINS if name in schemas]
    return await _gather_bounded(
        api.concurrency,
        (
            _read_consumer(api, consumer, credential_plugins, "acl" in schemas)
            for consumer in consumers
        ),
    )


async def _read_upstreams(api: KongAdminApi) -> list[dict[str, Any]]:
    upstreams = await api.fetch_upstreams()
    targets = await _gather_bounded(
        api.concurrency,
        (api.fetch_upstream_targets(upstream["id"]) for upstream in upstreams),
    )
    return [
        {**upstream, "targets": upstream_targets}
        for upstream, upstream_targets in zip(upstreams, targets)
    ]


def _is_global(plugin: dict[str, Any]) -> bool:
    return not any(plugin.get(key) for key in ("api_id", "consumer_id", "service", "route"))


async def read_kong_state(api: KongAdminApi) -> dict[str, Any]:
    """Read APIs, consumers, global plugins, upstreams and certificates.

    Args:
        api: Facade used for every request.

    Returns:
        Snapshot dictionary keyed by resource kind, plus the Kong version.
    """
    version = await api.fetch_kong_version()
    logger.info("Reading Kong state", version=str(version))

    apis = await _read_apis(api)
    consumers = await _read_consumers(api)
    plugins = [plugin for plugin in await api.fetch_global_plugins() if _is_global(plugin)]
    upstreams = await _read_upstreams(api)
    certificates = await api.fetch_certificates()

    logger.info(
        "Read Kong state",
        apis=len(apis),
        consumers=len(consumers),
        plugins=len(plugins),
        upstreams=len(upstreams),
        certificates=len(certificates),
    )
    return {
        "version": str(version),
        "apis": apis,
        "consumers": consumers,
        "plugins": plugins,
        "upstreams": upstreams,
        "certificates": certificates,
    }
