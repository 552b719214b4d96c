"""Kong Admin API facade.

This module provides the KongAdminApi class, which exposes one accessor per
Admin API resource kind. Reads are aggregated across pages, optionally
through a URI-keyed results cache; mutations go through request_endpoint
and reset that cache.
"""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import structlog

from kong_admin_api.integrations.kong.client import KongRequester
from kong_admin_api.integrations.kong.config import KongAdminApiConfig
from kong_admin_api.integrations.kong.models.base import Endpoint
from kong_admin_api.integrations.kong.router import KongRouter
from kong_admin_api.integrations.kong.version import KongVersion, parse_version
from kong_admin_api.services.kong.cache import AdminApiCache
from kong_admin_api.services.kong.pagination import fetch_paginated

if TYPE_CHECKING:
    import httpx

logger = structlog.get_logger()

# First Kong release serving /upstreams/{id}/targets/active
ACTIVE_TARGETS_MIN_VERSION = KongVersion(0, 11, 0)


def supports_active_targets(version: KongVersion) -> bool:
    """Return True if the Kong version serves the active targets endpoint."""
    return version >= ACTIVE_TARGETS_MIN_VERSION


def enabled_plugin_names(enabled_plugins: list[str] | dict[str, Any]) -> list[str]:
    """Normalize the enabled plugins descriptor to a list of names.

    Depending on the Kong version, ``enabled_plugins`` is either a list of
    names or a mapping keyed by name.
    """
    if isinstance(enabled_plugins, dict):
        return list(enabled_plugins.keys())
    return list(enabled_plugins)


def prepare_request_options(body: Any = None) -> tuple[dict[str, str], str | None]:
    """Build headers and serialized body for a direct endpoint request.

    Returns:
        Tuple of (headers, content). Content is None when there is no body.
    """
    headers = {"Accept": "application/json"}
    if body is None:
        return headers, None

    headers["Content-Type"] = "application/json"
    return headers, json.dumps(body)


class KongAdminApi:
    """Facade over the Kong Admin API.

    Example:
        ```python
        config = KongAdminApiConfig(host="localhost:8001", enable_cache=True)

        async with KongAdminApi(config) as api:
            version = await api.fetch_kong_version()
            apis = await api.fetch_apis()
            await api.request_endpoint(
                Endpoint.of("api", name="mockbin"),
                method="PATCH",
                body={"upstream_url": "http://mockbin.org"},
            )
        ```
    """

    def __init__(
        self,
        config: KongAdminApiConfig | None = None,
        *,
        requester: KongRequester | None = None,
        router: KongRouter | None = None,
        cache: AdminApiCache | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            config: Facade configuration. Defaults are used when omitted.
            requester: HTTP transport. Built from config when omitted.
            router: Endpoint router. Built from config when omitted.
            cache: Cache object. Pass a shared instance to share cached
                schemas, version and results between facades.
        """
        self.config = config or KongAdminApiConfig()
        self._owns_requester = requester is None
        self.requester = requester or KongRequester.from_config(self.config)
        self.router = router or KongRouter(self.config.host, self.config.use_https)
        self.cache = cache or AdminApiCache()
        self._log = logger.bind(base_url=self.router.base_url)

    @property
    def concurrency(self) -> int:
        """Maximum number of plugin schema fetches in flight."""
        return self.config.concurrency

    async def _fetch_uri(self, uri: str) -> Any:
        return await fetch_paginated(self.requester, uri)

    async def _fetch(self, endpoint: Endpoint) -> Any:
        uri = self.router.resolve(endpoint)
        self._log.debug("fetching_endpoint", endpoint=endpoint.name, uri=uri)
        if self.config.enable_cache:
            return await self.cache.fetch(uri, self._fetch_uri)
        return await self._fetch_uri(uri)

    # =========================================================================
    # Resource accessors
    # =========================================================================

    async def fetch_apis(self) -> list[dict[str, Any]]:
        """Fetch all APIs."""
        return await self._fetch(Endpoint.of("apis"))

    async def fetch_global_plugins(self) -> list[dict[str, Any]]:
        """Fetch all plugins, including those bound to APIs and consumers."""
        return await self._fetch(Endpoint.of("plugins"))

    async def fetch_plugins(self, api_id: str) -> list[dict[str, Any]]:
        """Fetch plugins configured on an API."""
        return await self._fetch(Endpoint.of("api-plugins", api_id=api_id))

    async def fetch_consumer_credentials(
        self, consumer_id: str, plugin: str
    ) -> list[dict[str, Any]]:
        """Fetch a consumer's credentials for an auth plugin (e.g. "key-auth")."""
        return await self._fetch(
            Endpoint.of("consumer-credentials", consumer_id=consumer_id, plugin=plugin)
        )

    async def fetch_consumer_acls(self, consumer_id: str) -> list[dict[str, Any]]:
        """Fetch a consumer's ACL groups."""
        return await self._fetch(Endpoint.of("consumer-acls", consumer_id=consumer_id))

    async def fetch_upstreams(self) -> list[dict[str, Any]]:
        """Fetch all upstreams."""
        return await self._fetch(Endpoint.of("upstreams"))

    async def fetch_targets(self, upstream_id: str) -> list[dict[str, Any]]:
        """Fetch the targets of an upstream."""
        return await self._fetch(Endpoint.of("upstream-targets", upstream_id=upstream_id))

    async def fetch_targets_active(self, upstream_id: str) -> list[dict[str, Any]]:
        """Fetch the active targets of an upstream.

        Only available on Kong versions accepted by supports_active_targets().
        """
        return await self._fetch(
            Endpoint.of("upstream-targets-active", upstream_id=upstream_id)
        )

    async def fetch_upstream_targets(self, upstream_id: str) -> list[dict[str, Any]]:
        """Fetch an upstream's targets using the endpoint the Kong version serves."""
        version = await self.fetch_kong_version()
        if supports_active_targets(version):
            return await self.fetch_targets_active(upstream_id)
        return await self.fetch_targets(upstream_id)

    async def fetch_certificates(self) -> list[dict[str, Any]]:
        """Fetch all certificates."""
        return await self._fetch(Endpoint.of("certificates"))

    async def fetch_consumers(self) -> list[dict[str, Any]]:
        """Fetch consumers, honouring the consumer filtering options.

        Returns an empty list without any request when ignore_consumers is
        set. With ignore_undeclared_consumers, only consumers whose username
        is declared (or is "anonymous") are kept.
        """
        if self.config.ignore_consumers:
            self._log.debug("consumers_ignored")
            return []

        consumers: list[dict[str, Any]] = await self._fetch(Endpoint.of("consumers"))

        if self.config.ignore_undeclared_consumers and self.config.consumers is not None:
            declared = self.config.declared_usernames()
            kept = [c for c in consumers if c.get("username") in declared]
            self._log.debug(
                "filtered_undeclared_consumers",
                fetched=len(consumers),
                kept=len(kept),
            )
            return kept

        return consumers

    async def fetch_plugin_schemas(self) -> dict[str, Any]:
        """Fetch the field schema of every enabled plugin.

        Schemas are fetched with at most ``concurrency`` requests in flight.
        The result is cached after the first success and never refreshed.

        Returns:
            Mapping of plugin name to its declared fields.
        """
        if self.cache.plugin_schemas is not None:
            return self.cache.plugin_schemas

        enabled = await self._fetch(Endpoint.of("plugins-enabled"))
        names = enabled_plugin_names(enabled["enabled_plugins"])
        semaphore = asyncio.Semaphore(self.concurrency)

        async def fetch_schema(name: str) -> tuple[str, Any]:
            async with semaphore:
                schema = await self._fetch(Endpoint.of("plugins-schema", plugin=name))
            return name, schema.get("fields")

        self._log.debug("fetching_plugin_schemas", count=len(names), concurrency=self.concurrency)
        pairs = await asyncio.gather(*(fetch_schema(name) for name in names))

        self.cache.plugin_schemas = dict(pairs)
        return self.cache.plugin_schemas

    async def fetch_kong_version(self) -> KongVersion:
        """Fetch and parse the Kong node version.

        The parsed version is cached after the first success.
        """
        if self.cache.kong_version is not None:
            return self.cache.kong_version

        info = await self._fetch(Endpoint.of("root"))
        self.cache.kong_version = parse_version(info["version"])
        self._log.debug("kong_version", version=str(self.cache.kong_version))
        return self.cache.kong_version

    # =========================================================================
    # Mutations
    # =========================================================================

    async def request_endpoint(
        self,
        endpoint: Endpoint,
        method: str = "GET",
        body: Any = None,
    ) -> httpx.Response:
        """Send a single request to an endpoint.

        Any direct request is treated as a potential mutation: the results
        cache is cleared before it is sent. The response status is not
        checked.

        Args:
            endpoint: Endpoint to call.
            method: HTTP method.
            body: JSON-serializable request body.

        Returns:
            The raw HTTP response.
        """
        self.cache.clear_results()

        uri = self.router.resolve(endpoint)
        headers, content = prepare_request_options(body)
        self._log.info("requesting_endpoint", method=method, endpoint=endpoint.name, uri=uri)
        return await self.requester.request(uri, method, headers=headers, content=content)

    async def aclose(self) -> None:
        """Close the transport if this facade created it."""
        if self._owns_requester:
            await self.requester.aclose()

    async def __aenter__(self) -> KongAdminApi:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()
