"""Kong Admin API router.

Maps symbolic endpoint names to concrete Admin API URLs.
"""

from __future__ import annotations

import string
from urllib.parse import quote

from kong_admin_api.integrations.kong.exceptions import KongRouteError
from kong_admin_api.integrations.kong.models.base import Endpoint

ROUTES: dict[str, str] = {
    "root": "/",
    "apis": "/apis",
    "api": "/apis/{name}",
    "api-plugins": "/apis/{api_id}/plugins",
    "api-plugin": "/apis/{api_id}/plugins/{plugin_id}",
    "consumers": "/consumers",
    "consumer": "/consumers/{consumer_id}",
    "consumer-credentials": "/consumers/{consumer_id}/{plugin}",
    "consumer-credential": "/consumers/{consumer_id}/{plugin}/{credential_id}",
    "consumer-acls": "/consumers/{consumer_id}/acls",
    "consumer-acl": "/consumers/{consumer_id}/acls/{acl_id}",
    "plugins": "/plugins",
    "plugin": "/plugins/{plugin_id}",
    "plugins-enabled": "/plugins/enabled",
    "plugins-schema": "/plugins/schema/{plugin}",
    "upstreams": "/upstreams",
    "upstream": "/upstreams/{name}",
    "upstream-targets": "/upstreams/{upstream_id}/targets",
    "upstream-targets-active": "/upstreams/{upstream_id}/targets/active",
    "upstream-target": "/upstreams/{upstream_id}/targets/{target_id}",
    "certificates": "/certificates",
    "certificate": "/certificates/{certificate_id}",
    "certificate-snis": "/snis",
    "certificate-sni": "/snis/{sni_name}",
}


def _template_fields(template: str) -> set[str]:
    return {name for _, name, _, _ in string.Formatter().parse(template) if name}


class KongRouter:
    """Resolve endpoint descriptors to Admin API URLs.

    Example:
        >>> router = KongRouter("localhost:8001")
        >>> router.resolve(Endpoint.of("upstream-targets", upstream_id="backend"))
        'http://localhost:8001/upstreams/backend/targets'
    """

    def __init__(self, host: str, use_https: bool = False) -> None:
        """Initialize the router.

        Args:
            host: Admin API host and port, without scheme.
            use_https: Build https URLs instead of http.
        """
        scheme = "https" if use_https else "http"
        self.base_url = f"{scheme}://{host.rstrip('/')}"

    def resolve(self, endpoint: Endpoint) -> str:
        """Resolve an endpoint descriptor to a URL.

        Args:
            endpoint: Symbolic endpoint name and parameters.

        Returns:
            Absolute URL of the endpoint.

        Raises:
            KongRouteError: If the name is unknown or a parameter is missing.
        """
        template = ROUTES.get(endpoint.name)
        if template is None:
            raise KongRouteError(f"Unknown endpoint: {endpoint.name}", endpoint=endpoint.name)

        missing = _template_fields(template) - endpoint.params.keys()
        if missing:
            raise KongRouteError(
                f"Endpoint {endpoint.name} requires params: {', '.join(sorted(missing))}",
                endpoint=endpoint.name,
            )

        path = template.format(
            **{key: quote(str(value), safe="") for key, value in endpoint.params.items()}
        )
        return f"{self.base_url}{path}"

    def __call__(self, endpoint: Endpoint) -> str:
        return self.resolve(endpoint)
