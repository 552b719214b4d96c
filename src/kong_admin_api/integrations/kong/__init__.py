"""Kong Gateway integration - HTTP transport, routing and API models."""

from kong_admin_api.integrations.kong.client import KongRequester
from kong_admin_api.integrations.kong.config import KongAdminApiConfig
from kong_admin_api.integrations.kong.exceptions import (
    KongAPIError,
    KongConnectionError,
    KongHTTPError,
    KongNotFoundError,
    KongRouteError,
)
from kong_admin_api.integrations.kong.router import KongRouter
from kong_admin_api.integrations.kong.version import KongVersion, parse_version

__all__ = [
    "KongAPIError",
    "KongAdminApiConfig",
    "KongConnectionError",
    "KongHTTPError",
    "KongNotFoundError",
    "KongRequester",
    "KongRouteError",
    "KongRouter",
    "KongVersion",
    "parse_version",
]
