"""Async client facade over the Kong Admin API."""

from kong_admin_api.__version__ import __version__
from kong_admin_api.integrations.kong.config import KongAdminApiConfig
from kong_admin_api.integrations.kong.exceptions import KongAPIError, KongHTTPError
from kong_admin_api.integrations.kong.models.base import Endpoint
from kong_admin_api.services.kong.admin_api import KongAdminApi

__all__ = [
    "Endpoint",
    "KongAPIError",
    "KongAdminApi",
    "KongAdminApiConfig",
    "KongHTTPError",
    "__version__",
]
