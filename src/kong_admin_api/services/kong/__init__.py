"""Kong Admin API services - facade, pagination, caching and state reading."""

from kong_admin_api.services.kong.admin_api import (
    ACTIVE_TARGETS_MIN_VERSION,
    KongAdminApi,
    enabled_plugin_names,
    supports_active_targets,
)
from kong_admin_api.services.kong.cache import AdminApiCache
from kong_admin_api.services.kong.pagination import PAGE_SIZE_THRESHOLD, fetch_paginated
from kong_admin_api.services.kong.state_reader import read_kong_state

__all__ = [
    "ACTIVE_TARGETS_MIN_VERSION",
    "PAGE_SIZE_THRESHOLD",
    "AdminApiCache",
    "KongAdminApi",
    "enabled_plugin_names",
    "fetch_paginated",
    "read_kong_state",
    "supports_active_targets",
]
