"""Kong Admin API configuration models."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

TRUTHY_VALUES = {"1", "true", "yes", "on"}


def _env_flag(value: str) -> bool:
    return value.strip().lower() in TRUTHY_VALUES


class KongAdminApiConfig(BaseModel):
    """Kong Admin API facade configuration.

    Attributes:
        host: Admin API host and port, without scheme (e.g. "localhost:8001").
        use_https: Talk to the Admin API over https.
        timeout: Transport timeout in seconds.
        verify_ssl: Verify the server certificate when using https.
        ignore_consumers: Skip consumer fetches entirely.
        ignore_undeclared_consumers: Only keep consumers listed in ``consumers``.
        consumers: Declared consumers, as usernames or mappings with a
            ``username`` key.
        enable_cache: Cache paginated reads by URI until the next mutation.
        concurrency: Maximum number of plugin schema fetches in flight.
    """

    model_config = ConfigDict(extra="forbid")

    host: str = "localhost:8001"
    use_https: bool = False
    timeout: int = 30
    verify_ssl: bool = True
    ignore_consumers: bool = False
    ignore_undeclared_consumers: bool = False
    consumers: list[str | dict[str, Any]] | None = None
    enable_cache: bool = False
    concurrency: int = 8

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Validate host has no scheme and is not empty."""
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("host must not be empty")
        if "://" in v:
            raise ValueError("host must not include a scheme, use use_https instead")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, v: int) -> int:
        """Validate concurrency allows at least one request."""
        if v < 1:
            raise ValueError("concurrency must be at least 1")
        return v

    @property
    def base_url(self) -> str:
        """Return the Admin API base URL including scheme."""
        scheme = "https" if self.use_https else "http"
        return f"{scheme}://{self.host}"

    def declared_usernames(self) -> set[str]:
        """Return declared consumer usernames, always including ``anonymous``."""
        names = {"anonymous"}
        for consumer in self.consumers or []:
            if isinstance(consumer, dict):
                username = consumer.get("username")
                if username:
                    names.add(username)
            else:
                names.add(consumer)
        return names

    @classmethod
    def from_env(cls, base_config: dict[str, Any] | None = None) -> KongAdminApiConfig:
        """Create configuration with environment variable overrides.

        Environment variables take precedence over base_config values.

        Supported environment variables:
            OPS_KONG_HOST: Admin API host and port
            OPS_KONG_HTTPS: Use https (1/true/yes/on)
            OPS_KONG_CACHE: Enable the results cache
            OPS_KONG_CONCURRENCY: Maximum parallel schema fetches
            OPS_KONG_IGNORE_CONSUMERS: Skip consumer fetches
            OPS_KONG_IGNORE_UNDECLARED_CONSUMERS: Keep only declared consumers
            OPS_KONG_CONSUMERS: Comma-separated declared consumer usernames
        """
        config_dict = base_config.copy() if base_config else {}

        if host := os.environ.get("OPS_KONG_HOST"):
            config_dict["host"] = host

        if use_https := os.environ.get("OPS_KONG_HTTPS"):
            config_dict["use_https"] = _env_flag(use_https)

        if enable_cache := os.environ.get("OPS_KONG_CACHE"):
            config_dict["enable_cache"] = _env_flag(enable_cache)

        if concurrency := os.environ.get("OPS_KONG_CONCURRENCY"):
            config_dict["concurrency"] = int(concurrency)

        if ignore_consumers := os.environ.get("OPS_KONG_IGNORE_CONSUMERS"):
            config_dict["ignore_consumers"] = _env_flag(ignore_consumers)

        if ignore_undeclared := os.environ.get("OPS_KONG_IGNORE_UNDECLARED_CONSUMERS"):
            config_dict["ignore_undeclared_consumers"] = _env_flag(ignore_undeclared)

        if consumers := os.environ.get("OPS_KONG_CONSUMERS"):
            config_dict["consumers"] = [
                name.strip() for name in consumers.split(",") if name.strip()
            ]

        return cls.model_validate(config_dict)
