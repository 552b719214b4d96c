"""Pydantic models for Kong Admin API requests and responses."""

from kong_admin_api.integrations.kong.models.base import Endpoint, PaginatedResponse

__all__ = ["Endpoint", "PaginatedResponse"]
