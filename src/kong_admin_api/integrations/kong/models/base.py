"""Base models for Kong Admin API requests and responses.

Endpoints are addressed symbolically and resolved to URLs by the router,
and list responses share one paginated envelope shape.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Endpoint(BaseModel):
    """Symbolic reference to an Admin API endpoint.

    Attributes:
        name: Route name (e.g. "apis", "upstream-targets").
        params: Values substituted into the route template.

    Example:
        >>> Endpoint(name="upstream-targets", params={"upstream_id": "backend"})
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    params: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def of(cls, name: str, **params: str) -> Endpoint:
        """Build an endpoint from a name and keyword parameters."""
        return cls(name=name, params=params)


class PaginatedResponse(BaseModel):
    """Paginated response from Kong Admin API.

    Kong returns list endpoints as ``{"data": [...], "next": "<uri>"}``.
    When nothing matches, some Kong versions send ``data`` as ``{}``
    instead of ``[]``.

    Attributes:
        data: One page of entities (or an empty mapping for no results).
        next: URI of the following page, if any.
    """

    model_config = ConfigDict(extra="allow")

    data: list[Any] | dict[str, Any] = Field(default_factory=list)
    next: str | None = None

    def items(self) -> list[Any] | dict[str, Any]:
        """Return the page data, normalizing an empty mapping to an empty list."""
        if isinstance(self.data, dict) and not self.data:
            return []
        return self.data
