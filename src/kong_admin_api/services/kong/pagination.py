"""Pagination aggregation for Kong Admin API list endpoints.

Kong pages list responses as ``{"data": [...], "next": "<uri>"}``. The
aggregator follows ``next`` links one page at a time and returns the
concatenated result.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urljoin

import structlog
from pydantic import ValidationError

from kong_admin_api.integrations.kong.exceptions import (
    KongAPIError,
    KongHTTPError,
    KongNotFoundError,
)
from kong_admin_api.integrations.kong.models.base import PaginatedResponse

if TYPE_CHECKING:
    import httpx

logger = structlog.get_logger()

# Kong's default page size. A page shorter than this is treated as the last
# one even when it carries a ``next`` link.
PAGE_SIZE_THRESHOLD = 100


class Requester(Protocol):
    """Transport used by the aggregator."""

    async def get(self, uri: str) -> httpx.Response: ...


def raise_for_status(uri: str, response: httpx.Response) -> None:
    """Raise KongHTTPError for a non-2xx response.

    Raises:
        KongNotFoundError: If the response status is 404.
        KongHTTPError: For any other unsuccessful status.
    """
    if response.is_success:
        return

    logger.warning("Kong API error response", uri=uri, status=response.status_code)
    error_class = KongNotFoundError if response.status_code == 404 else KongHTTPError
    raise error_class(
        uri=uri,
        status_code=response.status_code,
        status_text=response.reason_phrase,
        response=response,
    )


async def fetch_paginated(requester: Requester, uri: str) -> Any:
    """Fetch a URI and aggregate every page of its result.

    Args:
        requester: Transport used to issue the GET requests.
        uri: Absolute URL to fetch.

    Returns:
        The flattened list of entities for paginated responses, or the
        body unchanged when it is not a ``data`` envelope.

    Raises:
        KongHTTPError: If any page answers with a non-2xx status. Pages
            fetched before the failure are discarded.
        KongAPIError: If a body is not JSON or its ``data`` envelope is
            malformed.
    """
    response = await requester.get(uri)
    raise_for_status(uri, response)

    try:
        body = response.json()
    except ValueError as e:
        raise KongAPIError(f"{uri}: response is not valid JSON", response.status_code, uri) from e
    if not isinstance(body, dict) or "data" not in body:
        return body

    try:
        page = PaginatedResponse.model_validate(body)
    except ValidationError as e:
        raise KongAPIError(f"{uri}: malformed list response", response.status_code, uri) from e
    if page.next is None:
        return page.items()

    if len(page.data) < PAGE_SIZE_THRESHOLD:
        return page.data

    # Newer Kong releases send next as a path relative to the Admin API root
    next_uri = urljoin(uri, page.next)
    logger.debug("Following pagination link", uri=uri, next=next_uri, count=len(page.data))
    rest = await fetch_paginated(requester, next_uri)
    return [*page.data, *rest]
