"""Unit tests for Kong pagination aggregation."""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest
import respx
from httpx import Response

from kong_admin_api.integrations.kong.client import KongRequester
from kong_admin_api.integrations.kong.exceptions import (
    KongAPIError,
    KongHTTPError,
    KongNotFoundError,
)
from kong_admin_api.services.kong.pagination import PAGE_SIZE_THRESHOLD, fetch_paginated
from tests.conftest import KONG_URL, make_items


@pytest.fixture
async def requester(kong_mock: respx.MockRouter) -> AsyncIterator[KongRequester]:
    """Requester whose requests are intercepted by respx."""
    async with KongRequester() as client:
        yield client


@pytest.mark.unit
class TestSinglePage:
    """Responses that need no further requests."""

    async def test_returns_data_without_next(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A page without next is the complete result."""
        items = make_items(3)
        kong_mock.get(f"{KONG_URL}/apis").mock(return_value=Response(200, json={"data": items}))

        result = await fetch_paginated(requester, f"{KONG_URL}/apis")

        assert result == items

    async def test_empty_object_data_becomes_empty_list(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """Kong sometimes reports no results as data: {}."""
        kong_mock.get(f"{KONG_URL}/consumers").mock(return_value=Response(200, json={"data": {}}))

        result = await fetch_paginated(requester, f"{KONG_URL}/consumers")

        assert result == []

    async def test_empty_list_data_stays_empty(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """An empty list is returned as an empty list."""
        kong_mock.get(f"{KONG_URL}/consumers").mock(return_value=Response(200, json={"data": []}))

        result = await fetch_paginated(requester, f"{KONG_URL}/consumers")

        assert result == []

    async def test_body_without_data_returned_unchanged(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """Non-paginated bodies such as the root info pass through."""
        body = {"version": "0.11.2", "hostname": "kong-node", "tagline": "Welcome to kong"}
        kong_mock.get(f"{KONG_URL}/").mock(return_value=Response(200, json=body))

        result = await fetch_paginated(requester, f"{KONG_URL}/")

        assert result == body

    async def test_null_next_treated_as_absent(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A null next link means there are no more pages."""
        items = make_items(PAGE_SIZE_THRESHOLD)
        kong_mock.get(f"{KONG_URL}/apis").mock(
            return_value=Response(200, json={"data": items, "next": None})
        )

        result = await fetch_paginated(requester, f"{KONG_URL}/apis")

        assert result == items
        assert kong_mock.calls.call_count == 1


@pytest.mark.unit
class TestMultiplePages:
    """Responses that link to following pages."""

    async def test_follows_next_for_full_pages(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """Full pages are followed and concatenated in order."""
        first = make_items(100, "a")
        second = make_items(100, "b")
        third = make_items(7, "c")
        kong_mock.get(f"{KONG_URL}/apis?offset=p2").mock(
            return_value=Response(
                200, json={"data": second, "next": f"{KONG_URL}/apis?offset=p3"}
            )
        )
        kong_mock.get(f"{KONG_URL}/apis?offset=p3").mock(
            return_value=Response(200, json={"data": third})
        )
        kong_mock.get(f"{KONG_URL}/apis").mock(
            return_value=Response(
                200, json={"data": first, "next": f"{KONG_URL}/apis?offset=p2"}
            )
        )

        result = await fetch_paginated(requester, f"{KONG_URL}/apis")

        assert result == first + second + third
        assert kong_mock.calls.call_count == 3

    async def test_short_page_with_next_stops(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A page shorter than the threshold ends pagination despite next."""
        items = make_items(PAGE_SIZE_THRESHOLD - 1)
        kong_mock.get(f"{KONG_URL}/apis").mock(
            return_value=Response(
                200, json={"data": items, "next": f"{KONG_URL}/apis?offset=more"}
            )
        )

        result = await fetch_paginated(requester, f"{KONG_URL}/apis")

        assert result == items
        assert kong_mock.calls.call_count == 1

    async def test_recursion_stops_on_short_following_page(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """The following page is not followed once it is short."""
        first = make_items(120, "a")
        second = make_items(50, "b")
        kong_mock.get(f"{KONG_URL}/targets?offset=2").mock(
            return_value=Response(
                200, json={"data": second, "next": f"{KONG_URL}/targets?offset=3"}
            )
        )
        kong_mock.get(f"{KONG_URL}/targets").mock(
            return_value=Response(
                200, json={"data": first, "next": f"{KONG_URL}/targets?offset=2"}
            )
        )

        result = await fetch_paginated(requester, f"{KONG_URL}/targets")

        assert result == first + second
        assert kong_mock.calls.call_count == 2

    async def test_relative_next_resolved_against_admin_url(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A next link given as a path is fetched from the same Admin API."""
        first = make_items(100, "a")
        second = make_items(3, "b")
        kong_mock.get(f"{KONG_URL}/consumers?offset=abc").mock(
            return_value=Response(200, json={"data": second, "next": None})
        )
        kong_mock.get(f"{KONG_URL}/consumers").mock(
            return_value=Response(200, json={"data": first, "next": "/consumers?offset=abc"})
        )

        result = await fetch_paginated(requester, f"{KONG_URL}/consumers")

        assert result == first + second
        assert str(kong_mock.calls.last.request.url) == f"{KONG_URL}/consumers?offset=abc"


@pytest.mark.unit
class TestErrors:
    """Unsuccessful responses."""

    async def test_not_found_raises_with_status_and_uri(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A 404 raises KongNotFoundError naming the URI."""
        uri = f"{KONG_URL}/upstreams/missing/targets"
        kong_mock.get(uri).mock(return_value=Response(404, json={"message": "Not found"}))

        with pytest.raises(KongNotFoundError) as exc_info:
            await fetch_paginated(requester, uri)

        assert exc_info.value.status_code == 404
        assert exc_info.value.status_text == "Not Found"
        assert uri in str(exc_info.value)
        assert isinstance(exc_info.value.response, httpx.Response)

    async def test_server_error_raises_http_error(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """Other failures raise KongHTTPError."""
        uri = f"{KONG_URL}/apis"
        kong_mock.get(uri).mock(return_value=Response(500))

        with pytest.raises(KongHTTPError) as exc_info:
            await fetch_paginated(requester, uri)

        assert not isinstance(exc_info.value, KongNotFoundError)
        assert str(exc_info.value) == f"{uri}: 500 Internal Server Error"

    async def test_failure_mid_pagination_aborts(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A failing later page discards the pages already fetched."""
        kong_mock.get(f"{KONG_URL}/apis?offset=p2").mock(return_value=Response(503))
        kong_mock.get(f"{KONG_URL}/apis").mock(
            return_value=Response(
                200, json={"data": make_items(100), "next": f"{KONG_URL}/apis?offset=p2"}
            )
        )

        with pytest.raises(KongHTTPError) as exc_info:
            await fetch_paginated(requester, f"{KONG_URL}/apis")

        assert exc_info.value.status_code == 503
        assert exc_info.value.uri == f"{KONG_URL}/apis?offset=p2"

    async def test_null_data_raises_api_error(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A malformed data envelope is reported as a Kong API error."""
        uri = f"{KONG_URL}/apis"
        kong_mock.get(uri).mock(return_value=Response(200, json={"data": None}))

        with pytest.raises(KongAPIError) as exc_info:
            await fetch_paginated(requester, uri)

        assert exc_info.value.endpoint == uri
        assert "malformed list response" in str(exc_info.value)

    async def test_non_json_body_raises_api_error(
        self, requester: KongRequester, kong_mock: respx.MockRouter
    ) -> None:
        """A body that is not JSON is reported as a Kong API error."""
        uri = f"{KONG_URL}/apis"
        kong_mock.get(uri).mock(return_value=Response(200, text="<html>proxy error</html>"))

        with pytest.raises(KongAPIError, match="not valid JSON"):
            await fetch_paginated(requester, uri)
