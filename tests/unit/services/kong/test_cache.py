"""Unit tests for the Admin API cache."""

from __future__ import annotations

import asyncio

import pytest

from kong_admin_api.services.kong.cache import AdminApiCache


@pytest.mark.unit
class TestAdminApiCache:
    """Tests for AdminApiCache."""

    def test_starts_empty(self) -> None:
        """A new cache holds nothing."""
        cache = AdminApiCache()

        assert cache.plugin_schemas is None
        assert cache.kong_version is None
        assert cache.results == {}

    async def test_fetch_loads_once_per_uri(self) -> None:
        """Repeated fetches of a URI reuse the first result."""
        cache = AdminApiCache()
        calls: list[str] = []

        async def loader(uri: str) -> list[str]:
            calls.append(uri)
            return [uri]

        first = await cache.fetch("http://kong/apis", loader)
        second = await cache.fetch("http://kong/apis", loader)

        assert first == second == ["http://kong/apis"]
        assert calls == ["http://kong/apis"]

    async def test_concurrent_fetches_share_in_flight_request(self) -> None:
        """Concurrent callers for one URI wait on the same load."""
        cache = AdminApiCache()
        release = asyncio.Event()
        calls = 0

        async def loader(uri: str) -> str:
            nonlocal calls
            calls += 1
            await release.wait()
            return "done"

        pending = asyncio.gather(
            cache.fetch("http://kong/apis", loader),
            cache.fetch("http://kong/apis", loader),
        )
        await asyncio.sleep(0)
        release.set()

        assert await pending == ["done", "done"]
        assert calls == 1

    async def test_clear_results_forces_reload(self) -> None:
        """Clearing the results cache makes the next fetch load again."""
        cache = AdminApiCache()
        calls = 0

        async def loader(uri: str) -> int:
            nonlocal calls
            calls += 1
            return calls

        assert await cache.fetch("http://kong/apis", loader) == 1
        cache.clear_results()
        assert await cache.fetch("http://kong/apis", loader) == 2

    async def test_failed_fetch_is_not_cached(self) -> None:
        """A failing load is dropped so the next fetch retries."""
        cache = AdminApiCache()
        attempts = 0

        async def loader(uri: str) -> str:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise RuntimeError("boom")
            return "ok"

        with pytest.raises(RuntimeError):
            await cache.fetch("http://kong/apis", loader)

        assert "http://kong/apis" not in cache.results
        assert await cache.fetch("http://kong/apis", loader) == "ok"

    def test_clear_results_keeps_schemas_and_version(self) -> None:
        """Only the results cache is reset."""
        cache = AdminApiCache()
        cache.plugin_schemas = {"acl": {}}

        cache.clear_results()

        assert cache.plugin_schemas == {"acl": {}}
