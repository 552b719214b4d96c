"""Caches owned by the Kong Admin API facade."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from kong_admin_api.integrations.kong.version import KongVersion

logger = structlog.get_logger()


class AdminApiCache:
    """Cached Admin API state.

    Plugin schemas and the Kong version are filled on their first successful
    fetch and never invalidated. The results cache maps a URI to the task
    fetching it and is emptied wholesale on every mutation.

    Share one instance between facades to give them a common lifetime.

    Attributes:
        plugin_schemas: Plugin name to declared field list.
        kong_version: Parsed version of the Kong node.
        results: URI to in-flight or completed fetch task.
    """

    def __init__(self) -> None:
        self.plugin_schemas: dict[str, Any] | None = None
        self.kong_version: KongVersion | None = None
        self.results: dict[str, asyncio.Task[Any]] = {}

    async def fetch(self, uri: str, loader: Callable[[str], Awaitable[Any]]) -> Any:
        """Return the cached result for a URI, loading it on a miss.

        Concurrent callers for the same URI share a single fetch.

        Args:
            uri: Request URI used as the cache key.
            loader: Coroutine function performing the real fetch.

        Returns:
            The fetched result.
        """
        task = self.results.get(uri)
        if task is None:
            logger.debug("Results cache miss", uri=uri)
            task = asyncio.ensure_future(loader(uri))
            task.add_done_callback(partial(self._discard_failed, uri))
            self.results[uri] = task
        else:
            logger.debug("Results cache hit", uri=uri)
        return await asyncio.shield(task)

    def _discard_failed(self, uri: str, task: asyncio.Task[Any]) -> None:
        if not task.cancelled() and task.exception() is None:
            return
        if self.results.get(uri) is task:
            del self.results[uri]

    def clear_results(self) -> None:
        """Drop every cached result."""
        if self.results:
            logger.debug("Clearing results cache", entries=len(self.results))
        self.results = {}
