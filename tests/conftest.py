"""Shared pytest fixtures for kong_admin_api tests."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator, Iterator
from typing import Any

import pytest
import respx
from typer.testing import CliRunner

from kong_admin_api.integrations.kong.config import KongAdminApiConfig
from kong_admin_api.services.kong.admin_api import KongAdminApi

KONG_HOST = "kong.test:8001"
KONG_URL = f"http://{KONG_HOST}"


def make_items(count: int, prefix: str = "item") -> list[dict[str, Any]]:
    """Build a list of fake Kong entities."""
    return [{"id": f"{prefix}-{i}", "name": f"{prefix}-{i}"} for i in range(count)]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Reset environment variables for each test."""
    for key in list(os.environ.keys()):
        if key.startswith("OPS_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_root_logger() -> Iterator[None]:
    """Remove handlers added by configure_logging after each test."""
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    yield
    root.handlers = original_handlers


@pytest.fixture
def kong_url() -> str:
    """Base URL of the mocked Admin API."""
    return KONG_URL


@pytest.fixture
def config() -> KongAdminApiConfig:
    """Facade configuration pointing at the mocked Admin API."""
    return KongAdminApiConfig(host=KONG_HOST)


@pytest.fixture
def kong_mock() -> Iterator[respx.MockRouter]:
    """Mock every HTTP request made through httpx."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
async def api(
    config: KongAdminApiConfig, kong_mock: respx.MockRouter
) -> AsyncIterator[KongAdminApi]:
    """Facade talking to the mocked Admin API."""
    async with KongAdminApi(config) as facade:
        yield facade
