"""Kong Admin API HTTP transport."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog

from kong_admin_api.integrations.kong.exceptions import KongConnectionError

if TYPE_CHECKING:
    from kong_admin_api.integrations.kong.config import KongAdminApiConfig

logger = structlog.get_logger()


class KongRequester:
    """Async HTTP transport for the Kong Admin API.

    Issues requests against absolute URLs produced by the router and hands
    back the raw ``httpx.Response``. Status handling is left to callers.
    No retries are attempted.

    Example:
        ```python
        config = KongAdminApiConfig(host="localhost:8001")

        async with KongRequester.from_config(config) as requester:
            response = await requester.get("http://localhost:8001/status")
            print(response.json())
        ```
    """

    def __init__(
        self,
        timeout: float = 30,
        verify_ssl: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the requester.

        Args:
            timeout: Transport timeout in seconds.
            verify_ssl: Verify server certificates.
            client: Pre-built httpx client (mainly for tests).
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            verify=verify_ssl,
        )

    @classmethod
    def from_config(cls, config: KongAdminApiConfig) -> KongRequester:
        """Build a requester from facade configuration."""
        return cls(timeout=config.timeout, verify_ssl=config.verify_ssl)

    async def request(
        self,
        uri: str,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        content: str | bytes | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request to the Admin API.

        Args:
            uri: Absolute URL to request.
            method: HTTP method.
            headers: Request headers.
            content: Raw request body.
            **kwargs: Additional arguments to pass to httpx.

        Returns:
            The raw HTTP response, whatever its status.

        Raises:
            KongConnectionError: If the connection fails or times out.
        """
        log = logger.bind(method=method, uri=uri)

        try:
            log.debug("Kong API request")
            response = await self._client.request(
                method,
                uri,
                headers=headers,
                content=content,
                **kwargs,
            )
            log.debug("Kong API response", status=response.status_code)
            return response
        except httpx.ConnectError as e:
            log.error("Kong connection error", error=str(e))
            raise KongConnectionError(
                message=f"Failed to connect to Kong: {e}",
                endpoint=uri,
                original_error=e,
            ) from e
        except httpx.TimeoutException as e:
            log.error("Kong request timeout", error=str(e))
            raise KongConnectionError(
                message=f"Kong request timed out: {e}",
                endpoint=uri,
                original_error=e,
            ) from e

    async def get(self, uri: str, **kwargs: Any) -> httpx.Response:
        """GET request to the Admin API.

        Args:
            uri: Absolute URL to request.
            **kwargs: Additional arguments to pass to httpx.

        Returns:
            The raw HTTP response.
        """
        return await self.request(uri, "GET", headers={"Accept": "application/json"}, **kwargs)

    async def aclose(self) -> None:
        """Close the HTTP client if this requester created it."""
        if self._owns_client:
            await self._client.aclose()
        logger.debug("Kong requester closed")

    async def __aenter__(self) -> KongRequester:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()
