"""Kong Admin API custom exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


class KongAPIError(Exception):
    """Base exception for Kong Admin API errors.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from Kong API (if applicable).
        endpoint: The URI or endpoint name that was involved.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        """Initialize KongAPIError.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from Kong API.
            endpoint: The URI or endpoint name that was involved.
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.endpoint = endpoint

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class KongHTTPError(KongAPIError):
    """Exception raised when Kong answers with a non-2xx status.

    The raw response is kept so callers can inspect headers and body.

    Attributes:
        status_text: Reason phrase of the response (e.g. "Not Found").
        response: The raw httpx response.
    """

    def __init__(
        self,
        uri: str,
        status_code: int,
        status_text: str = "",
        response: httpx.Response | None = None,
    ) -> None:
        """Initialize KongHTTPError.

        Args:
            uri: The URI that was requested.
            status_code: HTTP status code of the response.
            status_text: Reason phrase of the response.
            response: The raw httpx response.
        """
        message = f"{uri}: {status_code} {status_text}".rstrip()
        super().__init__(message=message, status_code=status_code, endpoint=uri)
        self.status_text = status_text
        self.response = response

    @property
    def uri(self) -> str:
        """Return the URI that produced the failing response."""
        return self.endpoint or ""


class KongNotFoundError(KongHTTPError):
    """Exception raised when a requested Kong resource is not found (404)."""


class KongConnectionError(KongAPIError):
    """Exception raised when connection to Kong Admin API fails.

    This includes network errors, timeouts, and DNS resolution failures.
    """

    def __init__(
        self,
        message: str = "Failed to connect to Kong Admin API",
        endpoint: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize KongConnectionError.

        Args:
            message: Human-readable error message.
            endpoint: The URI that was attempted.
            original_error: The original exception that caused this error.
        """
        super().__init__(message=message, endpoint=endpoint)
        self.original_error = original_error


class KongRouteError(KongAPIError):
    """Exception raised when an endpoint descriptor cannot be resolved to a URL."""

    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(message=message, endpoint=endpoint)
