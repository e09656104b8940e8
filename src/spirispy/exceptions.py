"""Exceptions for the SpirisPy library."""

from typing import Any

import httpx


class SpirisAPIError(httpx.HTTPStatusError):
    """Base exception for all Spiris API errors.

    Carries the normalized error shape ``message``, ``status_code`` and
    ``errors`` regardless of how the upstream failure body looked.

    Extends httpx.HTTPStatusError so users can catch both SpirisAPIError
    and httpx.HTTPStatusError to handle API errors.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: Any = None,
        response_data: Any = None,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        """Initialize SpirisAPIError.

        Args:
            message: Error message
            status_code: HTTP status code, None when no response was received
            errors: Field validation errors, copied verbatim from the API
            response_data: Decoded failure body from the API, if any
            request: The request that caused the error
            response: The response from the API
        """
        if request is not None and response is not None:
            super().__init__(message, request=request, response=response)
        else:
            # Connection failures and token exchanges have no full httpx pair
            Exception.__init__(self, message)

        self.message = message
        self.status_code = status_code
        self.errors = errors
        self.response_data = response_data

    def to_dict(self) -> dict[str, Any]:
        """Return the normalized error shape, omitting absent fields."""
        data: dict[str, Any] = {"message": self.message}
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        if self.errors is not None:
            data["errors"] = self.errors
        return data

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class SpirisValidationError(SpirisAPIError):
    """Raised when request validation fails (400)."""

    pass


class SpirisUnauthorizedError(SpirisAPIError):
    """Raised when the access token is missing, invalid or lacks scope (401/403)."""

    pass


class SpirisNotFoundError(SpirisAPIError):
    """Raised when a resource is not found (404)."""

    pass


class SpirisRateLimitError(SpirisAPIError):
    """Raised when rate limit is exceeded (429)."""

    pass


class SpirisServerError(SpirisAPIError):
    """Raised when server encounters an error (5xx)."""

    pass


class SpirisConnectionError(SpirisAPIError):
    """Raised when no response was received (refused, reset, DNS failure...)."""

    pass


class SpirisTokenError(SpirisAPIError):
    """Raised when an OAuth2 code exchange or token refresh fails."""

    pass
