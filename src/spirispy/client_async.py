"""Asynchronous Spiris API client."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from spirispy import auth
from spirispy._version import __version__
from spirispy.auth import AccessTokenAuth
from spirispy.client_base import (
    ClientConfig,
    clean_query,
    decode_body,
    multipart_headers,
    parse_error_response,
    parse_transport_error,
    request_payload,
)
from spirispy.models import TokenRefreshCallback, TokenResponse

logger = logging.getLogger(__name__)

class AsyncSpirisClient:
    """Asynchronous transport for the Spiris API.

    Owns the HTTP connection and the access token. Every verb method is a
    single round trip returning the decoded response body; failures are
    raised as SpirisAPIError.
    """

    def __init__(
        self,
        *,
        api_url: str | None = None,
        access_token: str | None = None,
        on_token_refresh: TokenRefreshCallback | None = None,
        timeout: float | None = ClientConfig.DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Spiris client.

        Args:
            api_url: Base URL for API (default: https://eaccountingapi.vismaonline.com)
            access_token: OAuth2 access token, may be set later
            on_token_refresh: Callback for callers that renew tokens; stored only
            timeout: Request timeout in seconds (default: no timeout)
        """
        self.base_url = api_url or ClientConfig.BASE_URL
        self.timeout = timeout
        self.on_token_refresh = on_token_refresh
        self.auth = AccessTokenAuth(access_token)

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            auth=self.auth,
            follow_redirects=True,
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"SpirisPy/{__version__}",
            },
        )

    async def __aenter__(self) -> AsyncSpirisClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    def set_access_token(self, token: str) -> None:
        """Set or replace the access token used by subsequent requests."""
        self.auth.access_token = token

    def get_access_token(self) -> str | None:
        """Get the current access token."""
        return self.auth.access_token

    async def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> Any:
        """Make an HTTP request and decode the response.

        Args:
            method: HTTP method
            endpoint: API endpoint path
            **kwargs: Additional arguments for httpx request

        Returns:
            Decoded response body

        Raises:
            SpirisAPIError: On API or connection errors
        """
        if "files" in kwargs:
            kwargs["headers"] = multipart_headers()

        logger.debug("%s %s", method, endpoint)
        try:
            response = await self.client.request(method=method, url=endpoint, **kwargs)
        except httpx.TransportError as e:
            raise parse_transport_error(e) from e

        logger.debug("%s %s -> %s", method, endpoint, response.status_code)
        if not response.is_success:
            raise parse_error_response(response)

        return decode_body(response)

    async def fetch(
        self, path: str, query: Mapping[str, Any] | None = None
    ) -> Any:
        """Make a GET request.

        Args:
            path: Endpoint path relative to the base URL
            query: Query parameters; None values are left out

        Returns:
            Decoded response body
        """
        return await self._request("GET", path, params=clean_query(query))

    async def create(
        self,
        path: str,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
    ) -> Any:
        """Make a POST request.

        Args:
            path: Endpoint path relative to the base URL
            body: JSON payload
            files: Multipart form files, sent instead of a JSON payload

        Returns:
            Decoded response body
        """
        return await self._request("POST", path, **request_payload(body, files))

    async def replace(
        self,
        path: str,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
    ) -> Any:
        """Make a PUT request."""
        return await self._request("PUT", path, **request_payload(body, files))

    async def remove(self, path: str) -> Any:
        """Make a DELETE request."""
        return await self._request("DELETE", path)

    async def partial_update(
        self,
        path: str,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
    ) -> Any:
        """Make a PATCH request."""
        return await self._request("PATCH", path, **request_payload(body, files))

    # OAuth2 authorization-code flow

    @staticmethod
    def build_authorization_url(
        client_id: str,
        redirect_uri: str,
        scope: str | None = None,
        state: str | None = None,
    ) -> str:
        """Get the OAuth2 authorization URL."""
        return auth.build_authorization_url(client_id, redirect_uri, scope, state)

    @staticmethod
    async def exchange_code_for_tokens(
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        code: str,
    ) -> TokenResponse:
        """Exchange an authorization code for tokens."""
        return await auth.async_exchange_code_for_tokens(
            client_id, client_secret, redirect_uri, code
        )

    @staticmethod
    async def refresh_tokens(
        client_id: str,
        client_secret: str,
        refresh_token: str,
    ) -> TokenResponse:
        """Exchange a refresh token for new tokens."""
        return await auth.async_refresh_tokens(client_id, client_secret, refresh_token)
