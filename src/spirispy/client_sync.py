"""Synchronous Spiris API client."""

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


class SpirisClient:
    """Synchronous transport for the Spiris API.

    Same contract as AsyncSpirisClient with blocking calls.
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

        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            auth=self.auth,
            follow_redirects=True,
            headers={
                "Content-Type": "application/json",
                "User-Agent": f"SpirisPy/{__version__}",
            },
        )

    def __enter__(self) -> SpirisClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def set_access_token(self, token: str) -> None:
        """Set or replace the access token used by subsequent requests."""
        self.auth.access_token = token

    def get_access_token(self) -> str | None:
        """Get the current access token."""
        return self.auth.access_token

    def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> Any:
        """Make an HTTP request and decode the response.

        Raises:
            SpirisAPIError: On API or connection errors
        """
        if "files" in kwargs:
            kwargs["headers"] = multipart_headers()

        logger.debug("%s %s", method, endpoint)
        try:
            response = self.client.request(method=method, url=endpoint, **kwargs)
        except httpx.TransportError as e:
            raise parse_transport_error(e) from e

        logger.debug("%s %s -> %s", method, endpoint, response.status_code)
        if not response.is_success:
            raise parse_error_response(response)

        return decode_body(response)

    def fetch(self, path: str, query: Mapping[str, Any] | None = None) -> Any:
        """Make a GET request.

        Args:
            path: Endpoint path relative to the base URL
            query: Query parameters; None values are left out

        Returns:
            Decoded response body
        """
        return self._request("GET", path, params=clean_query(query))

    def create(
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
        return self._request("POST", path, **request_payload(body, files))

    def replace(
        self,
        path: str,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
    ) -> Any:
        """Make a PUT request."""
        return self._request("PUT", path, **request_payload(body, files))

    def remove(self, path: str) -> Any:
        """Make a DELETE request."""
        return self._request("DELETE", path)

    def partial_update(
        self,
        path: str,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
    ) -> Any:
        """Make a PATCH request."""
        return self._request("PATCH", path, **request_payload(body, files))

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
    def exchange_code_for_tokens(
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        code: str,
    ) -> TokenResponse:
        """Exchange an authorization code for tokens."""
        return auth.exchange_code_for_tokens(
            client_id, client_secret, redirect_uri, code
        )

    @staticmethod
    def refresh_tokens(
        client_id: str,
        client_secret: str,
        refresh_token: str,
    ) -> TokenResponse:
        """Exchange a refresh token for new tokens."""
        return auth.refresh_tokens(client_id, client_secret, refresh_token)
