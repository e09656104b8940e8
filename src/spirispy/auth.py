"""Authentication and the OAuth2 authorization-code flow for Spiris API."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from spirispy.client_base import ClientConfig, status_failure_message
from spirispy.exceptions import SpirisTokenError
from spirispy.models import ErrorBody, TokenResponse

logger = logging.getLogger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}

GET_TOKEN_FAILURE = "Failed to get access token"
REFRESH_TOKEN_FAILURE = "Failed to refresh token"


class AccessTokenAuth(httpx.Auth):
    """Bearer token authentication with a replaceable token.

    The token is read when each request is sent, so a new token set between
    two calls applies to the second one. Without a token the request goes
    out unauthenticated and the API decides what to do with it.
    """

    def __init__(self, access_token: str | None = None) -> None:
        """Initialize token authentication.

        Args:
            access_token: OAuth2 access token, may be set later
        """
        self.access_token = access_token

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        """Attach the Authorization header when a token is present."""
        if self.access_token:
            request.headers["Authorization"] = f"Bearer {self.access_token}"
        yield request


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scope: str | None = None,
    state: str | None = None,
    authorize_url: str = ClientConfig.AUTHORIZE_URL,
) -> str:
    """Build the URL to send the user to for consent.

    Args:
        client_id: OAuth2 client ID
        redirect_uri: Callback URL registered for the client
        scope: Space separated scopes (default: "ea:api ea:sales offline_access")
        state: Opaque value echoed back to the callback
        authorize_url: Authorization endpoint URL

    Returns:
        Authorization URL with encoded query string
    """
    params: dict[str, str] = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": scope or ClientConfig.DEFAULT_SCOPE,
    }
    if state:
        params["state"] = state
    return f"{authorize_url}?{urlencode(params)}"


def authorization_code_data(
    client_id: str, client_secret: str, redirect_uri: str, code: str
) -> dict[str, str]:
    """Form fields for exchanging an authorization code."""
    return {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
        "client_id": client_id,
        "client_secret": client_secret,
    }


def refresh_token_data(
    client_id: str, client_secret: str, refresh_token: str
) -> dict[str, str]:
    """Form fields for refreshing an access token."""
    return {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": client_id,
        "client_secret": client_secret,
    }


def _check_token_response(response: httpx.Response, prefix: str) -> TokenResponse:
    """Return the token payload or raise SpirisTokenError."""
    if response.is_success:
        try:
            token_data: TokenResponse = response.json()
        except ValueError:
            raise SpirisTokenError(
                f"{prefix}: Token response is not valid JSON",
                status_code=response.status_code,
                response_data=response.text,
                request=response.request,
                response=response,
            ) from None
        return token_data

    try:
        error_data: Any = response.json()
    except ValueError:
        error_data = None

    description = None
    if error_data is not None:
        try:
            description = ErrorBody.model_validate(error_data).error_description
        except ValidationError:
            description = None

    reason = description or status_failure_message(response.status_code)
    logger.warning("%s: [%s] %s", prefix, response.status_code, reason)
    raise SpirisTokenError(
        f"{prefix}: {reason}",
        status_code=response.status_code,
        response_data=error_data,
        request=response.request,
        response=response,
    )


def _transport_failure(exc: httpx.TransportError, prefix: str) -> SpirisTokenError:
    logger.warning("%s: %s", prefix, exc)
    return SpirisTokenError(f"{prefix}: {exc}")


def _post_form(token_url: str, data: dict[str, str], prefix: str) -> TokenResponse:
    try:
        response = httpx.post(
            token_url,
            data=data,
            headers=FORM_HEADERS,
            timeout=ClientConfig.DEFAULT_TIMEOUT,
        )
    except httpx.TransportError as e:
        raise _transport_failure(e, prefix) from e
    return _check_token_response(response, prefix)


async def _async_post_form(
    token_url: str, data: dict[str, str], prefix: str
) -> TokenResponse:
    try:
        async with httpx.AsyncClient(timeout=ClientConfig.DEFAULT_TIMEOUT) as client:
            response = await client.post(token_url, data=data, headers=FORM_HEADERS)
    except httpx.TransportError as e:
        raise _transport_failure(e, prefix) from e
    return _check_token_response(response, prefix)


def exchange_code_for_tokens(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code: str,
    token_url: str = ClientConfig.TOKEN_URL,
) -> TokenResponse:
    """Exchange an authorization code for tokens.

    Does not touch any client's stored access token; call
    ``set_access_token`` with the result to use it.

    Args:
        client_id: OAuth2 client ID
        client_secret: OAuth2 client secret
        redirect_uri: Redirect URI used when requesting the code
        code: Authorization code from the callback
        token_url: Token endpoint URL

    Returns:
        Token response as sent by the identity server

    Raises:
        SpirisTokenError: If the exchange fails
    """
    logger.debug("Exchanging authorization code for tokens")
    data = authorization_code_data(client_id, client_secret, redirect_uri, code)
    return _post_form(token_url, data, GET_TOKEN_FAILURE)


def refresh_tokens(
    client_id: str,
    client_secret: str,
    refresh_token: str,
    token_url: str = ClientConfig.TOKEN_URL,
) -> TokenResponse:
    """Exchange a refresh token for a new access token.

    Args:
        client_id: OAuth2 client ID
        client_secret: OAuth2 client secret
        refresh_token: OAuth2 refresh token
        token_url: Token endpoint URL

    Returns:
        Token response as sent by the identity server

    Raises:
        SpirisTokenError: If the refresh fails
    """
    logger.debug("Refreshing access token")
    data = refresh_token_data(client_id, client_secret, refresh_token)
    return _post_form(token_url, data, REFRESH_TOKEN_FAILURE)


async def async_exchange_code_for_tokens(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    code: str,
    token_url: str = ClientConfig.TOKEN_URL,
) -> TokenResponse:
    """Exchange an authorization code for tokens (async).

    See exchange_code_for_tokens.
    """
    logger.debug("Exchanging authorization code for tokens")
    data = authorization_code_data(client_id, client_secret, redirect_uri, code)
    return await _async_post_form(token_url, data, GET_TOKEN_FAILURE)


async def async_refresh_tokens(
    client_id: str,
    client_secret: str,
    refresh_token: str,
    token_url: str = ClientConfig.TOKEN_URL,
) -> TokenResponse:
    """Exchange a refresh token for a new access token (async).

    See refresh_tokens.
    """
    logger.debug("Refreshing access token")
    data = refresh_token_data(client_id, client_secret, refresh_token)
    return await _async_post_form(token_url, data, REFRESH_TOKEN_FAILURE)
