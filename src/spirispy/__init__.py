"""SpirisPy - Python client library for the Spiris Bokföring (Visma eAccounting) API."""

from spirispy._version import __version__
from spirispy.auth import (
    AccessTokenAuth,
    async_exchange_code_for_tokens,
    async_refresh_tokens,
    build_authorization_url,
    exchange_code_for_tokens,
    refresh_tokens,
)
from spirispy.client_async import AsyncSpirisClient
from spirispy.client_sync import SpirisClient
from spirispy.exceptions import (
    SpirisAPIError,
    SpirisConnectionError,
    SpirisNotFoundError,
    SpirisRateLimitError,
    SpirisServerError,
    SpirisTokenError,
    SpirisUnauthorizedError,
    SpirisValidationError,
)
from spirispy.models import PaginationParams, TokenRefreshCallback, TokenResponse
from spirispy.sdk import AsyncSpiris, Spiris

__all__ = [
    "__version__",
    "Spiris",
    "AsyncSpiris",
    "SpirisClient",
    "AsyncSpirisClient",
    "AccessTokenAuth",
    "build_authorization_url",
    "exchange_code_for_tokens",
    "refresh_tokens",
    "async_exchange_code_for_tokens",
    "async_refresh_tokens",
    "PaginationParams",
    "TokenRefreshCallback",
    "TokenResponse",
    "SpirisAPIError",
    "SpirisConnectionError",
    "SpirisNotFoundError",
    "SpirisRateLimitError",
    "SpirisServerError",
    "SpirisTokenError",
    "SpirisUnauthorizedError",
    "SpirisValidationError",
]
