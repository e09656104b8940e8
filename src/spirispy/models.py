"""Payload shapes shared by the transports and resources."""

from collections.abc import Awaitable, Callable
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field


class TokenResponse(TypedDict, total=False):
    """Token endpoint response, returned to callers as received."""

    access_token: str
    token_type: str
    expires_in: int
    refresh_token: str
    scope: str


TokenRefreshCallback = Callable[[TokenResponse], Awaitable[None] | None]


class ErrorBody(BaseModel):
    """Failure body returned by the API.

    The API is not consistent about its error shape, so every field is
    optional and anything else is kept as extra data.
    """

    model_config = ConfigDict(extra="allow")

    message: Any = None
    errors: Any = None
    error_description: Any = None


class PaginationParams(BaseModel):
    """Query parameters for paged list endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    page: int | None = None
    page_size: int | None = Field(default=None, alias="pageSize")

    def to_query(self, **extra: Any) -> dict[str, Any]:
        """Serialize to API query parameters, dropping unset values.

        Args:
            **extra: Additional filters merged over the paging fields

        Returns:
            Query parameter mapping
        """
        params = self.model_dump(by_alias=True, exclude_none=True)
        params.update({key: value for key, value in extra.items() if value is not None})
        return params
