"""Base client functionality for Spiris API."""

from __future__ import annotations

import logging
import mimetypes
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO

import httpx
from pydantic import ValidationError

from spirispy.exceptions import (
    SpirisAPIError,
    SpirisConnectionError,
    SpirisNotFoundError,
    SpirisRateLimitError,
    SpirisServerError,
    SpirisUnauthorizedError,
    SpirisValidationError,
)
from spirispy.models import ErrorBody

logger = logging.getLogger(__name__)


class ClientConfig:
    """Configuration for Spiris API client."""

    BASE_URL = "https://eaccountingapi.vismaonline.com"
    AUTHORIZE_URL = "https://identity.vismaonline.com/connect/authorize"
    TOKEN_URL = "https://identity.vismaonline.com/connect/token"
    DEFAULT_SCOPE = "ea:api ea:sales offline_access"
    # No timeout unless the caller asks for one
    DEFAULT_TIMEOUT: float | None = None


def status_failure_message(status_code: int) -> str:
    """Describe an HTTP failure the way the transport reports it."""
    return f"Request failed with status code {status_code}"


def parse_error_response(response: httpx.Response) -> SpirisAPIError:
    """Parse error response and return appropriate exception.

    The message defaults to the transport description and is replaced by
    the body's ``message`` when there is one. ``errors`` is copied as is.

    Args:
        response: HTTP response from the API

    Returns:
        Appropriate SpirisAPIError subclass
    """
    status_code = response.status_code
    message = status_failure_message(status_code)
    errors = None

    try:
        error_data: Any = response.json()
    except ValueError:
        error_data = None

    if error_data is not None:
        try:
            body: ErrorBody | None = ErrorBody.model_validate(error_data)
        except ValidationError:
            body = None
        if body is not None:
            if body.message:
                message = str(body.message)
            if body.errors is not None:
                errors = body.errors

    request = response.request

    if status_code == 400:
        error_class: type[SpirisAPIError] = SpirisValidationError
    elif status_code in (401, 403):
        error_class = SpirisUnauthorizedError
    elif status_code == 404:
        error_class = SpirisNotFoundError
    elif status_code == 429:
        error_class = SpirisRateLimitError
    elif status_code >= 500:
        error_class = SpirisServerError
    else:
        error_class = SpirisAPIError

    logger.warning("Spiris API request failed: [%s] %s", status_code, message)
    return error_class(message, status_code, errors, error_data, request, response)


def parse_transport_error(exc: httpx.TransportError) -> SpirisConnectionError:
    """Wrap a failure where no response was received."""
    message = str(exc) or exc.__class__.__name__
    logger.warning("Spiris API request failed without response: %s", message)
    return SpirisConnectionError(message)


def decode_body(response: httpx.Response) -> Any:
    """Decode a successful response body.

    Returns None for an empty body, the parsed value for JSON and the raw
    bytes for anything else (PDFs, attachment content). A body labelled
    JSON that does not parse comes back as text.
    """
    if not response.content:
        return None
    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.content


def multipart_headers() -> dict[str, str]:
    """Headers replacing the JSON Content-Type default on file uploads.

    httpx keeps an existing Content-Type, so the multipart one has to be
    given explicitly; the boundary in it is the one httpx encodes with.
    """
    return {"Content-Type": f"multipart/form-data; boundary={os.urandom(16).hex()}"}


def request_payload(body: Any, files: Mapping[str, Any] | None) -> dict[str, Any]:
    """Map a verb method payload to httpx request arguments."""
    if files is not None:
        return {"files": files, "data": body}
    if body is None:
        return {}
    return {"json": body}


def clean_query(query: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Drop unset values from query parameters."""
    if query is None:
        return None
    return {key: value for key, value in query.items() if value is not None}


def prepare_attachment(
    file: Path | str | bytes | BinaryIO,
    filename: str | None = None,
) -> tuple[str, bytes, str]:
    """Prepare file attachment for upload.

    Args:
        file: File path, file path string, raw bytes or file-like object
        filename: Optional filename override

    Returns:
        Tuple of (filename, file_bytes, content_type)
    """
    if isinstance(file, (Path, str)):
        file_path = Path(file)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        actual_filename = filename or file_path.name
        file_bytes = file_path.read_bytes()
    else:
        actual_filename = filename or "attachment"
        if isinstance(file, bytes):
            file_bytes = file
        else:
            file_bytes = file.read()

    content_type = (
        mimetypes.guess_type(actual_filename)[0] or "application/octet-stream"
    )
    return actual_filename, file_bytes, content_type
