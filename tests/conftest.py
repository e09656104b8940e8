"""Pytest fixtures for SpirisPy tests."""

from typing import Any

import pytest

from spirispy import AsyncSpiris, AsyncSpirisClient, Spiris, SpirisClient


@pytest.fixture
def access_token() -> str:
    """Return a test access token."""
    return "test_access_token_12345"


@pytest.fixture
def oauth_credentials() -> dict[str, str]:
    """Return test OAuth2 credentials."""
    return {
        "client_id": "test_client_id",
        "client_secret": "test_client_secret",
        "redirect_uri": "http://localhost:3000/callback",
    }


@pytest.fixture
def oauth_tokens() -> dict[str, Any]:
    """Return a token endpoint response."""
    return {
        "access_token": "new_access_token",
        "token_type": "Bearer",
        "expires_in": 3600,
        "refresh_token": "new_refresh_token",
        "scope": "ea:api ea:sales offline_access",
    }


@pytest.fixture
def base_url() -> str:
    """Return the base API URL."""
    return "https://eaccountingapi.vismaonline.com"


@pytest.fixture
def token_url() -> str:
    """Return the OAuth2 token endpoint."""
    return "https://identity.vismaonline.com/connect/token"


@pytest.fixture
def sync_client(access_token: str):
    """Create a sync SpirisClient for testing."""
    client = SpirisClient(access_token=access_token)
    yield client
    client.close()


@pytest.fixture
async def async_client(access_token: str):
    """Create an async SpirisClient for testing."""
    client = AsyncSpirisClient(access_token=access_token)
    yield client
    await client.close()


@pytest.fixture
def spiris(access_token: str):
    """Create a sync Spiris SDK for testing."""
    sdk = Spiris(access_token=access_token)
    yield sdk
    sdk.close()


@pytest.fixture
async def async_spiris(access_token: str):
    """Create an async Spiris SDK for testing."""
    sdk = AsyncSpiris(access_token=access_token)
    yield sdk
    await sdk.close()


@pytest.fixture
def mock_customer() -> dict[str, Any]:
    """Return mock customer data."""
    return {
        "id": "cust-123",
        "name": "Test Customer AB",
        "emailAddress": "test@example.com",
        "invoiceCity": "Stockholm",
        "invoiceCountryCode": "SE",
        "isActive": True,
    }


@pytest.fixture
def mock_invoice() -> dict[str, Any]:
    """Return mock customer invoice data."""
    return {
        "id": "inv-123",
        "invoiceNumber": 1001,
        "customerId": "cust-123",
        "invoiceDate": "2024-01-15",
        "dueDate": "2024-02-15",
        "invoiceRows": [
            {
                "articleId": "art-123",
                "description": "Test Article",
                "quantity": 2,
                "unitPrice": 100,
            }
        ],
        "totalAmount": 200,
        "isPaid": False,
    }
