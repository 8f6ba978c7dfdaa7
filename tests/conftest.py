"""
Shared fixtures for fetch_retry_get tests.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from fetch_retry_get.types import Response


@pytest.fixture
def ok_response():
    """200 response with a text body."""
    return Response(status_code=200, body="body")


@pytest.fixture
def server_error_response():
    """500 response with a text body."""
    return Response(status_code=500, body="body")


@pytest.fixture
def unauthorized_response():
    """401 response with a text body."""
    return Response(status_code=401, body="body")


@pytest.fixture
def async_transport():
    """Async transport stub; configure get.return_value / get.side_effect."""
    transport = MagicMock()
    transport.get = AsyncMock()
    return transport


@pytest.fixture
def sync_transport():
    """Sync transport stub; configure get.return_value / get.side_effect."""
    transport = MagicMock()
    transport.get = MagicMock()
    return transport
