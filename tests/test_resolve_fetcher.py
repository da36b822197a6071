"""
Unit tests for the HTTP fetcher in social.graze.federation.resolve.fetcher
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from aiohttp import ClientConnectionError, ClientResponse, ClientSession, ClientTimeout

from social.graze.federation.resolve.fetcher import (
    FetchError,
    FetchResponse,
    HttpFetcher,
)


def mock_session(status: int = 200, body: str = "<XRD/>"):
    mock_session = MagicMock(spec=ClientSession)
    mock_response = AsyncMock(spec=ClientResponse)
    mock_response.status = status
    mock_response.text.return_value = body
    mock_session.get.return_value.__aenter__.return_value = mock_response
    return mock_session


class TestFetchResponse:
    """Test suite for FetchResponse."""

    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    def test_success(self, status):
        assert FetchResponse(url="https://example.com", status=status, body="").success

    @pytest.mark.parametrize("status", [101, 301, 404, 500])
    def test_not_success(self, status):
        assert not FetchResponse(
            url="https://example.com", status=status, body=""
        ).success

    def test_fetch_error_message(self):
        error = FetchError("https://example.com/x", 404)
        assert error.url == "https://example.com/x"
        assert error.status == 404
        assert str(error) == "Failed to fetch https://example.com/x: 404"


class TestHttpFetcher:
    """Test suite for HttpFetcher."""

    @pytest.mark.asyncio
    async def test_get_success(self, settings):
        """Test the response is returned with status and body."""
        session = mock_session(200, "<XRD/>")
        fetcher = HttpFetcher(session, settings)

        response = await fetcher.get("https://example.com/.well-known/host-meta")

        assert response.status == 200
        assert response.body == "<XRD/>"
        assert response.url == "https://example.com/.well-known/host-meta"
        assert response.success

    @pytest.mark.asyncio
    async def test_get_sends_headers_and_timeout(self, settings):
        session = mock_session()
        fetcher = HttpFetcher(session, settings)

        await fetcher.get("https://example.com/.well-known/host-meta")

        _, kwargs = session.get.call_args
        assert kwargs["headers"]["User-Agent"] == "test-agent/1.0"
        assert "application/xrd+xml" in kwargs["headers"]["Accept"]
        assert kwargs["timeout"] == ClientTimeout(total=5)

    @pytest.mark.asyncio
    async def test_get_error_status_is_returned(self, settings):
        """Test non-success statuses are returned, not raised."""
        fetcher = HttpFetcher(mock_session(404, "Not Found"), settings)

        response = await fetcher.get("https://example.com/missing")

        assert response.status == 404
        assert not response.success

    @pytest.mark.asyncio
    async def test_get_transport_error_propagates(self, settings):
        session = MagicMock(spec=ClientSession)
        session.get.side_effect = ClientConnectionError("refused")
        fetcher = HttpFetcher(session, settings)

        with pytest.raises(ClientConnectionError):
            await fetcher.get("https://example.com/.well-known/host-meta")
