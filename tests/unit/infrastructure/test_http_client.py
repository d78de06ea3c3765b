"""Unit tests for HTTP client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from easynews.infrastructure.http_client import ACCEPT_LANGUAGE, USER_AGENT, HTTPClient


class TestHTTPClientInit:
    """Tests for HTTPClient initialization."""

    @patch("easynews.infrastructure.http_client.httpx.AsyncClient")
    def test_init_default_values(self, mock_async_client):
        """Redirects are followed and Greek content is requested."""
        HTTPClient()

        mock_async_client.assert_called_once()
        call_kwargs = mock_async_client.call_args[1]
        assert call_kwargs["follow_redirects"] is True
        assert call_kwargs["headers"] == {
            "User-Agent": USER_AGENT,
            "Accept-Language": ACCEPT_LANGUAGE,
        }

    @patch("easynews.infrastructure.http_client.httpx.AsyncClient")
    def test_init_custom_limits(self, mock_async_client):
        """Pool limits and the default timeout are configurable."""
        HTTPClient(timeout=10.0, max_connections=5, max_keepalive_connections=2)

        call_kwargs = mock_async_client.call_args[1]
        assert call_kwargs["timeout"] == httpx.Timeout(10.0)
        assert call_kwargs["limits"] == httpx.Limits(max_connections=5, max_keepalive_connections=2)


class TestHTTPClientRequests:
    """Tests for HTTPClient request methods."""

    @pytest.fixture
    def mock_client(self):
        """Create HTTPClient with mocked internal client."""
        with patch("easynews.infrastructure.http_client.httpx.AsyncClient") as mock:
            mock_instance = MagicMock()
            mock_instance.get = AsyncMock()
            mock_instance.aclose = AsyncMock()
            mock.return_value = mock_instance

            client = HTTPClient()
            yield client, mock_instance

    @pytest.mark.asyncio
    async def test_get_request(self, mock_client):
        """GET is forwarded with its keyword arguments."""
        client, mock_instance = mock_client
        mock_instance.get.return_value = MagicMock(status_code=200)

        response = await client.get("https://www.ertnews.gr/feed", timeout=15.0)

        assert response.status_code == 200
        mock_instance.get.assert_called_once_with("https://www.ertnews.gr/feed", timeout=15.0)

    @pytest.mark.asyncio
    async def test_close(self, mock_client):
        """close() releases the underlying client."""
        client, mock_instance = mock_client

        await client.close()

        mock_instance.aclose.assert_called_once()
