"""Shared httpx client for feed downloads and Pexels searches.

One pool serves every RSS source and the image fetcher of a run. Feeds
are requested with a Greek Accept-Language so that multilingual sites
return their Greek edition.
"""

import httpx

from easynews.core.logging import get_logger

logger = get_logger(__name__)

USER_AGENT = "EasyNewsBuilder/1.0"
ACCEPT_LANGUAGE = "el-GR,el;q=0.9,en;q=0.5"


class HTTPClient:
    """Pooled async client, created by the container and closed by main().

    Per-request options (timeout, params, headers) are passed through to
    httpx, so each feed can use its own timeout.

    Example:
        http_client = HTTPClient()
        response = await http_client.get("https://www.ertnews.gr/feed", timeout=15.0)
        await http_client.close()
    """

    def __init__(
        self,
        timeout: float = 30.0,
        max_connections: int = 20,
        max_keepalive_connections: int = 10,
    ) -> None:
        """Initialize HTTP client.

        Args:
            timeout: Default request timeout in seconds
            max_connections: Upper bound on parallel feed and image requests
            max_keepalive_connections: Idle connections kept for reuse
        """
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_keepalive_connections,
            ),
            headers={"User-Agent": USER_AGENT, "Accept-Language": ACCEPT_LANGUAGE},
            follow_redirects=True,
        )
        logger.info(
            "HTTP client initialized",
            timeout=timeout,
            max_connections=max_connections,
        )

    async def get(self, url: str, **kwargs) -> httpx.Response:
        """Send GET request; redirects are followed."""
        return await self._client.get(url, **kwargs)

    async def close(self) -> None:
        """Release pooled connections."""
        await self._client.aclose()
        logger.info("HTTP client closed")


__all__ = ["ACCEPT_LANGUAGE", "HTTPClient", "USER_AGENT"]
