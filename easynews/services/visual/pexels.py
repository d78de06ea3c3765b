"""Pexels stock photos for articles without an image.

Pexels provides free stock images.
API documentation: https://www.pexels.com/api/documentation/

Images are purely cosmetic: every failure is logged and yields None.
"""

from typing import Any

import httpx

from easynews.core.config import get_config
from easynews.core.logging import get_logger
from easynews.core.types import Category
from easynews.infrastructure.http_client import HTTPClient
from easynews.services.collector.base import FinishedArticle

logger = get_logger(__name__)

PEXELS_API_BASE = "https://api.pexels.com"

CATEGORY_QUERIES: dict[str, str] = {
    Category.SERIOUS.value: "newspaper",
    Category.SPORTS.value: "stadium",
    Category.SCREEN.value: "cinema",
    Category.CULTURE.value: "theatre",
    Category.FUN.value: "city walk",
    Category.OTHER.value: "greece",
}


class CategoryImageFetcher:
    """Looks up one landscape stock photo per category.

    Results (including misses) are cached for the lifetime of the
    instance, so each category costs at most one request per run.

    Example:
        >>> fetcher = CategoryImageFetcher(http_client, api_key="your-key")
        >>> url = await fetcher.fetch("sports")
    """

    def __init__(
        self,
        http_client: HTTPClient,
        api_key: str | None = None,
        queries: dict[str, str] | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            http_client: Shared HTTP client
            api_key: Pexels API key (or from config)
            queries: Search query per category
        """
        self._http_client = http_client
        self._api_key = api_key if api_key is not None else get_config().pexels_api_key
        self._queries = queries or CATEGORY_QUERIES
        self._cache: dict[str, str | None] = {}

        if not self._api_key:
            logger.warning("PEXELS_API_KEY not set, category images disabled")

    async def fetch(self, category: str) -> str | None:
        """Get a stock image URL for a category.

        Args:
            category: Category key

        Returns:
            Image URL, or None when unavailable
        """
        if category in self._cache:
            return self._cache[category]

        url = await self._search(category)
        self._cache[category] = url
        return url

    async def attach_images(self, articles: list[FinishedArticle]) -> list[FinishedArticle]:
        """Give every article without an image its category photo.

        Args:
            articles: Articles to complete

        Returns:
            New list; articles that already have an image are unchanged
        """
        completed: list[FinishedArticle] = []
        for article in articles:
            if article.image_url:
                completed.append(article)
                continue
            image_url = await self.fetch(article.category)
            if image_url:
                article = article.model_copy(update={"image_url": image_url})
            completed.append(article)
        return completed

    async def _search(self, category: str) -> str | None:
        if not self._api_key:
            return None

        query = self._queries.get(category, category)
        params: dict[str, str | int] = {
            "query": query,
            "per_page": 1,
            "orientation": "landscape",
        }

        try:
            response = await self._http_client.get(
                f"{PEXELS_API_BASE}/v1/search",
                params=params,
                headers={"Authorization": self._api_key},
            )
            response.raise_for_status()
            data: Any = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Pexels image search failed", category=category, error=str(e))
            return None

        photos = data.get("photos") if isinstance(data, dict) else None
        if not isinstance(photos, list):
            logger.warning("Unexpected Pexels response", category=category)
            return None

        for photo in photos:
            src = photo.get("src") if isinstance(photo, dict) else None
            if not isinstance(src, dict):
                continue
            url = src.get("large") or src.get("large2x") or src.get("original")
            if isinstance(url, str) and url:
                logger.debug("Category image found", category=category, query=query)
                return url

        logger.info("No Pexels image for category", category=category, query=query)
        return None


__all__ = ["CATEGORY_QUERIES", "CategoryImageFetcher", "PEXELS_API_BASE"]
