"""RSS/Atom feed source collector.

Generic collector for RSS and Atom feeds.
Uses feedparser for parsing various feed formats.
"""

import html
import re
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

import feedparser
import httpx

from easynews.config.sources import RSSConfig
from easynews.core.exceptions import FeedFetchError
from easynews.core.logging import get_logger
from easynews.infrastructure.http_client import HTTPClient
from easynews.services.collector.base import BaseSource, RawItem

logger = get_logger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")


class RSSSource(BaseSource[RSSConfig]):
    """RSS/Atom feed source collector.

    Fetches and parses one feed into RawItems.

    Config options:
        feed_url: URL of the RSS/Atom feed
        name: Display name, used as the source identity of every item
        limit: Maximum entries to keep (default: 20)
        max_text_chars: Body length kept per entry
        category_hints: Categories attached to every item
    """

    def __init__(self, config: RSSConfig, http_client: HTTPClient):
        """Initialize RSS source collector.

        Args:
            config: Typed configuration object
            http_client: Shared HTTP client
        """
        super().__init__(config)
        self._http_client = http_client

    async def collect(self) -> list[RawItem]:
        """Collect entries from the feed.

        Entries without a date are stamped with the fetch time.

        Returns:
            List of RawItem from the feed, in feed order

        Raises:
            FeedFetchError: If the feed cannot be fetched or parsed
        """
        feed_url = self._config.feed_url
        source_name = self._config.name
        fetched_at = datetime.now(UTC)

        logger.info(
            "Collecting from RSS feed",
            feed_url=feed_url,
            source_name=source_name,
            limit=self._config.limit,
        )

        try:
            response = await self._http_client.get(
                feed_url, timeout=self._config.request_timeout
            )
            response.raise_for_status()
            content = response.text
        except httpx.HTTPError as e:
            logger.error("RSS feed fetch failed", feed_url=feed_url, error=str(e))
            raise FeedFetchError(feed_url, str(e)) from e

        feed = feedparser.parse(content)

        if feed.bozo and feed.bozo_exception:
            if not feed.entries:
                logger.error(
                    "RSS feed unparseable",
                    feed_url=feed_url,
                    error=str(feed.bozo_exception),
                )
                raise FeedFetchError(feed_url, f"unparseable feed: {feed.bozo_exception}")
            logger.warning(
                "Feed parsing had issues",
                feed_url=feed_url,
                error=str(feed.bozo_exception),
            )

        items: list[RawItem] = []
        for entry in feed.entries[: self._config.limit]:
            item = self._to_raw_item(entry, fetched_at)
            if item:
                items.append(item)

        logger.info(
            "RSS collection complete",
            source_name=source_name,
            collected=len(items),
            total_entries=len(feed.entries),
        )
        return items

    def _to_raw_item(self, entry: Any, fetched_at: datetime) -> RawItem | None:
        """Convert feed entry to RawItem.

        Args:
            entry: feedparser entry object
            fetched_at: Fallback publication time

        Returns:
            RawItem or None if the entry has no title or link
        """
        url = entry.get("link") or entry.get("id")
        if not url:
            logger.warning("RSS entry has no URL", title=entry.get("title", "")[:50])
            return None

        title = (entry.get("title") or "").strip()
        if not title:
            logger.warning("RSS entry has no title", url=url)
            return None

        # Atom feeds carry content as a list; RSS uses summary/description
        content = ""
        if entry.get("content"):
            content = entry.content[0].get("value", "")
        elif entry.get("summary"):
            content = entry.summary
        elif entry.get("description"):
            content = entry.description
        raw_text = self._strip_html(content)[: self._config.max_text_chars]

        item_id = RawItem.make_id(
            entry.get("id"),
            self._config.feed_url,
            title,
            entry.get("published") or entry.get("updated") or "",
        )

        return RawItem(
            id=item_id,
            source_name=self._config.name,
            source_url=url,
            title=title,
            raw_text=raw_text,
            image_url=self._find_media(entry, "image"),
            video_url=self._find_media(entry, "video"),
            published_at=self._parse_date(entry) or fetched_at,
            category_hints=list(self._config.category_hints),
        )

    def _find_media(self, entry: Any, kind: str) -> str | None:
        """First media URL of the given kind ("image" or "video").

        Looks at media:content, enclosures, then media:thumbnail (images only).

        Args:
            entry: feedparser entry
            kind: Media kind

        Returns:
            URL or None
        """
        for media in entry.get("media_content") or []:
            medium = media.get("medium", "")
            mime = media.get("type", "")
            if media.get("url") and (medium == kind or mime.startswith(f"{kind}/")):
                return str(media["url"])

        for enclosure in entry.get("enclosures") or []:
            href = enclosure.get("href") or enclosure.get("url")
            if href and enclosure.get("type", "").startswith(f"{kind}/"):
                return str(href)

        if kind == "image":
            for thumbnail in entry.get("media_thumbnail") or []:
                if thumbnail.get("url"):
                    return str(thumbnail["url"])

        return None

    def _parse_date(self, entry: Any) -> datetime | None:
        """Parse date from feed entry.

        Args:
            entry: feedparser entry

        Returns:
            Datetime or None if parsing failed
        """
        for field in ("published_parsed", "updated_parsed", "created_parsed"):
            parsed = entry.get(field)
            if parsed:
                try:
                    # feedparser returns time.struct_time in UTC
                    return datetime(*parsed[:6], tzinfo=UTC)
                except (TypeError, ValueError):
                    continue

        for field in ("published", "updated", "created"):
            date_str = entry.get(field)
            if date_str:
                try:
                    return parsedate_to_datetime(date_str)
                except (TypeError, ValueError):
                    continue

        return None

    def _strip_html(self, text: str) -> str:
        """Basic HTML tag stripping.

        Args:
            text: Text with potential HTML

        Returns:
            Plain text with entities decoded and whitespace collapsed
        """
        if not text:
            return ""
        clean = _TAG_RE.sub("", text)
        clean = html.unescape(clean)
        return _WHITESPACE_RE.sub(" ", clean).strip()


__all__ = ["RSSSource"]
