"""Article deduplication service.

Keeps one article per distinct story. An article is a duplicate when
its URL (the link of its first source) or its normalized title was
already seen. The first occurrence always wins, so the filter is stable
and applying it twice changes nothing.

Articles without a URL are matched on title only.
"""

from enum import Enum

from pydantic import BaseModel

from easynews.core.logging import get_logger
from easynews.services.collector.base import FinishedArticle
from easynews.services.collector.normalizer import normalize_title, normalize_url

logger = get_logger(__name__)


class DedupReason(str, Enum):
    """Reason for duplicate detection."""

    URL = "url"
    TITLE = "title"


class DedupResult(BaseModel):
    """Result of duplicate detection.

    Attributes:
        is_duplicate: Whether the article is a duplicate
        reason: Which key matched
        key: The matching normalized key
    """

    is_duplicate: bool
    reason: DedupReason | None = None
    key: str | None = None


class ArticleDeduplicator:
    """Order-preserving duplicate filter over seen URLs and titles."""

    def __init__(self) -> None:
        self._seen_urls: set[str] = set()
        self._seen_titles: set[str] = set()

    def check(self, article: FinishedArticle) -> DedupResult:
        """Check an article against everything accepted so far.

        Args:
            article: Article to check

        Returns:
            DedupResult with duplicate status and details
        """
        url_key = normalize_url(article.url)
        if url_key and url_key in self._seen_urls:
            return DedupResult(is_duplicate=True, reason=DedupReason.URL, key=url_key)

        title_key = normalize_title(article.title)
        if title_key and title_key in self._seen_titles:
            return DedupResult(is_duplicate=True, reason=DedupReason.TITLE, key=title_key)

        return DedupResult(is_duplicate=False)

    def mark_as_seen(self, article: FinishedArticle) -> None:
        """Record the article's URL and title keys."""
        url_key = normalize_url(article.url)
        if url_key:
            self._seen_urls.add(url_key)
        title_key = normalize_title(article.title)
        if title_key:
            self._seen_titles.add(title_key)

    def filter(self, articles: list[FinishedArticle]) -> list[FinishedArticle]:
        """Keep the articles that are not duplicates, in input order.

        Args:
            articles: Articles to filter

        Returns:
            Kept articles
        """
        kept: list[FinishedArticle] = []
        for article in articles:
            result = self.check(article)
            if result.is_duplicate:
                logger.debug(
                    "Duplicate article dropped",
                    article_id=article.id,
                    reason=result.reason.value if result.reason else None,
                    title=article.title[:60],
                )
                continue
            self.mark_as_seen(article)
            kept.append(article)
        return kept


def deduplicate_articles(articles: list[FinishedArticle]) -> list[FinishedArticle]:
    """Drop articles repeating an earlier URL or normalized title.

    Args:
        articles: Articles in priority order

    Returns:
        Deduplicated list (first occurrence wins)
    """
    kept = ArticleDeduplicator().filter(articles)
    if len(kept) != len(articles):
        logger.info("Articles deduplicated", before=len(articles), after=len(kept))
    return kept


__all__ = [
    "ArticleDeduplicator",
    "DedupReason",
    "DedupResult",
    "deduplicate_articles",
]
