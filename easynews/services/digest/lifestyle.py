"""Lifestyle digest.

Writes one simple-language article per lifestyle category (sports,
screen, culture, fun) from the best articles of news.json. A category
without articles gets a general article from the fallback prompt.
"""

import json
import uuid
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from pydantic import Field

from easynews.config import DigestConfig
from easynews.core.logging import get_logger
from easynews.core.types import LIFESTYLE_CATEGORIES
from easynews.infrastructure.llm import LLMClient, LLMConfig, LLMError, get_llm_client
from easynews.prompts.manager import PromptManager, PromptType, get_prompt_manager
from easynews.services.collector.base import CamelModel, FinishedArticle
from easynews.services.collector.output import NewsOutput, write_json
from easynews.services.collector.scorer import rank_articles
from easynews.services.digest.text_utils import (
    build_sources_footer,
    clean_simplified_text,
    extract_source_domains,
    web_search_date_context,
)

logger = get_logger(__name__)

LIFESTYLE_FILENAME = "lifestyle.json"
CONTENT_TYPE = "agent_lifestyle"

# Footer source of articles written without feed items
WEB_SEARCH_SOURCE = "web.search"

CATEGORY_TITLES = {
    "sports": "Τα αθλητικά της ημέρας με απλά λόγια",
    "screen": "Τηλεόραση και σινεμά σε απλά λόγια",
    "culture": "Πολιτισμός, θέατρο και μουσική σε απλά λόγια",
    "fun": "Ιδέες για βόλτες και διασκέδαση",
}
DEFAULT_TITLE = "Ενημέρωση σε απλά λόγια"


class LifestyleArticle(CamelModel):
    """One lifestyle digest article."""

    id: str
    content_type: str = CONTENT_TYPE
    category: str
    date: date
    title: str
    simple_text: str
    sources: list[str] = Field(default_factory=list)
    created_at: datetime


class LifestyleDigestOutput(CamelModel):
    """The persisted lifestyle artifact."""

    generated_at: datetime
    articles: list[LifestyleArticle] = Field(default_factory=list)


def group_lifestyle_articles(
    articles: list[FinishedArticle],
    limit: int = 10,
) -> dict[str, list[FinishedArticle]]:
    """Best non-sensitive articles of every lifestyle category.

    Args:
        articles: All news articles
        limit: Articles kept per category

    Returns:
        Mapping with every lifestyle category, each list ranked by score
    """
    return {
        category: rank_articles(
            [a for a in articles if a.category == category and not a.is_sensitive]
        )[:limit]
        for category in LIFESTYLE_CATEGORIES
    }


def resolve_sources(items: list[FinishedArticle]) -> list[str]:
    """Sources named in the footer of a lifestyle article.

    Domains of the item URLs; source names when no URL yields a domain;
    "web.search" for articles written without items.

    Args:
        items: Articles behind the lifestyle article

    Returns:
        List of source labels
    """
    if not items:
        return [WEB_SEARCH_SOURCE]

    urls = [s.url for item in items for s in item.sources]
    domains = extract_source_domains(urls)
    if domains:
        return domains

    names: list[str] = []
    for item in items:
        for source in item.sources:
            if source.source_name and source.source_name not in names:
                names.append(source.source_name)
    return names


def _item_payload(article: FinishedArticle) -> dict[str, Any]:
    first = article.sources[0] if article.sources else None
    return {
        "id": article.id,
        "title": article.simple_title or article.title,
        "summary": article.simple_text,
        "sourceName": first.source_name if first else None,
        "sourceUrl": article.url,
        "sourcesCount": article.sources_count,
        "publishedAt": article.published_at.isoformat(),
    }


class LifestyleDigestGenerator:
    """Writes one article per lifestyle category.

    Attributes:
        llm_client: LLM client
        prompt_manager: Prompt template manager
        config: Digest settings
    """

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        prompt_manager: PromptManager | None = None,
        config: DigestConfig | None = None,
    ):
        """Initialize generator.

        Args:
            llm_client: LLMClient instance (default: singleton)
            prompt_manager: PromptManager instance (default: singleton)
            config: Digest configuration (uses defaults if not provided)
        """
        self.llm_client = llm_client or get_llm_client()
        self.prompt_manager = prompt_manager or get_prompt_manager()
        self.config = config or DigestConfig()

    async def generate(
        self,
        news: NewsOutput,
        now: datetime | None = None,
    ) -> LifestyleDigestOutput:
        """Build the lifestyle digest from a news artifact.

        Args:
            news: Previously built news artifact
            now: Generation time (defaults to now, UTC)

        Returns:
            LifestyleDigestOutput with at most one article per category
        """
        now = now or datetime.now(UTC)
        grouped = group_lifestyle_articles(
            news.articles, limit=self.config.lifestyle_items_per_category
        )

        articles: list[LifestyleArticle] = []
        for category in LIFESTYLE_CATEGORIES:
            article = await self.write_category_article(category, grouped[category], now)
            if article:
                articles.append(article)

        logger.info(
            "Lifestyle digest generated",
            categories=[a.category for a in articles],
        )
        return LifestyleDigestOutput(generated_at=now, articles=articles)

    async def write_category_article(
        self,
        category: str,
        items: list[FinishedArticle],
        now: datetime,
    ) -> LifestyleArticle | None:
        """Write the lifestyle article of one category.

        Args:
            category: Lifestyle category
            items: Ranked articles; the first is the main item
            now: Generation time

        Returns:
            LifestyleArticle, or None when the LLM call fails
        """
        today = now.date()

        if items:
            main_item, *context_items = items
            payload = {
                "date": today.isoformat(),
                "category": category,
                "mainItem": _item_payload(main_item),
                "contextItems": [_item_payload(a) for a in context_items],
            }
            prompt_type = PromptType.LIFESTYLE_DIGEST
            messages = self.prompt_manager.build_messages(
                prompt_type,
                category=category,
                today=today.isoformat(),
                payload_json=json.dumps(payload, ensure_ascii=False, indent=2),
            )
            logger.info("Writing lifestyle article", category=category, items=len(items))
        else:
            date_ctx = web_search_date_context(today)
            prompt_type = PromptType.LIFESTYLE_FALLBACK
            messages = self.prompt_manager.build_messages(
                prompt_type,
                category=category,
                today_label=date_ctx.today_label,
                yesterday_label=date_ctx.yesterday_label,
                tomorrow_label=date_ctx.tomorrow_label,
            )
            logger.info("Writing fallback lifestyle article", category=category)

        settings = self.prompt_manager.get_llm_settings(prompt_type)

        try:
            response = await self.llm_client.complete(
                config=LLMConfig.for_task(
                    settings.temperature, heavy=True, web_search=settings.web_search
                ),
                messages=messages,
            )
        except LLMError as e:
            logger.error("Lifestyle article generation failed", category=category, error=str(e))
            return None

        text = clean_simplified_text(response.content)
        if not text:
            logger.warning("Lifestyle article came back empty", category=category)
            return None

        sources = resolve_sources(items)
        return LifestyleArticle(
            id=str(uuid.uuid4()),
            category=category,
            date=today,
            title=CATEGORY_TITLES.get(category, DEFAULT_TITLE),
            simple_text=text + build_sources_footer(sources),
            sources=sources,
            created_at=now,
        )


def write_lifestyle_digest(output: LifestyleDigestOutput, path: Path | str) -> Path:
    """Persist the lifestyle digest with camelCase keys.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    return write_json(path, output.model_dump(mode="json", by_alias=True))


__all__ = [
    "LIFESTYLE_FILENAME",
    "LifestyleArticle",
    "LifestyleDigestGenerator",
    "LifestyleDigestOutput",
    "group_lifestyle_articles",
    "resolve_sources",
    "write_lifestyle_digest",
]
