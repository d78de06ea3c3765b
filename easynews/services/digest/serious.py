"""Serious news digest.

Turns the serious articles of news.json into one simple-language article
per serious topic (politics and economy, social issues, world news).

Flow:
1. Keep non-sensitive "serious" articles, ranked by article score
2. One light LLM call assigns every article to a topic
3. Empty topics borrow the best unassigned article
4. One heavy LLM call per topic writes the digest from the main article
   plus up to five related ones
"""

import json
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import Field

from easynews.config import DigestConfig
from easynews.core.logging import get_logger
from easynews.core.types import Category
from easynews.infrastructure.llm import LLMClient, LLMConfig, LLMError, get_llm_client
from easynews.prompts.manager import PromptManager, PromptType, get_prompt_manager
from easynews.services.collector.base import CamelModel, FinishedArticle
from easynews.services.collector.output import NewsOutput, write_json
from easynews.services.collector.response_parser import extract_first_json_array
from easynews.services.collector.scorer import rank_articles
from easynews.services.digest.text_utils import build_sources_footer, clean_simplified_text

logger = get_logger(__name__)

SERIOUS_DIGEST_FILENAME = "serious-digest.json"
CONTENT_TYPE = "agent_serious_digest"

SERIOUS_TOPICS = ["politics_economy", "social", "world"]
OTHER_TOPIC = "other"
ALLOWED_TOPICS = {*SERIOUS_TOPICS, OTHER_TOPIC}

TOPIC_TITLES = {
    "politics_economy": "Πολιτική και οικονομική επικαιρότητα σε απλά λόγια",
    "social": "Ένα σημαντικό κοινωνικό θέμα σε απλά λόγια",
    "world": "Παγκόσμια επικαιρότητα σε απλά λόγια",
}
DEFAULT_TITLE = "Σοβαρή είδηση σε απλά λόγια"

TOPIC_LABELS = {
    "politics_economy": "πολιτική και οικονομική επικαιρότητα",
    "social": "κοινωνικά θέματα",
    "world": "παγκόσμια επικαιρότητα",
}
DEFAULT_LABEL = "σοβαρές ειδήσεις"

# Summary length sent with each article in the topic classification batch
CLASSIFICATION_SUMMARY_CHARS = 700


class SeriousDigestArticle(CamelModel):
    """One digest article for a serious topic."""

    id: str
    content_type: str = CONTENT_TYPE
    topic: str
    topic_label: str
    title: str
    simple_text: str
    main_article_id: str
    related_article_ids: list[str] = Field(default_factory=list)
    created_at: datetime


class SeriousDigestOutput(CamelModel):
    """The persisted serious digest artifact."""

    generated_at: datetime
    articles: list[SeriousDigestArticle] = Field(default_factory=list)


def article_payload(article: FinishedArticle, summary_chars: int | None = None) -> dict[str, Any]:
    """Minimal article data handed to the LLM.

    Args:
        article: Source article
        summary_chars: Optional cap on the summary length

    Returns:
        JSON-serialisable dict
    """
    summary = article.simple_text
    if summary_chars is not None:
        summary = summary[:summary_chars]
    return {
        "id": article.id,
        "title": article.simple_title or article.title,
        "summary": summary,
        "sources": [s.model_dump(by_alias=True) for s in article.sources],
        "publishedAt": article.published_at.isoformat(),
    }


def parse_topic_assignments(response_text: str) -> dict[str, str]:
    """Parse the topic classification answer into an id -> topic map.

    Rows with a missing id or an unknown topic are ignored; an answer that
    is not a JSON array yields an empty map.

    Args:
        response_text: Raw model output

    Returns:
        Mapping of article id to topic
    """
    try:
        rows = extract_first_json_array(response_text)
    except json.JSONDecodeError as e:
        logger.error("Serious topic classification unparseable", error=str(e))
        return {}

    topic_by_id: dict[str, str] = {}
    for row in rows:
        if not isinstance(row, dict):
            continue
        article_id = row.get("id")
        topic = row.get("topic")
        if not isinstance(article_id, str) or not article_id:
            continue
        if not isinstance(topic, str) or topic not in ALLOWED_TOPICS:
            continue
        topic_by_id[article_id] = topic
    return topic_by_id


def group_by_topic(
    articles: list[FinishedArticle],
    topic_by_id: dict[str, str],
) -> dict[str, list[FinishedArticle]]:
    """Group ranked articles by serious topic.

    A topic left empty borrows the best article that no serious topic
    claimed; articles keep their ranking order inside each group.

    Args:
        articles: Ranked serious articles
        topic_by_id: Topic assignments

    Returns:
        Mapping with one list per serious topic
    """
    grouped: dict[str, list[FinishedArticle]] = {topic: [] for topic in SERIOUS_TOPICS}
    unassigned: list[FinishedArticle] = []

    for article in articles:
        topic = topic_by_id.get(article.id, OTHER_TOPIC)
        if topic in grouped:
            grouped[topic].append(article)
        else:
            unassigned.append(article)

    for topic in SERIOUS_TOPICS:
        if not grouped[topic] and unassigned:
            grouped[topic].append(unassigned.pop(0))

    return grouped


class SeriousDigestGenerator:
    """Writes one digest article per serious topic.

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
    ) -> SeriousDigestOutput:
        """Build the serious digest from a news artifact.

        Args:
            news: Previously built news artifact
            now: Generation time (defaults to now, UTC)

        Returns:
            SeriousDigestOutput (empty when there are no serious articles)
        """
        now = now or datetime.now(UTC)
        serious = rank_articles(
            [
                a
                for a in news.articles
                if a.category == Category.SERIOUS.value and not a.is_sensitive
            ]
        )

        if not serious:
            logger.info("No serious articles, writing empty digest")
            return SeriousDigestOutput(generated_at=now)

        topic_by_id = await self.classify_topics(serious)
        grouped = group_by_topic(serious, topic_by_id)

        digest_articles: list[SeriousDigestArticle] = []
        for topic in SERIOUS_TOPICS:
            items = grouped[topic]
            if not items:
                logger.info("No articles for serious topic", topic=topic)
                continue

            digest = await self.write_topic_digest(
                topic, items[: self.config.serious_context_items], now
            )
            if digest:
                digest_articles.append(digest)

        logger.info(
            "Serious digest generated",
            serious_articles=len(serious),
            topics=[a.topic for a in digest_articles],
        )
        return SeriousDigestOutput(generated_at=now, articles=digest_articles)

    async def classify_topics(self, articles: list[FinishedArticle]) -> dict[str, str]:
        """Assign every serious article to a topic with one LLM call.

        Args:
            articles: Serious articles

        Returns:
            Mapping of article id to topic (empty on failure)
        """
        items = [article_payload(a, CLASSIFICATION_SUMMARY_CHARS) for a in articles]
        for item in items:
            # Sources and dates do not help topic assignment
            item.pop("sources")
            item.pop("publishedAt")

        messages = self.prompt_manager.build_messages(
            PromptType.SERIOUS_TOPICS,
            topics=[*SERIOUS_TOPICS, OTHER_TOPIC],
            items_json=json.dumps(items, ensure_ascii=False, indent=2),
        )
        settings = self.prompt_manager.get_llm_settings(PromptType.SERIOUS_TOPICS)

        try:
            response = await self.llm_client.complete(
                config=LLMConfig.for_task(settings.temperature),
                messages=messages,
            )
        except LLMError as e:
            logger.error("Serious topic classification failed", error=str(e))
            return {}

        topic_by_id = parse_topic_assignments(response.content)

        counts = {topic: 0 for topic in ALLOWED_TOPICS}
        for topic in topic_by_id.values():
            counts[topic] += 1
        logger.info("Serious topics assigned", counts=counts)

        return topic_by_id

    async def write_topic_digest(
        self,
        topic: str,
        items: list[FinishedArticle],
        now: datetime,
    ) -> SeriousDigestArticle | None:
        """Write the digest article of one topic.

        Args:
            topic: Serious topic
            items: Ranked articles of the topic; the first is the main story
            now: Generation time

        Returns:
            SeriousDigestArticle, or None when the LLM call fails
        """
        main_article, related = items[0], items[1:]
        label = TOPIC_LABELS.get(topic, DEFAULT_LABEL)

        summary_chars = self.config.context_summary_chars
        messages = self.prompt_manager.build_messages(
            PromptType.SERIOUS_DIGEST,
            today=now.date().isoformat(),
            label=label,
            main_json=json.dumps(article_payload(main_article), ensure_ascii=False, indent=2),
            others_json=json.dumps(
                [article_payload(a, summary_chars) for a in related],
                ensure_ascii=False,
                indent=2,
            ),
        )
        settings = self.prompt_manager.get_llm_settings(PromptType.SERIOUS_DIGEST)

        logger.info(
            "Writing serious digest",
            topic=topic,
            main_article=main_article.id,
            related=len(related),
        )

        try:
            response = await self.llm_client.complete(
                config=LLMConfig.for_task(
                    settings.temperature, heavy=True, web_search=settings.web_search
                ),
                messages=messages,
            )
        except LLMError as e:
            logger.error("Serious digest generation failed", topic=topic, error=str(e))
            return None

        text = clean_simplified_text(response.content)
        if not text:
            logger.warning("Serious digest came back empty", topic=topic)
            return None

        return SeriousDigestArticle(
            id=str(uuid.uuid4()),
            topic=topic,
            topic_label=label,
            title=TOPIC_TITLES.get(topic, DEFAULT_TITLE),
            simple_text=text + build_sources_footer(main_article.source_domains),
            main_article_id=main_article.id,
            related_article_ids=[a.id for a in related],
            created_at=now,
        )


def write_serious_digest(output: SeriousDigestOutput, path: Path | str) -> Path:
    """Persist the serious digest with camelCase keys.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    return write_json(path, output.model_dump(mode="json", by_alias=True))


__all__ = [
    "SERIOUS_DIGEST_FILENAME",
    "SERIOUS_TOPICS",
    "SeriousDigestArticle",
    "SeriousDigestGenerator",
    "SeriousDigestOutput",
    "article_payload",
    "group_by_topic",
    "parse_topic_assignments",
    "write_serious_digest",
]
