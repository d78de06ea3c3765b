"""News output building and persistence.

Builds the news.json artifact:

    {
      "generatedAt": "<ISO-8601>",
      "articles": [...],
      "articlesByCategory": {"<category>": [...], ...}
    }

Every category key is present and each bucket holds at most
max_per_category articles, newest first.
"""

import json
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError

from easynews.config import AllocationConfig
from easynews.core.exceptions import InputReadError, OutputWriteError
from easynews.core.logging import get_logger
from easynews.core.types import CATEGORY_KEYS
from easynews.services.collector.base import CamelModel, FinishedArticle
from easynews.services.collector.scorer import rank_articles

logger = get_logger(__name__)

NEWS_FILENAME = "news.json"


class NewsOutput(CamelModel):
    """The persisted news artifact."""

    generated_at: datetime
    articles: list[FinishedArticle] = Field(default_factory=list)
    articles_by_category: dict[str, list[FinishedArticle]] = Field(default_factory=dict)


def select_bucket(articles: list[FinishedArticle], limit: int) -> list[FinishedArticle]:
    """Pick the articles shown for one category.

    Newest first, so the last 24 hours fill the bucket before older news.

    Args:
        articles: Articles of the category
        limit: Maximum bucket size

    Returns:
        At most `limit` articles
    """
    return sorted(articles, key=lambda a: a.published_at, reverse=True)[:limit]


def build_articles_by_category(
    articles: list[FinishedArticle],
    config: AllocationConfig | None = None,
) -> dict[str, list[FinishedArticle]]:
    """Bucket articles by category.

    Args:
        articles: Deduplicated articles
        config: Allocation settings (bucket size)

    Returns:
        Mapping with every category key
    """
    config = config or AllocationConfig()

    return {
        category: select_bucket(
            [a for a in articles if a.category == category and not a.is_sensitive],
            limit=config.max_per_category,
        )
        for category in CATEGORY_KEYS
    }


def build_news_output(
    articles: list[FinishedArticle],
    config: AllocationConfig | None = None,
    now: datetime | None = None,
) -> NewsOutput:
    """Build the news artifact from the final article list.

    Args:
        articles: Deduplicated articles
        config: Allocation settings
        now: Generation time (defaults to now, UTC)

    Returns:
        NewsOutput whose flat list holds exactly the bucketed articles
    """
    now = now or datetime.now(UTC)
    by_category = build_articles_by_category(articles, config)
    flattened = rank_articles([a for bucket in by_category.values() for a in bucket])

    logger.info(
        "News output built",
        articles=len(flattened),
        per_category={k: len(v) for k, v in by_category.items()},
    )

    return NewsOutput(
        generated_at=now,
        articles=flattened,
        articles_by_category=by_category,
    )


def write_json(path: Path | str, payload: dict[str, Any]) -> Path:
    """Write JSON atomically (temporary file, then rename).

    Args:
        path: Target file
        payload: JSON-serialisable data

    Returns:
        The written path

    Raises:
        OutputWriteError: If the file cannot be written
    """
    target = Path(path)
    tmp_path = target.with_name(f"{target.name}.tmp")

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, target)
    except (OSError, TypeError, ValueError) as e:
        logger.error("Output write failed", path=str(target), error=str(e))
        raise OutputWriteError(str(target), str(e)) from e

    logger.info("Output written", path=str(target))
    return target


def write_news_output(output: NewsOutput, path: Path | str) -> Path:
    """Persist the news artifact with camelCase keys.

    Raises:
        OutputWriteError: If the file cannot be written
    """
    return write_json(path, output.model_dump(mode="json", by_alias=True))


def read_json(path: Path | str) -> dict[str, Any]:
    """Read a JSON object from disk.

    Raises:
        InputReadError: If the file is missing, unreadable or not a JSON object
    """
    source = Path(path)
    try:
        with open(source, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InputReadError(str(source), str(e)) from e

    if not isinstance(data, dict):
        raise InputReadError(str(source), "expected a JSON object")
    return data


def read_news_output(path: Path | str) -> NewsOutput:
    """Load a previously written news artifact.

    Raises:
        InputReadError: If the file cannot be read or validated
    """
    data = read_json(path)
    try:
        return NewsOutput.model_validate(data)
    except ValidationError as e:
        raise InputReadError(str(path), f"invalid news artifact: {e}") from e


__all__ = [
    "NEWS_FILENAME",
    "NewsOutput",
    "build_articles_by_category",
    "build_news_output",
    "read_json",
    "read_news_output",
    "select_bucket",
    "write_json",
    "write_news_output",
]
