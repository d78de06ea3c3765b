"""Pytest configuration and fixtures.

This module provides common fixtures used across all tests.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from easynews.core.logging import setup_logging
from easynews.infrastructure.http_client import HTTPClient
from easynews.infrastructure.llm import LLMClient, LLMResponse
from easynews.services.collector.base import (
    FinishedArticle,
    RawItem,
    SourceRef,
    TopicCluster,
)
from easynews.services.collector.clusterer import cluster_id
from easynews.services.collector.normalizer import title_words

# Setup logging for tests
setup_logging()

BASE_TIME = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for deterministic tests."""
    return BASE_TIME


@pytest.fixture
def make_item() -> Callable[..., RawItem]:
    """Factory for RawItem."""
    counter = {"n": 0}

    def _make(
        title: str,
        source_name: str = "ERT News",
        minutes_ago: int = 0,
        item_id: str | None = None,
        source_url: str | None = None,
        raw_text: str = "",
        image_url: str | None = None,
        category_hints: list[str] | None = None,
    ) -> RawItem:
        counter["n"] += 1
        n = counter["n"]
        return RawItem(
            id=item_id or f"item{n:04d}",
            source_name=source_name,
            source_url=source_url or f"https://example.gr/{source_name.lower().replace(' ', '-')}/{n}",
            title=title,
            raw_text=raw_text,
            image_url=image_url,
            published_at=BASE_TIME - timedelta(minutes=minutes_ago),
            category_hints=category_hints or [],
        )

    return _make


@pytest.fixture
def make_cluster(make_item: Callable[..., RawItem]) -> Callable[..., TopicCluster]:
    """Factory for TopicCluster built from titles or items."""

    def _make(
        title: str = "Σεισμός στην Κρήτη",
        sources: list[str] | None = None,
        minutes_ago: int = 0,
        category_hints: list[str] | None = None,
        members: list[RawItem] | None = None,
    ) -> TopicCluster:
        if members is None:
            members = [
                make_item(
                    title,
                    source_name=name,
                    minutes_ago=minutes_ago,
                    category_hints=category_hints,
                )
                for name in (sources or ["ERT News"])
            ]
        names = {m.source_name.lower() for m in members}
        hints = list(dict.fromkeys(h for m in members for h in m.category_hints))
        return TopicCluster(
            id=cluster_id([m.id for m in members]),
            title_words=frozenset().union(*(title_words(m.title) for m in members)),
            members=members,
            published_at=max(m.published_at for m in members),
            sources_count=len(names),
            is_important=len(names) >= 2 or bool(hints),
            category_hints=hints,
        )

    return _make


@pytest.fixture
def make_article() -> Callable[..., FinishedArticle]:
    """Factory for FinishedArticle."""
    counter = {"n": 0}

    def _make(
        title: str | None = None,
        category: str = "serious",
        sources_count: int = 1,
        minutes_ago: int = 0,
        url: str | None = None,
        article_id: str | None = None,
        simple_text: str = "Απλό κείμενο.",
        is_sensitive: bool = False,
        image_url: str | None = None,
    ) -> FinishedArticle:
        counter["n"] += 1
        n = counter["n"]
        first_url = url or f"https://www.example.gr/article/{n}"
        sources = [SourceRef(title=title or f"Είδηση {n}", url=first_url, source_name="ERT News")]
        for extra in range(1, sources_count):
            sources.append(
                SourceRef(
                    title=title or f"Είδηση {n}",
                    url=f"https://other{extra}.gr/article/{n}",
                    source_name=f"Source {extra}",
                )
            )
        return FinishedArticle(
            id=article_id or f"art{n:04d}",
            title=title or f"Είδηση αριθμός {n}",
            simple_title=title or f"Είδηση αριθμός {n}",
            simple_text=simple_text,
            category=category,
            sources=sources,
            source_domains=["example.gr"],
            image_url=image_url,
            published_at=BASE_TIME - timedelta(minutes=minutes_ago),
            is_sensitive=is_sensitive,
        )

    return _make


@pytest.fixture
def mock_http_client() -> HTTPClient:
    """Create a mock HTTP client."""
    client = MagicMock(spec=HTTPClient)
    client.get = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def mock_response() -> Callable[..., MagicMock]:
    """Factory for mock HTTP responses."""

    def _make(json_data=None, text_data=None, status_code=200) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        response.raise_for_status = MagicMock()
        if json_data is not None:
            response.json.return_value = json_data
        if text_data is not None:
            response.text = text_data
        return response

    return _make


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client; set complete.return_value or side_effect per test."""
    client = MagicMock(spec=LLMClient)
    client.complete = AsyncMock(
        return_value=LLMResponse(content="", model="openai/gpt-4o-mini", usage={})
    )
    return client


def llm_response(content: str) -> LLMResponse:
    """Build an LLMResponse with the given content."""
    return LLMResponse(content=content, model="openai/gpt-4o-mini", usage={})


@pytest.fixture
def make_llm_response() -> Callable[[str], LLMResponse]:
    """Factory for LLMResponse."""
    return llm_response
