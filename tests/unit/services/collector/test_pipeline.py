"""Unit tests for the news pipeline.

Feeds are served by a mocked HTTP client and classification by a fake
gateway, so the full flow runs without network or LLM access.
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from easynews.config import AllocationConfig, PipelineConfig, RSSConfig
from easynews.services.collector.allocator import CategoryAllocator
from easynews.services.collector.base import FinishedArticle, TopicCluster
from easynews.services.collector.classifier import (
    ClassificationOk,
    ClassifierGateway,
    build_article,
)
from easynews.services.collector.pipeline import NewsPipeline, PipelineStats

ERT_URL = "https://www.ertnews.gr/feed"
CNN_URL = "https://www.cnn.gr/feed"
SPORT_URL = "https://www.sport24.gr/rss"
BROKEN_URL = "https://broken.example.gr/rss"


def rss(*entries: tuple[str, str, str]) -> str:
    items = "".join(
        f"""
        <item>
            <title>{title}</title>
            <link>{link}</link>
            <guid>{link}</guid>
            <description>&lt;p&gt;{title}. Περισσότερα στο άρθρο.&lt;/p&gt;</description>
            <pubDate>{pub_date}</pubDate>
        </item>"""
        for title, link, pub_date in entries
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
    <rss version="2.0"><channel><title>Feed</title>{items}</channel></rss>"""


FEEDS = {
    ERT_URL: rss(
        ("Σεισμός 5.1 Ρίχτερ στην Κρήτη", "https://www.ertnews.gr/quake", "Mon, 19 Oct 2026 08:00:00 GMT"),
        ("Νέα μέτρα για την ακρίβεια", "https://www.ertnews.gr/prices", "Mon, 19 Oct 2026 07:00:00 GMT"),
    ),
    CNN_URL: rss(
        ("Ισχυρός σεισμός στην Κρήτη, 5.1 Ρίχτερ", "https://www.cnn.gr/quake", "Mon, 19 Oct 2026 08:10:00 GMT"),
    ),
    SPORT_URL: rss(
        ("Ελλάδα–Ισπανία 2-1 στο Eurobasket", "https://www.sport24.gr/basket", "Mon, 19 Oct 2026 06:00:00 GMT"),
    ),
}


def fake_gateway() -> MagicMock:
    """Gateway classifying basketball as sports and the rest as serious."""
    gateway = MagicMock(spec=ClassifierGateway)

    async def produce(cluster: TopicCluster) -> FinishedArticle | None:
        category = "sports" if "Eurobasket" in cluster.title else "serious"
        result = ClassificationOk(
            topic_id=cluster.id,
            category=category,
            simple_title=cluster.title,
            simple_text=f"Απλά λόγια: {cluster.title}",
        )
        return build_article(cluster, result)

    gateway.produce_article = AsyncMock(side_effect=produce)
    return gateway


@pytest.fixture
def feed_http_client(mock_http_client, mock_response):
    """HTTP client serving FEEDS and failing BROKEN_URL."""

    async def get(url: str, **kwargs):
        if url == BROKEN_URL:
            raise httpx.ConnectError("connection refused")
        return mock_response(text_data=FEEDS[url])

    mock_http_client.get.side_effect = get
    return mock_http_client


def make_pipeline(http_client, gateway, min_per_category: int = 1) -> NewsPipeline:
    config = PipelineConfig(
        feeds=[
            RSSConfig(feed_url=ERT_URL, name="ERT News"),
            RSSConfig(feed_url=CNN_URL, name="CNN Greece"),
            RSSConfig(feed_url=SPORT_URL, name="Sport24", category_hints=["sports"]),
            RSSConfig(feed_url=BROKEN_URL, name="Broken"),
        ],
        allocation=AllocationConfig(
            min_per_category=min_per_category,
            max_per_category=6,
            categories=["serious", "sports"],
        ),
    )
    allocator = CategoryAllocator(gateway, config.allocation)
    return NewsPipeline(http_client, gateway, allocator, None, config, concurrency=2)


class TestNewsPipelineRun:
    """End-to-end runs of NewsPipeline.run()."""

    @pytest.mark.asyncio
    async def test_primary_pass_only(self, feed_http_client, now) -> None:
        """Important clusters are classified; quotas met so no backfill."""
        gateway = fake_gateway()
        pipeline = make_pipeline(feed_http_client, gateway)

        output, stats = await pipeline.run(now)

        assert stats.feeds_total == 4
        assert stats.feeds_failed == 1
        assert stats.items_collected == 4
        assert stats.clusters == 3
        assert stats.important_clusters == 2
        assert stats.backfill_attempts == 0

        titles = [a.title for a in output.articles]
        assert titles == ["Σεισμός 5.1 Ρίχτερ στην Κρήτη", "Ελλάδα–Ισπανία 2-1 στο Eurobasket"]

        quake = output.articles[0]
        assert quake.sources_count == 2
        assert quake.source_domains == ["ertnews.gr", "cnn.gr"]
        assert output.articles_by_category["sports"][0].category == "sports"
        assert gateway.produce_article.await_count == 2

    @pytest.mark.asyncio
    async def test_backfill_fills_quota(self, feed_http_client, now) -> None:
        """A short category pulls in the unimportant cluster."""
        gateway = fake_gateway()
        pipeline = make_pipeline(feed_http_client, gateway, min_per_category=2)

        output, stats = await pipeline.run(now)

        assert stats.backfill_attempts == 1
        assert len(output.articles_by_category["serious"]) == 2
        assert "Νέα μέτρα για την ακρίβεια" in [a.title for a in output.articles]

    @pytest.mark.asyncio
    async def test_run_to_file(self, feed_http_client, now, tmp_path: Path) -> None:
        """The artifact is written with camelCase keys."""
        pipeline = make_pipeline(feed_http_client, fake_gateway())

        await pipeline.run_to_file(tmp_path / "news.json", now)

        data = json.loads((tmp_path / "news.json").read_text(encoding="utf-8"))
        assert data["generatedAt"].startswith("2026-10-19")
        assert len(data["articles"]) == 2

    @pytest.mark.asyncio
    async def test_all_feeds_down(self, mock_http_client, now) -> None:
        """With no items the output is empty but complete."""
        mock_http_client.get.side_effect = httpx.ConnectError("down")
        pipeline = make_pipeline(mock_http_client, fake_gateway())

        output, stats = await pipeline.run(now)

        assert output.articles == []
        assert all(bucket == [] for bucket in output.articles_by_category.values())
        assert stats.feeds_failed == 4


class TestClassifyPrimary:
    """Tests for NewsPipeline.classify_primary()."""

    @pytest.mark.asyncio
    async def test_order_and_failures(self, mock_http_client, make_cluster) -> None:
        """Results follow input order; failed clusters are dropped and recorded."""
        clusters = [make_cluster(f"Θέμα {i}") for i in range(4)]
        gateway = fake_gateway()
        original = gateway.produce_article.side_effect

        async def produce(cluster):
            if cluster.title == "Θέμα 2":
                raise RuntimeError("boom")
            return await original(cluster)

        gateway.produce_article.side_effect = produce
        pipeline = make_pipeline(mock_http_client, gateway)
        stats = PipelineStats()

        articles = await pipeline.classify_primary(clusters, stats)

        assert [a.title for a in articles] == ["Θέμα 0", "Θέμα 1", "Θέμα 3"]
        assert len(stats.errors) == 1


class TestSplitPrimary:
    """Tests for NewsPipeline.split_primary()."""

    def test_important_capped(self, mock_http_client, make_cluster) -> None:
        """Only important clusters up to the cap go to the primary pass."""
        pipeline = make_pipeline(mock_http_client, fake_gateway())
        pipeline.config.allocation.max_primary_articles = 1
        important = [
            make_cluster("Α", sources=["ERT News", "CNN Greece"]),
            make_cluster("Β", sources=["ERT News", "CNN Greece"]),
        ]
        plain = make_cluster("Γ")

        primary, fallback = pipeline.split_primary([*important, plain])

        assert primary == [important[0]]
        assert fallback == [important[1], plain]
