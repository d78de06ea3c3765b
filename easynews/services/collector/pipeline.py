"""News merge-and-allocate pipeline.

The pipeline:
1. Collect raw items from every configured feed (failed feeds are skipped)
2. Cluster items into topics by title similarity
3. Rank clusters (important first, then sources count and recency)
4. Classify the important clusters concurrently (primary pass)
5. Deduplicate
6. Backfill short categories from the remaining clusters
7. Deduplicate again
8. Attach category images and build the news artifact

Usage:
    pipeline = NewsPipeline(http_client, gateway, allocator, image_fetcher, config)
    output, stats = await pipeline.run()
"""

import asyncio
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from easynews.config import PipelineConfig, RSSConfig
from easynews.core.exceptions import FeedFetchError
from easynews.core.logging import get_logger
from easynews.infrastructure.http_client import HTTPClient
from easynews.services.collector.allocator import AllocationContext, CategoryAllocator
from easynews.services.collector.base import FinishedArticle, RawItem, TopicCluster
from easynews.services.collector.classifier import ClassifierGateway
from easynews.services.collector.clusterer import TopicClusterer
from easynews.services.collector.deduplicator import deduplicate_articles
from easynews.services.collector.output import (
    NewsOutput,
    build_news_output,
    write_news_output,
)
from easynews.services.collector.scorer import cluster_score, rank_clusters
from easynews.services.collector.sources.rss import RSSSource
from easynews.services.visual.pexels import CategoryImageFetcher

logger = get_logger(__name__)


class PipelineStats(BaseModel):
    """Statistics from one pipeline run.

    Attributes:
        feeds_total: Configured feeds
        feeds_failed: Feeds skipped after a fetch error
        items_collected: Raw items from all feeds
        clusters: Topic clusters
        important_clusters: Clusters covered by 2+ sources or hinted
        primary_articles: Articles from the primary pass (after dedup)
        backfill_attempts: Clusters consumed by backfill
        final_articles: Articles after the last deduplication
        errors: Error messages of skipped feeds and failed classifications
    """

    feeds_total: int = 0
    feeds_failed: int = 0
    items_collected: int = 0
    clusters: int = 0
    important_clusters: int = 0
    primary_articles: int = 0
    backfill_attempts: int = 0
    final_articles: int = 0
    errors: list[str] = Field(default_factory=list)


class NewsPipeline:
    """Unified news pipeline service.

    Collaborators are injected so tests can replace the network and the LLM.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        gateway: ClassifierGateway,
        allocator: CategoryAllocator,
        image_fetcher: CategoryImageFetcher | None,
        config: PipelineConfig,
        concurrency: int = 4,
    ):
        """Initialize pipeline.

        Args:
            http_client: HTTP client for feed requests
            gateway: Classifier/summarizer gateway
            allocator: Category quota allocator
            image_fetcher: Stock image lookup (None disables images)
            config: Pipeline configuration
            concurrency: Parallel classifier calls in the primary pass
        """
        self.http_client = http_client
        self.gateway = gateway
        self.allocator = allocator
        self.image_fetcher = image_fetcher
        self.config = config
        self.concurrency = concurrency
        self.clusterer = TopicClusterer(config.clustering.similarity_threshold)

    async def run(self, now: datetime | None = None) -> tuple[NewsOutput, PipelineStats]:
        """Run the full pipeline.

        Args:
            now: Generation time (defaults to now, UTC)

        Returns:
            Tuple of (news artifact, run statistics)
        """
        stats = PipelineStats(feeds_total=len(self.config.feeds))
        logger.info("Starting news pipeline", feeds=stats.feeds_total)

        # Step 1: Collect raw items
        items = await self.collect_items(stats)
        stats.items_collected = len(items)

        # Step 2-3: Cluster and rank
        clusters = self.clusterer.cluster(items)
        stats.clusters = len(clusters)
        ranked = rank_clusters(clusters)

        primary, fallback = self.split_primary(ranked)
        stats.important_clusters = sum(1 for c in clusters if c.is_important)

        # Step 4-5: Primary pass
        context = AllocationContext(consumed_ids={c.id for c in primary})
        context.articles = deduplicate_articles(await self.classify_primary(primary, stats))
        stats.primary_articles = len(context.articles)

        # Step 6-7: Backfill and final dedup
        consumed_before = len(context.consumed_ids)
        context, _ = await self.allocator.allocate(context, fallback)
        stats.backfill_attempts = len(context.consumed_ids) - consumed_before
        articles = deduplicate_articles(context.articles)

        # Step 8: Images and output
        if self.image_fetcher is not None:
            articles = await self.image_fetcher.attach_images(articles)

        output = build_news_output(articles, self.config.allocation, now)
        stats.final_articles = len(output.articles)

        logger.info(
            "News pipeline complete",
            items=stats.items_collected,
            clusters=stats.clusters,
            primary_articles=stats.primary_articles,
            backfill_attempts=stats.backfill_attempts,
            final_articles=stats.final_articles,
            errors=len(stats.errors),
        )
        return output, stats

    async def run_to_file(
        self,
        path: Path | str,
        now: datetime | None = None,
    ) -> tuple[NewsOutput, PipelineStats]:
        """Run the pipeline and persist news.json.

        Raises:
            OutputWriteError: If the artifact cannot be written
        """
        output, stats = await self.run(now or datetime.now(UTC))
        write_news_output(output, path)
        return output, stats

    async def collect_items(self, stats: PipelineStats | None = None) -> list[RawItem]:
        """Collect items from all feeds, skipping feeds that fail.

        Args:
            stats: Stats to update

        Returns:
            Items in feed order, then entry order
        """
        stats = stats or PipelineStats()
        results = await asyncio.gather(
            *(self._collect_feed(feed, stats) for feed in self.config.feeds)
        )
        items = [item for feed_items in results for item in feed_items]
        logger.info("Feed collection complete", items=len(items), failed=stats.feeds_failed)
        return items

    async def _collect_feed(self, feed: RSSConfig, stats: PipelineStats) -> list[RawItem]:
        source = RSSSource(feed, self.http_client)
        try:
            return await source.collect()
        except FeedFetchError as e:
            logger.error("Skipping feed", feed=feed.name, feed_url=feed.feed_url, error=str(e))
            stats.feeds_failed += 1
            stats.errors.append(f"{feed.name}: {e}")
            return []

    def split_primary(
        self,
        ranked: list[TopicCluster],
    ) -> tuple[list[TopicCluster], list[TopicCluster]]:
        """Split ranked clusters into the primary batch and the fallback pool.

        Args:
            ranked: Clusters from rank_clusters()

        Returns:
            (important clusters up to max_primary_articles, all other clusters)
        """
        limit = self.config.allocation.max_primary_articles
        primary = [c for c in ranked if c.is_important][:limit]
        primary_ids = {c.id for c in primary}
        fallback = [c for c in ranked if c.id not in primary_ids]
        return primary, fallback

    async def classify_primary(
        self,
        clusters: list[TopicCluster],
        stats: PipelineStats | None = None,
    ) -> list[FinishedArticle]:
        """Classify clusters concurrently with bounded parallelism.

        Results follow the input order, not completion order.

        Args:
            clusters: Ranked primary clusters
            stats: Stats to update

        Returns:
            Produced articles (failed and sensitive clusters omitted)
        """
        stats = stats or PipelineStats()
        semaphore = asyncio.Semaphore(self.concurrency)

        async def classify(cluster: TopicCluster) -> FinishedArticle | None:
            async with semaphore:
                logger.debug(
                    "Classifying cluster",
                    topic_id=cluster.id,
                    score=cluster_score(cluster),
                    sources=cluster.sources_count,
                )
                try:
                    return await self.gateway.produce_article(cluster)
                except Exception as e:
                    logger.error("Primary classification failed", topic_id=cluster.id, error=str(e))
                    stats.errors.append(f"{cluster.id}: {e}")
                    return None

        results = await asyncio.gather(*(classify(c) for c in clusters))
        return [article for article in results if article is not None]


__all__ = ["NewsPipeline", "PipelineStats"]
