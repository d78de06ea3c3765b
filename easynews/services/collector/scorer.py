"""Cluster and article ranking.

Breadth of independent coverage always outranks recency: one extra
source beats any amount of freshness. Ranking compares
(sources_count, published_at) as a tuple, both descending.

composite_score() folds the same order into a single integer for logs
and for consumers of the JSON output.
"""

from datetime import datetime

from easynews.services.collector.base import FinishedArticle, TopicCluster

# One additional source outweighs every realistic millisecond timestamp
SOURCE_WEIGHT = 10**12


def composite_score(sources_count: int, published_at: datetime) -> int:
    """Single-number form of the ranking key.

    Args:
        sources_count: Distinct sources behind the cluster or article
        published_at: Publication time (timezone-aware)

    Returns:
        sources_count * 10**12 + epoch milliseconds
    """
    return sources_count * SOURCE_WEIGHT + int(published_at.timestamp() * 1000)


def cluster_sort_key(cluster: TopicCluster) -> tuple[int, datetime]:
    """Ranking key of a cluster (sort with reverse=True)."""
    return (cluster.sources_count, cluster.published_at)


def article_sort_key(article: FinishedArticle) -> tuple[int, datetime]:
    """Ranking key of an article; its source count is len(sources)."""
    return (article.sources_count, article.published_at)


def cluster_score(cluster: TopicCluster) -> int:
    """Composite score of a cluster."""
    return composite_score(cluster.sources_count, cluster.published_at)


def article_score(article: FinishedArticle) -> int:
    """Composite score of an article."""
    return composite_score(article.sources_count, article.published_at)


def rank_clusters(clusters: list[TopicCluster]) -> list[TopicCluster]:
    """Order clusters for classification: important first, then by score.

    The sort is stable, so equal keys keep their clustering order.

    Args:
        clusters: Frozen clusters

    Returns:
        New list, highest priority first
    """
    return sorted(
        clusters,
        key=lambda c: (c.is_important, *cluster_sort_key(c)),
        reverse=True,
    )


def rank_articles(articles: list[FinishedArticle]) -> list[FinishedArticle]:
    """Order articles by score, highest first (stable).

    Args:
        articles: Finished articles

    Returns:
        New sorted list
    """
    return sorted(articles, key=article_sort_key, reverse=True)


def by_recency(clusters: list[TopicCluster]) -> list[TopicCluster]:
    """Order clusters most recent first (stable)."""
    return sorted(clusters, key=lambda c: c.published_at, reverse=True)


__all__ = [
    "SOURCE_WEIGHT",
    "article_score",
    "article_sort_key",
    "by_recency",
    "cluster_score",
    "cluster_sort_key",
    "composite_score",
    "rank_articles",
    "rank_clusters",
]
