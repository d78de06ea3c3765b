"""News collection services.

This package implements the merge-and-allocate pipeline:
1. Source collectors fetch raw items from feeds
2. Normalizer reduces titles to comparable word sets
3. Clusterer groups items describing the same event
4. Scorer ranks clusters and articles
5. Classifier simplifies and categorizes clusters
6. Allocator backfills categories short of their quota
7. Deduplicator removes repeated stories
"""

from easynews.services.collector.allocator import (
    AllocationContext,
    BackfillPass,
    CategoryAllocator,
    CategoryFill,
)
from easynews.services.collector.base import (
    BaseSource,
    FinishedArticle,
    RawItem,
    SourceRef,
    TopicCluster,
)
from easynews.services.collector.classifier import (
    ClassificationCallError,
    ClassificationOk,
    ClassificationOutcome,
    ClassificationParseError,
    ClassifierGateway,
    HeuristicClassifier,
)
from easynews.services.collector.clusterer import TopicClusterer, cluster_items
from easynews.services.collector.deduplicator import (
    ArticleDeduplicator,
    DedupReason,
    DedupResult,
    deduplicate_articles,
)
from easynews.services.collector.normalizer import normalize_title, normalize_url, title_words
from easynews.services.collector.output import NewsOutput, build_news_output
from easynews.services.collector.scorer import composite_score, rank_articles, rank_clusters

__all__ = [
    # Base DTOs
    "BaseSource",
    "FinishedArticle",
    "RawItem",
    "SourceRef",
    "TopicCluster",
    # Normalizer
    "normalize_title",
    "normalize_url",
    "title_words",
    # Clusterer
    "TopicClusterer",
    "cluster_items",
    # Scorer
    "composite_score",
    "rank_articles",
    "rank_clusters",
    # Classifier
    "ClassificationCallError",
    "ClassificationOk",
    "ClassificationOutcome",
    "ClassificationParseError",
    "ClassifierGateway",
    "HeuristicClassifier",
    # Allocator
    "AllocationContext",
    "BackfillPass",
    "CategoryAllocator",
    "CategoryFill",
    # Deduplicator
    "ArticleDeduplicator",
    "DedupReason",
    "DedupResult",
    "deduplicate_articles",
    # Output
    "NewsOutput",
    "build_news_output",
]
