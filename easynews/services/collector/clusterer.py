"""Topic clustering service.

Groups raw items from multiple feeds into topics using title-word
similarity only, so a batch can be clustered without external calls.

The algorithm is a greedy single pass and depends on input order:
an item joins the most similar open cluster, whose word set then grows
by the item's words. An item may therefore join a cluster that later
drifts away from it; that behaviour is accepted.
"""

from dataclasses import dataclass, field

from easynews.core.logging import get_logger
from easynews.services.collector.base import RawItem, TopicCluster, short_hash
from easynews.services.collector.normalizer import title_words

logger = get_logger(__name__)

DEFAULT_SIMILARITY_THRESHOLD = 0.35


def jaccard_similarity(a: frozenset[str] | set[str], b: frozenset[str] | set[str]) -> float:
    """Intersection size over union size; 0 when either set is empty.

    Args:
        a: First word set
        b: Second word set

    Returns:
        Similarity in [0, 1]
    """
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def cluster_id(member_ids: list[str]) -> str:
    """Hash of the sorted member ids, independent of member order.

    Args:
        member_ids: Ids of the cluster members

    Returns:
        16-char hex id
    """
    return short_hash("|".join(sorted(member_ids)))


def source_identity(item: RawItem) -> str:
    """Lowercased source name, falling back to the item URL."""
    return (item.source_name or item.source_url).strip().lower()


@dataclass
class _OpenCluster:
    """Cluster under construction."""

    words: set[str] = field(default_factory=set)
    members: list[RawItem] = field(default_factory=list)


class TopicClusterer:
    """Clusters raw items by Jaccard similarity of their title words.

    Attributes:
        similarity_threshold: Minimum similarity for an item to join a cluster
    """

    def __init__(self, similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD):
        """Initialize clusterer.

        Args:
            similarity_threshold: Minimum similarity to cluster (0-1)
        """
        self.similarity_threshold = similarity_threshold

    def cluster(self, items: list[RawItem]) -> list[TopicCluster]:
        """Partition items into topic clusters.

        Args:
            items: Raw items in ingestion order

        Returns:
            Frozen clusters in the order they were opened
        """
        if not items:
            return []

        open_clusters: list[_OpenCluster] = []

        for item in items:
            words = title_words(item.title)
            best_index = self._find_best_cluster(open_clusters, words)

            if best_index is None:
                open_clusters.append(_OpenCluster(words=set(words), members=[item]))
            else:
                target = open_clusters[best_index]
                target.members.append(item)
                target.words |= words

        clusters = [self._freeze(c) for c in open_clusters]

        logger.info(
            "Topic clustering complete",
            total_items=len(items),
            cluster_count=len(clusters),
            multi_source_clusters=sum(1 for c in clusters if c.sources_count > 1),
            important_clusters=sum(1 for c in clusters if c.is_important),
        )

        return clusters

    def _find_best_cluster(
        self,
        open_clusters: list[_OpenCluster],
        words: frozenset[str],
    ) -> int | None:
        """Index of the most similar cluster at or above the threshold.

        Ties keep the earliest cluster.

        Args:
            open_clusters: Clusters opened so far
            words: Word set of the incoming item

        Returns:
            Cluster index, or None when a new cluster should be opened
        """
        best_index: int | None = None
        best_score = 0.0

        for index, candidate in enumerate(open_clusters):
            score = jaccard_similarity(words, candidate.words)
            if best_index is None or score > best_score:
                best_index = index
                best_score = score

        if best_index is None or best_score < self.similarity_threshold:
            return None
        return best_index

    def _freeze(self, open_cluster: _OpenCluster) -> TopicCluster:
        """Compute derived fields and build the immutable cluster.

        Args:
            open_cluster: Cluster under construction

        Returns:
            Frozen TopicCluster
        """
        members = open_cluster.members

        hints: list[str] = []
        for member in members:
            for hint in member.category_hints:
                if hint not in hints:
                    hints.append(hint)

        sources_count = len({source_identity(m) for m in members})

        return TopicCluster(
            id=cluster_id([m.id for m in members]),
            title_words=frozenset(open_cluster.words),
            members=list(members),
            image_url=next((m.image_url for m in members if m.image_url), None),
            video_url=next((m.video_url for m in members if m.video_url), None),
            published_at=max(m.published_at for m in members),
            sources_count=sources_count,
            is_important=sources_count >= 2 or bool(hints),
            category_hints=hints,
        )


def cluster_items(
    items: list[RawItem],
    similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
) -> list[TopicCluster]:
    """Convenience function to cluster items.

    Args:
        items: Raw items in ingestion order
        similarity_threshold: Minimum similarity to cluster

    Returns:
        List of topic clusters
    """
    clusterer = TopicClusterer(similarity_threshold=similarity_threshold)
    return clusterer.cluster(items)


__all__ = [
    "DEFAULT_SIMILARITY_THRESHOLD",
    "TopicClusterer",
    "cluster_id",
    "cluster_items",
    "jaccard_similarity",
    "source_identity",
]
