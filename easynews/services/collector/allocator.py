"""Category quota allocation with backfill.

Every quota category should end up with between min_per_category and
max_per_category articles. Categories that are short after the primary
classification pass are backfilled from the unconsumed fallback clusters
in three ordered passes:

A. clusters whose feed hints name the category
B. clusters whose title the keyword heuristic assigns to the category
C. any remaining cluster

A candidate is marked consumed before it is classified and is never
retried, so each cluster costs at most one LLM call per run. The article
it produces is kept under its real category even when that differs from
the category being filled; only a matching article that survives
deduplication counts toward the quota.

Backfill runs strictly sequentially: later passes and categories read
the consumed set and the article list written by earlier ones.
"""

from dataclasses import dataclass, field
from enum import Enum

from easynews.config import AllocationConfig
from easynews.core.logging import get_logger
from easynews.services.collector.base import FinishedArticle, TopicCluster
from easynews.services.collector.classifier import ClassifierGateway, HeuristicClassifier
from easynews.services.collector.deduplicator import deduplicate_articles
from easynews.services.collector.scorer import by_recency

logger = get_logger(__name__)


class BackfillPass(str, Enum):
    """Backfill passes, in execution order."""

    HINT = "hint"
    HEURISTIC = "heuristic"
    ANY = "any"


@dataclass
class AllocationContext:
    """State shared by the primary pass and every backfill step.

    Attributes:
        articles: All articles produced so far, in production order
        consumed_ids: Clusters already sent to the classifier
    """

    articles: list[FinishedArticle] = field(default_factory=list)
    consumed_ids: set[str] = field(default_factory=set)

    def count(self, category: str) -> int:
        """Number of articles currently in a category."""
        return sum(1 for a in self.articles if a.category == category)

    def contains(self, article: FinishedArticle) -> bool:
        """Whether this exact article object is in the list."""
        return any(a is article for a in self.articles)


@dataclass
class CategoryFill:
    """Outcome of backfilling one category.

    Attributes:
        category: Category that was filled
        needed: Articles the category was short of
        added: Matching articles that were accepted
        attempted: Clusters consumed while filling
    """

    category: str
    needed: int
    added: int = 0
    attempted: int = 0

    @property
    def satisfied(self) -> bool:
        """Whether the shortfall was covered."""
        return self.added >= self.needed


class CategoryAllocator:
    """Backfills short categories from the fallback cluster pool.

    Attributes:
        gateway: Classifier used to turn clusters into articles
        config: Quota settings
        heuristic: Keyword classifier for pass B
    """

    def __init__(
        self,
        gateway: ClassifierGateway,
        config: AllocationConfig | None = None,
        heuristic: HeuristicClassifier | None = None,
    ):
        """Initialize allocator.

        Args:
            gateway: Classifier gateway
            config: Allocation configuration (uses defaults if not provided)
            heuristic: Keyword classifier (default instance if not provided)
        """
        self.gateway = gateway
        self.config = config or AllocationConfig()
        self.heuristic = heuristic or HeuristicClassifier()

    def shortfall(self, context: AllocationContext, category: str) -> int:
        """Articles to generate for a category.

        Args:
            context: Current allocation state
            category: Category to check

        Returns:
            min(missing, available slots), never negative
        """
        current = context.count(category)
        missing = max(0, self.config.min_per_category - current)
        available = max(0, self.config.max_per_category - current)
        return min(missing, available)

    async def allocate(
        self,
        context: AllocationContext,
        fallback_clusters: list[TopicCluster],
    ) -> tuple[AllocationContext, list[CategoryFill]]:
        """Backfill every quota category in configured order.

        Args:
            context: State after the primary pass (updated in place)
            fallback_clusters: Clusters not selected for the primary pass

        Returns:
            The updated context and one CategoryFill per backfilled category
        """
        fills: list[CategoryFill] = []

        for category in self.config.categories:
            needed = self.shortfall(context, category)
            if needed == 0:
                continue

            fill = await self._fill_category(context, category, needed, fallback_clusters)
            fills.append(fill)

            log = logger.info if fill.satisfied else logger.warning
            log(
                "Category backfill finished",
                category=category,
                needed=fill.needed,
                added=fill.added,
                attempted=fill.attempted,
                total=context.count(category),
            )

        return context, fills

    async def _fill_category(
        self,
        context: AllocationContext,
        category: str,
        needed: int,
        fallback_clusters: list[TopicCluster],
    ) -> CategoryFill:
        """Run the three backfill passes for one category.

        Args:
            context: Allocation state (updated in place)
            category: Category being filled
            needed: Matching articles still required
            fallback_clusters: Fallback pool

        Returns:
            CategoryFill for this category
        """
        fill = CategoryFill(category=category, needed=needed)
        candidates = by_recency([c for c in fallback_clusters if c.id not in context.consumed_ids])

        logger.debug(
            "Backfilling category",
            category=category,
            needed=needed,
            candidates=len(candidates),
        )

        for backfill_pass in BackfillPass:
            for cluster in candidates:
                if fill.satisfied:
                    return fill
                if cluster.id in context.consumed_ids:
                    continue
                if not self._is_eligible(cluster, category, backfill_pass):
                    continue

                context.consumed_ids.add(cluster.id)
                fill.attempted += 1

                if await self._try_candidate(context, cluster, category, backfill_pass):
                    fill.added += 1

        return fill

    async def _try_candidate(
        self,
        context: AllocationContext,
        cluster: TopicCluster,
        category: str,
        backfill_pass: BackfillPass,
    ) -> bool:
        """Classify one candidate and record its article.

        Args:
            context: Allocation state (updated in place)
            cluster: Candidate, already marked consumed
            category: Category being filled
            backfill_pass: Pass that selected the candidate

        Returns:
            True if the article counts toward the category's quota
        """
        try:
            article = await self.gateway.produce_article(cluster)
        except Exception as e:
            logger.error(
                "Backfill candidate failed",
                topic_id=cluster.id,
                category=category,
                backfill_pass=backfill_pass.value,
                error=str(e),
            )
            return False

        if article is None:
            return False

        context.articles.append(article)
        context.articles = deduplicate_articles(context.articles)

        if not context.contains(article):
            logger.debug("Backfill article was a duplicate", topic_id=cluster.id)
            return False

        if article.category != category:
            logger.debug(
                "Backfill article landed in another category",
                topic_id=cluster.id,
                target=category,
                actual=article.category,
            )
            return False

        logger.debug(
            "Backfill article accepted",
            topic_id=cluster.id,
            category=category,
            backfill_pass=backfill_pass.value,
        )
        return True

    def _is_eligible(
        self,
        cluster: TopicCluster,
        category: str,
        backfill_pass: BackfillPass,
    ) -> bool:
        if backfill_pass is BackfillPass.HINT:
            return category in cluster.category_hints
        if backfill_pass is BackfillPass.HEURISTIC:
            return self.heuristic.matches(cluster.title, category)
        return True


__all__ = [
    "AllocationContext",
    "BackfillPass",
    "CategoryAllocator",
    "CategoryFill",
]
