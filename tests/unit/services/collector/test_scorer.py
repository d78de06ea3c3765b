"""Unit tests for cluster and article ranking."""

from datetime import UTC, datetime

from easynews.services.collector.scorer import (
    SOURCE_WEIGHT,
    article_score,
    by_recency,
    cluster_score,
    composite_score,
    rank_articles,
    rank_clusters,
)


class TestCompositeScore:
    """Tests for composite_score()."""

    def test_formula(self) -> None:
        """sources * 10**12 + epoch milliseconds."""
        published = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)
        expected = 2 * SOURCE_WEIGHT + int(published.timestamp() * 1000)
        assert composite_score(2, published) == expected

    def test_one_source_beats_recency(self) -> None:
        """An older story with one more source outranks a fresher one."""
        old = datetime(2020, 1, 1, tzinfo=UTC)
        new = datetime(2026, 10, 19, tzinfo=UTC)
        assert composite_score(3, old) > composite_score(2, new)

    def test_cluster_and_article_helpers(self, make_cluster, make_article) -> None:
        """Helpers use the source count of each object."""
        cluster = make_cluster(sources=["ERT News", "CNN Greece"])
        article = make_article(sources_count=3)
        assert cluster_score(cluster) == composite_score(2, cluster.published_at)
        assert article_score(article) == composite_score(3, article.published_at)


class TestRankClusters:
    """Tests for rank_clusters()."""

    def test_sources_before_recency(self, make_cluster) -> None:
        """More sources first, then the newest."""
        single_new = make_cluster("Νέα μέτρα για την ακρίβεια", minutes_ago=0)
        double_old = make_cluster(
            "Σεισμός στην Κρήτη", sources=["ERT News", "CNN Greece"], minutes_ago=300
        )
        double_new = make_cluster(
            "Eurobasket τελικός", sources=["ERT News", "Sport24"], minutes_ago=10
        )

        ranked = rank_clusters([single_new, double_old, double_new])

        assert ranked == [double_new, double_old, single_new]

    def test_important_first(self, make_cluster) -> None:
        """A hinted single-source cluster precedes a plain one."""
        plain = make_cluster("Νέα μέτρα για την ακρίβεια", minutes_ago=0)
        hinted = make_cluster("Ολυμπιακός νίκη", minutes_ago=60, category_hints=["sports"])

        assert rank_clusters([plain, hinted]) == [hinted, plain]

    def test_stable_for_equal_keys(self, make_cluster) -> None:
        """Equal keys keep the input order."""
        first = make_cluster("Πρώτη είδηση", minutes_ago=5)
        second = make_cluster("Δεύτερη είδηση", minutes_ago=5)

        assert rank_clusters([first, second]) == [first, second]

    def test_does_not_mutate_input(self, make_cluster) -> None:
        """A new list is returned."""
        clusters = [make_cluster("Α είδηση", minutes_ago=10), make_cluster("Β είδηση")]
        rank_clusters(clusters)
        assert clusters[0].title == "Α είδηση"


class TestRankArticles:
    """Tests for rank_articles() and by_recency()."""

    def test_rank_articles(self, make_article) -> None:
        """Articles rank by sources count, then recency."""
        a = make_article(sources_count=1, minutes_ago=0)
        b = make_article(sources_count=2, minutes_ago=120)
        c = make_article(sources_count=2, minutes_ago=10)

        assert rank_articles([a, b, c]) == [c, b, a]

    def test_by_recency(self, make_cluster) -> None:
        """Newest cluster first regardless of sources."""
        old = make_cluster("Σεισμός", sources=["ERT News", "CNN Greece"], minutes_ago=100)
        new = make_cluster("Eurobasket", minutes_ago=1)

        assert by_recency([old, new]) == [new, old]
