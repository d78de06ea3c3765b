"""Unit tests for article deduplication."""

import random

import pytest

from easynews.services.collector.base import FinishedArticle
from easynews.services.collector.deduplicator import (
    ArticleDeduplicator,
    DedupReason,
    deduplicate_articles,
)


class TestArticleDeduplicator:
    """Tests for ArticleDeduplicator."""

    def test_url_duplicate(self, make_article) -> None:
        """Same URL in a different case is a duplicate."""
        first = make_article(title="Σεισμός στην Κρήτη", url="https://ertnews.gr/quake")
        second = make_article(title="Άλλος τίτλος", url="https://ERTNEWS.gr/Quake ")

        dedup = ArticleDeduplicator()
        dedup.mark_as_seen(first)
        result = dedup.check(second)

        assert result.is_duplicate is True
        assert result.reason == DedupReason.URL

    def test_title_duplicate(self, make_article) -> None:
        """Same normalized title with different URLs is a duplicate."""
        first = make_article(title="Σεισμός στην Κρήτη!")
        second = make_article(title="σεισμός στην κρήτη")

        dedup = ArticleDeduplicator()
        dedup.mark_as_seen(first)
        result = dedup.check(second)

        assert result.is_duplicate is True
        assert result.reason == DedupReason.TITLE
        assert result.key == "σεισμός στην κρήτη"

    def test_unique(self, make_article) -> None:
        """Different URL and title pass."""
        dedup = ArticleDeduplicator()
        dedup.mark_as_seen(make_article(title="Σεισμός στην Κρήτη"))

        assert dedup.check(make_article(title="Eurobasket τελικός")).is_duplicate is False

    def test_article_without_url_matched_on_title(self, make_article) -> None:
        """Articles with no sources dedupe by title only."""
        first = make_article(title="Νέα μέτρα").model_copy(update={"sources": []})
        second = make_article(title="Νέα Μέτρα").model_copy(update={"sources": []})
        third = make_article(title="Άλλο θέμα").model_copy(update={"sources": []})

        kept = ArticleDeduplicator().filter([first, second, third])

        assert kept == [first, third]


class TestDeduplicateArticles:
    """Tests for deduplicate_articles()."""

    def test_first_occurrence_wins(self, make_article) -> None:
        """Order is kept and the earlier article survives."""
        a = make_article(title="Σεισμός στην Κρήτη", url="https://a.gr/1")
        b = make_article(title="Eurobasket", url="https://a.gr/1")
        c = make_article(title="Ακρίβεια")

        assert deduplicate_articles([a, b, c]) == [a, c]

    def test_idempotent(self, make_article) -> None:
        """Applying the filter twice changes nothing."""
        articles: list[FinishedArticle] = [
            make_article(title="Σεισμός στην Κρήτη", url="https://a.gr/1"),
            make_article(title="σεισμός στην Κρήτη", url="https://b.gr/2"),
            make_article(title="Eurobasket", url="https://A.gr/1"),
            make_article(title="Ακρίβεια"),
        ]

        once = deduplicate_articles(articles)

        assert deduplicate_articles(once) == once
        assert len(once) == 2

    @pytest.mark.parametrize("seed", range(50))
    def test_idempotent_on_generated_lists(self, make_article, seed: int) -> None:
        """Random lists with overlapping URLs and titles are stable under re-filtering."""
        rng = random.Random(seed)
        titles = [
            "Σεισμός στην Κρήτη",
            "σεισμός στην ΚΡΗΤΗ!",
            "Eurobasket",
            " eurobasket ",
            "Ακρίβεια",
        ]
        urls = [None, "https://a.gr/1", "https://A.gr/1 ", "https://b.gr/2", "https://B.GR/2"]
        articles = [
            make_article(title=rng.choice(titles), url=rng.choice(urls))
            for _ in range(rng.randint(0, 12))
        ]

        once = deduplicate_articles(articles)

        assert deduplicate_articles(once) == once
        assert [a for a in articles if a in once] == once
        seen = ArticleDeduplicator()
        for article in once:
            seen.mark_as_seen(article)
        assert all(seen.check(a).is_duplicate for a in articles if a not in once)

    def test_empty(self) -> None:
        """Empty input gives empty output."""
        assert deduplicate_articles([]) == []
