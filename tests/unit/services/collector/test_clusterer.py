"""Unit tests for topic clusterer."""

from easynews.services.collector.clusterer import (
    TopicClusterer,
    cluster_id,
    cluster_items,
    jaccard_similarity,
    source_identity,
)

WORDS_14 = " ".join(f"word{i:02d}" for i in range(1, 15))


class TestJaccardSimilarity:
    """Tests for jaccard_similarity()."""

    def test_identical(self) -> None:
        """Identical sets have similarity 1."""
        assert jaccard_similarity({"σεισμός", "κρήτη"}, {"σεισμός", "κρήτη"}) == 1.0

    def test_partial(self) -> None:
        """Three shared words out of four."""
        a = frozenset({"σεισμός", "ρίχτερ", "κρήτη"})
        b = frozenset({"ισχυρός", "σεισμός", "ρίχτερ", "κρήτη"})
        assert jaccard_similarity(a, b) == 0.75

    def test_empty_set(self) -> None:
        """Empty sets never match."""
        assert jaccard_similarity(set(), {"κρήτη"}) == 0.0
        assert jaccard_similarity(set(), set()) == 0.0


class TestClusterId:
    """Tests for cluster_id()."""

    def test_order_independent(self) -> None:
        """Id depends on the member set, not member order."""
        assert cluster_id(["b", "a", "c"]) == cluster_id(["c", "a", "b"])

    def test_length(self) -> None:
        """Ids are 16 hex chars."""
        value = cluster_id(["a"])
        assert len(value) == 16
        int(value, 16)

    def test_different_members(self) -> None:
        """Different member sets give different ids."""
        assert cluster_id(["a"]) != cluster_id(["a", "b"])


class TestTopicClusterer:
    """Tests for TopicClusterer class."""

    def test_cluster_empty_list(self) -> None:
        """Empty list returns empty clusters."""
        assert TopicClusterer().cluster([]) == []

    def test_same_event_merged(self, make_item) -> None:
        """Two feeds covering the earthquake form one important cluster."""
        items = [
            make_item("Σεισμός 5.1 Ρίχτερ στην Κρήτη", source_name="ERT News", minutes_ago=30),
            make_item("Ισχυρός σεισμός στην Κρήτη, 5.1 Ρίχτερ", source_name="CNN Greece"),
            make_item("Ελλάδα–Ισπανία 2-1 στο Eurobasket", source_name="Sport24"),
        ]

        clusters = TopicClusterer().cluster(items)

        assert len(clusters) == 2
        quake, basket = clusters
        assert [m.id for m in quake.members] == [items[0].id, items[1].id]
        assert quake.sources_count == 2
        assert quake.is_important is True
        assert quake.title == "Σεισμός 5.1 Ρίχτερ στην Κρήτη"
        assert quake.published_at == items[1].published_at
        assert quake.title_words == {"ισχυρός", "σεισμός", "ρίχτερ", "κρήτη"}
        assert basket.sources_count == 1
        assert basket.is_important is False

    def test_threshold_is_inclusive(self, make_item) -> None:
        """Similarity exactly at the threshold joins the cluster."""
        shared = " ".join(f"word{i:02d}" for i in range(8, 15))
        new = " ".join(f"other{i:02d}" for i in range(1, 7))
        items = [make_item(WORDS_14), make_item(f"{shared} {new}")]

        # 7 shared words, 20 in the union: 0.35
        clusters = TopicClusterer(similarity_threshold=0.35).cluster(items)

        assert len(clusters) == 1

    def test_below_threshold_opens_new_cluster(self, make_item) -> None:
        """Similarity just below the threshold starts a new cluster."""
        shared = " ".join(f"word{i:02d}" for i in range(8, 15))
        new = " ".join(f"other{i:02d}" for i in range(1, 8))
        items = [make_item(WORDS_14), make_item(f"{shared} {new}")]

        # 7 shared words, 21 in the union
        clusters = TopicClusterer(similarity_threshold=0.35).cluster(items)

        assert len(clusters) == 2

    def test_tie_keeps_first_cluster(self, make_item) -> None:
        """Equal similarity to two clusters picks the earlier one."""
        first = make_item("aaaa bbbb")
        second = make_item("cccc dddd")
        third = make_item("aaaa cccc")

        clusters = TopicClusterer(similarity_threshold=0.3).cluster([first, second, third])

        assert len(clusters) == 2
        assert [m.id for m in clusters[0].members] == [first.id, third.id]

    def test_cluster_words_grow(self, make_item) -> None:
        """A joined item's words are added to the cluster."""
        first = make_item("aaaa bbbb")
        second = make_item("bbbb cccc")

        clusters = TopicClusterer(similarity_threshold=0.3).cluster([first, second])

        assert clusters[0].title_words == {"aaaa", "bbbb", "cccc"}

    def test_empty_titles_never_merge(self, make_item) -> None:
        """Items without significant words stay alone."""
        items = [make_item("LIVE"), make_item("LIVE")]
        assert len(TopicClusterer().cluster(items)) == 2

    def test_every_item_in_exactly_one_cluster(self, make_item) -> None:
        """Clusters partition the input."""
        items = [
            make_item("Σεισμός 5.1 Ρίχτερ στην Κρήτη"),
            make_item("Ισχυρός σεισμός στην Κρήτη"),
            make_item("Ελλάδα–Ισπανία 2-1 στο Eurobasket"),
            make_item("Νίκη της Ελλάδας στο Eurobasket απέναντι στην Ισπανία"),
            make_item("Νέα μέτρα για την ακρίβεια"),
        ]

        clusters = TopicClusterer().cluster(items)

        member_ids = [m.id for c in clusters for m in c.members]
        assert sorted(member_ids) == sorted(i.id for i in items)

    def test_same_source_counts_once(self, make_item) -> None:
        """Two items from one feed make a single-source cluster."""
        items = [
            make_item("Σεισμός στην Κρήτη", source_name="ERT News"),
            make_item("Σεισμός στην Κρήτη τώρα", source_name="ert news"),
        ]

        clusters = TopicClusterer().cluster(items)

        assert len(clusters) == 1
        assert clusters[0].sources_count == 1
        assert clusters[0].is_important is False

    def test_hinted_cluster_is_important(self, make_item) -> None:
        """A category hint makes a single-source cluster important."""
        items = [make_item("Ολυμπιακός νίκη στο Καραϊσκάκη", category_hints=["sports"])]

        clusters = TopicClusterer().cluster(items)

        assert clusters[0].is_important is True
        assert clusters[0].category_hints == ["sports"]

    def test_first_member_image(self, make_item) -> None:
        """The cluster takes the first image found among its members."""
        items = [
            make_item("Σεισμός στην Κρήτη"),
            make_item("Σεισμός στην Κρήτη", source_name="CNN Greece", image_url="https://img/1.jpg"),
            make_item("Σεισμός στην Κρήτη", source_name="Skai", image_url="https://img/2.jpg"),
        ]

        clusters = TopicClusterer().cluster(items)

        assert clusters[0].image_url == "https://img/1.jpg"
        assert clusters[0].sources_count == 3

    def test_cluster_id_matches_members(self, make_item) -> None:
        """Cluster id is the hash of its member ids."""
        items = [
            make_item("Σεισμός στην Κρήτη", item_id="b"),
            make_item("Σεισμός στην Κρήτη", item_id="a", source_name="CNN Greece"),
        ]

        clusters = cluster_items(items)

        assert clusters[0].id == cluster_id(["a", "b"])


class TestSourceIdentity:
    """Tests for source_identity()."""

    def test_lowercased_name(self, make_item) -> None:
        """Source names compare case-insensitively."""
        assert source_identity(make_item("x", source_name=" ERT News ")) == "ert news"
