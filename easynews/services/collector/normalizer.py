"""Title normalization.

Turns titles into comparable keys:
1. Significant word sets for topic clustering
2. Canonical title strings for deduplication
3. Canonical URLs for deduplication

All functions are pure and deterministic.
"""

import re

# Any character that is neither a word character nor whitespace
_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")

# Tokens of this length or shorter never count as significant
MIN_WORD_LENGTH = 3

# Dropped even when it is a standalone word ("LIVE: ...", "... live")
LIVE_TOKEN = "live"

STOPWORDS: frozenset[str] = frozenset(
    {
        # Greek articles, prepositions and conjunctions
        "στην",
        "στον",
        "στις",
        "στους",
        "στης",
        "στου",
        "στων",
        "αυτό",
        "αυτή",
        "αυτά",
        "μετά",
        "πριν",
        "όπως",
        "κατά",
        "προς",
        "μέσα",
        "χωρίς",
        "μέχρι",
        "αλλά",
        "όταν",
        "τους",
        "ενός",
        "μιας",
        "είναι",
        "έχει",
        "πολύ",
        "πάνω",
        "κάτω",
        "δίπλα",
        "ακόμη",
        "ακόμα",
        # Greek generic terms
        "ειδήσεις",
        "είδηση",
        "σήμερα",
        "χθες",
        "αύριο",
        "τώρα",
        "βίντεο",
        "φωτογραφίες",
        # English
        "news",
        "today",
        "with",
        "from",
        "that",
        "this",
        "after",
        "before",
        "over",
        "into",
        "about",
        "says",
        "will",
        "have",
        "what",
        "when",
        "video",
        "photos",
        "update",
        "breaking",
    }
)


def _clean(title: str) -> str:
    text = title.lower()
    text = _PUNCTUATION_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def title_words(title: str) -> frozenset[str]:
    """Reduce a title to its set of significant words.

    Lowercases, replaces punctuation and quotation marks with spaces,
    drops the token "live", then keeps tokens longer than three
    characters that are not stopwords.

    Args:
        title: Raw title

    Returns:
        Frozen set of significant words (empty for an empty title)

    Example:
        >>> sorted(title_words("Ισχυρός σεισμός στην Κρήτη, 5.1 Ρίχτερ"))
        ['ισχυρός', 'κρήτη', 'ρίχτερ', 'σεισμός']
    """
    if not title:
        return frozenset()

    return frozenset(
        token
        for token in _clean(title).split(" ")
        if token
        and token != LIVE_TOKEN
        and len(token) > MIN_WORD_LENGTH
        and token not in STOPWORDS
    )


def normalize_title(title: str) -> str:
    """Canonical title key used to detect duplicate articles.

    Args:
        title: Article title

    Returns:
        Lowercased title with punctuation stripped and whitespace collapsed
    """
    if not title:
        return ""
    return _clean(title)


def normalize_url(url: str | None) -> str:
    """Canonical URL key used to detect duplicate articles.

    Args:
        url: Article URL

    Returns:
        Lowercased, trimmed URL ("" when missing)
    """
    if not url:
        return ""
    return url.strip().lower()


__all__ = [
    "LIVE_TOKEN",
    "MIN_WORD_LENGTH",
    "STOPWORDS",
    "normalize_title",
    "normalize_url",
    "title_words",
]
