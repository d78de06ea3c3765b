"""Text helpers shared by the article builder and the digest generators."""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from urllib.parse import urlparse

_MARKDOWN_LINK_RE = re.compile(r"\[([^\]]+)\]\((https?://[^)]+)\)")
_BARE_URL_RE = re.compile(r"https?://\S+")
_TRAILING_SPACE_RE = re.compile(r"[ \t]+\n")

# Genitive month names, as in "19 Οκτωβρίου 2026"
GREEK_MONTHS = (
    "Ιανουαρίου",
    "Φεβρουαρίου",
    "Μαρτίου",
    "Απριλίου",
    "Μαΐου",
    "Ιουνίου",
    "Ιουλίου",
    "Αυγούστου",
    "Σεπτεμβρίου",
    "Οκτωβρίου",
    "Νοεμβρίου",
    "Δεκεμβρίου",
)


def clean_simplified_text(text: str | None) -> str:
    """Strip links from LLM output.

    Markdown links are reduced to their text, bare URLs are removed and
    spaces before line breaks are trimmed.

    Args:
        text: Raw model output

    Returns:
        Cleaned text
    """
    cleaned = _MARKDOWN_LINK_RE.sub(r"\1", text or "")
    cleaned = _BARE_URL_RE.sub("", cleaned)
    cleaned = _TRAILING_SPACE_RE.sub("\n", cleaned)
    return cleaned.strip()


def extract_source_domains(urls: list[str] | None) -> list[str]:
    """Distinct hostnames of the given URLs, without a leading "www.".

    Unparseable URLs are skipped; first-seen order is kept.

    Args:
        urls: Source URLs

    Returns:
        List of domains
    """
    if not urls:
        return []

    domains: list[str] = []
    for url in urls:
        try:
            hostname = urlparse(url).hostname or ""
        except ValueError:
            continue
        domain = re.sub(r"^www\.", "", hostname)
        if domain and domain not in domains:
            domains.append(domain)
    return domains


def build_sources_footer(domains: list[str] | None) -> str:
    """Footer naming the sources of an article.

    Args:
        domains: Source domains (or names)

    Returns:
        "\\n\\nΠηγή: d" for one source, "\\n\\nΠηγές: a, b" for several, "" for none
    """
    if not domains:
        return ""
    if len(domains) == 1:
        return f"\n\nΠηγή: {domains[0]}"
    return f"\n\nΠηγές: {', '.join(domains)}"


def format_greek_date(value: date) -> str:
    """Long Greek date, e.g. "19 Οκτωβρίου 2026"."""
    return f"{value.day} {GREEK_MONTHS[value.month - 1]} {value.year}"


@dataclass(frozen=True)
class WebSearchDateContext:
    """Reference days for prompts that ask about recent events."""

    today: date
    yesterday: date
    tomorrow: date
    today_label: str
    yesterday_label: str
    tomorrow_label: str


def web_search_date_context(base: datetime | date | None = None) -> WebSearchDateContext:
    """Today, yesterday and tomorrow with Greek labels.

    Args:
        base: Reference moment (defaults to now)

    Returns:
        WebSearchDateContext
    """
    if base is None:
        base = datetime.now()
    today = base.date() if isinstance(base, datetime) else base
    yesterday = today - timedelta(days=1)
    tomorrow = today + timedelta(days=1)

    return WebSearchDateContext(
        today=today,
        yesterday=yesterday,
        tomorrow=tomorrow,
        today_label=format_greek_date(today),
        yesterday_label=format_greek_date(yesterday),
        tomorrow_label=format_greek_date(tomorrow),
    )


__all__ = [
    "GREEK_MONTHS",
    "WebSearchDateContext",
    "build_sources_footer",
    "clean_simplified_text",
    "extract_source_domains",
    "format_greek_date",
    "web_search_date_context",
]
