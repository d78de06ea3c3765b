"""Base interfaces and DTOs for news collection.

This module defines the core data structures and abstract interfaces
used throughout the merge-and-allocate pipeline:

RawItem -> TopicCluster -> FinishedArticle
"""

import hashlib
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from easynews.core.types import DEFAULT_CATEGORY, normalize_category

# Length of the hex ids derived from SHA-256
ID_LENGTH = 16


def short_hash(value: str) -> str:
    """Hash a string into a short stable hex id.

    Args:
        value: Input string

    Returns:
        First ID_LENGTH hex characters of the SHA-256 digest
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:ID_LENGTH]


def _ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys (``model_dump(by_alias=True)``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RawItem(CamelModel):
    """Raw content item from a single feed entry.

    Attributes:
        id: Stable 16-char hash of the entry guid (or feed url|title|published)
        source_name: Display name of the feed
        source_url: Link of the entry
        title: Original title
        raw_text: Plain text body (HTML stripped, truncated)
        image_url: Entry image, if any
        video_url: Entry video, if any
        published_at: Publication time (timezone-aware)
        category_hints: Categories the feed declares for its entries
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    source_name: str
    source_url: str
    title: str
    raw_text: str = ""
    image_url: str | None = None
    video_url: str | None = None
    published_at: datetime
    category_hints: list[str] = Field(default_factory=list)

    @field_validator("published_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        return _ensure_aware(v)

    @staticmethod
    def make_id(
        guid: str | None,
        feed_url: str,
        title: str,
        published: str,
    ) -> str:
        """Derive the item id from the feed guid or a composite key.

        Args:
            guid: Feed-provided unique identifier (entry id / guid)
            feed_url: URL of the feed the entry came from
            title: Entry title
            published: Entry publication date as given by the feed

        Returns:
            16-char hex id
        """
        if guid:
            return short_hash(guid)
        return short_hash(f"{feed_url}|{title}|{published}")


class TopicCluster(CamelModel):
    """Group of raw items believed to describe the same event.

    Produced by the clusterer and frozen afterwards.

    Attributes:
        id: Hash of the sorted member ids (independent of member order)
        title_words: Union of the members' significant title words
        members: Items in the order they joined the cluster
        image_url: First member image
        video_url: First member video
        published_at: Latest member publication time
        sources_count: Distinct source identities among members
        is_important: Covered by two or more sources, or carries a category hint
        category_hints: Ordered union of member hints
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title_words: frozenset[str]
    members: list[RawItem]
    image_url: str | None = None
    video_url: str | None = None
    published_at: datetime
    sources_count: int
    is_important: bool
    category_hints: list[str] = Field(default_factory=list)

    @property
    def title(self) -> str:
        """Title of the first member."""
        return self.members[0].title if self.members else ""

    @property
    def source_names(self) -> list[str]:
        """Distinct member source names, in member order."""
        names: list[str] = []
        for member in self.members:
            if member.source_name not in names:
                names.append(member.source_name)
        return names

    def combined_text(self, max_chars: int | None = None) -> str:
        """Join member bodies for the classifier prompt.

        Args:
            max_chars: Optional cap on the returned length

        Returns:
            Non-empty member texts separated by blank lines
        """
        text = "\n\n".join(m.raw_text for m in self.members if m.raw_text)
        if max_chars is not None:
            return text[:max_chars]
        return text


class SourceRef(CamelModel):
    """One item behind an article."""

    title: str
    url: str
    source_name: str | None = None


class FinishedArticle(CamelModel):
    """Classified and simplified article built from one topic cluster.

    Attributes:
        id: Cluster id
        title: Original title of the cluster
        simple_title: Simplified title
        simple_text: Simplified body (links stripped)
        category: Category from the closed enumeration
        category_reason: Short explanation of the category choice
        sources: Items behind the article
        source_domains: Distinct hostnames of the sources
        image_url: Article image (cluster image or category stock photo)
        video_url: Article video
        published_at: Cluster publication time
        is_sensitive: Content flagged unsuitable for publication
    """

    id: str
    title: str
    simple_title: str
    simple_text: str
    category: str = DEFAULT_CATEGORY
    category_reason: str = ""
    sources: list[SourceRef] = Field(default_factory=list)
    source_domains: list[str] = Field(default_factory=list)
    image_url: str | None = None
    video_url: str | None = None
    published_at: datetime
    is_sensitive: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: object) -> str:
        """Map unknown categories onto the default."""
        return normalize_category(v)

    @field_validator("published_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        return _ensure_aware(v)

    @property
    def url(self) -> str | None:
        """Article URL: the link of its first source."""
        return self.sources[0].url if self.sources else None

    @property
    def sources_count(self) -> int:
        """Number of sources, used by the article score."""
        return len(self.sources)


ConfigT = TypeVar("ConfigT", bound=BaseModel)


class BaseSource(ABC, Generic[ConfigT]):
    """Abstract base class for feed collectors.

    Attributes:
        config: Typed source configuration
    """

    def __init__(self, config: ConfigT):
        """Initialize source collector.

        Args:
            config: Typed configuration object
        """
        self._config = config

    @property
    def config(self) -> ConfigT:
        """Source configuration."""
        return self._config

    @abstractmethod
    async def collect(self) -> list[RawItem]:
        """Collect raw items from the source.

        Returns:
            List of raw items

        Raises:
            FeedFetchError: If the source cannot be fetched or parsed
        """
        pass


__all__ = [
    "ID_LENGTH",
    "BaseSource",
    "CamelModel",
    "FinishedArticle",
    "RawItem",
    "SourceRef",
    "TopicCluster",
    "short_hash",
]
