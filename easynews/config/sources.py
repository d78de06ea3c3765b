"""Source collector configuration models.

Defines default settings and configuration for feed sources.
"""

from pydantic import BaseModel, Field, field_validator

from easynews.config.validators import normalize_string_list, validate_category_list


class RSSConfig(BaseModel):
    """RSS/Atom feed source configuration.

    Attributes:
        feed_url: URL of the RSS/Atom feed
        name: Display name for the source (used as the source identity)
        limit: Maximum entries to fetch
        request_timeout: HTTP request timeout in seconds
        max_text_chars: Entry text is cut to this length before it reaches the LLM
        category_hints: Categories every entry of this feed is known to belong to
    """

    feed_url: str
    name: str = Field(default="RSS Feed")
    limit: int = Field(default=20, ge=1, le=200)
    request_timeout: float = Field(default=15.0, ge=1.0, le=60.0)
    max_text_chars: int = Field(default=2000, ge=100, le=20000)
    category_hints: list[str] = Field(default_factory=list)

    @field_validator("category_hints", mode="before")
    @classmethod
    def normalize_hints(cls, v: list[str]) -> list[str]:
        """Lowercase hints and reject unknown categories."""
        return validate_category_list(normalize_string_list(v), field_name="category_hints")


__all__ = ["RSSConfig"]
