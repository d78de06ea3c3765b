"""Pipeline configuration models.

All fields have defaults, so the pipeline can run without any YAML
configuration apart from the feed list.
"""

from pydantic import BaseModel, Field, field_validator, model_validator

from easynews.config.sources import RSSConfig
from easynews.config.validators import normalize_string_list, validate_category_list
from easynews.core.types import CATEGORY_KEYS, DEFAULT_CATEGORY


class ClusteringConfig(BaseModel):
    """Title-similarity clustering configuration.

    Attributes:
        similarity_threshold: Minimum Jaccard similarity for an item to join a cluster
    """

    similarity_threshold: float = Field(default=0.35, gt=0.0, le=1.0)


class AllocationConfig(BaseModel):
    """Category quota configuration.

    Attributes:
        min_per_category: Quota each category should reach through backfill
        max_per_category: Hard upper bound of a category bucket
        categories: Categories under quota, processed in this order
        max_primary_articles: Important clusters classified in the primary pass
    """

    min_per_category: int = Field(default=2, ge=0, le=50)
    max_per_category: int = Field(default=6, ge=1, le=50)
    categories: list[str] = Field(
        default_factory=lambda: [c for c in CATEGORY_KEYS if c != DEFAULT_CATEGORY]
    )
    max_primary_articles: int = Field(default=30, ge=0, le=500)

    @field_validator("categories", mode="before")
    @classmethod
    def validate_categories(cls, v: list[str]) -> list[str]:
        """Normalize and validate quota categories."""
        return validate_category_list(normalize_string_list(v))

    @model_validator(mode="after")
    def check_bounds(self) -> "AllocationConfig":
        """Validate that min_per_category <= max_per_category."""
        if self.min_per_category > self.max_per_category:
            raise ValueError(
                f"min_per_category ({self.min_per_category}) must not exceed "
                f"max_per_category ({self.max_per_category})"
            )
        return self


class DigestConfig(BaseModel):
    """Digest generation configuration.

    Attributes:
        serious_context_items: Articles (main included) given as context per serious topic
        lifestyle_items_per_category: Articles fed to a lifestyle article per category
        context_summary_chars: Summary length sent to the LLM per context article
    """

    serious_context_items: int = Field(default=6, ge=1, le=20)
    lifestyle_items_per_category: int = Field(default=10, ge=1, le=50)
    context_summary_chars: int = Field(default=800, ge=100, le=5000)


class PipelineConfig(BaseModel):
    """Complete pipeline configuration.

    Attributes:
        feeds: Feed sources to collect from
        clustering: Clustering settings
        allocation: Category quota settings
        digest: Digest generation settings
    """

    feeds: list[RSSConfig] = Field(default_factory=list)
    clustering: ClusteringConfig = Field(default_factory=ClusteringConfig)
    allocation: AllocationConfig = Field(default_factory=AllocationConfig)
    digest: DigestConfig = Field(default_factory=DigestConfig)


__all__ = [
    "AllocationConfig",
    "ClusteringConfig",
    "DigestConfig",
    "PipelineConfig",
]
