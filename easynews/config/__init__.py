"""Pipeline configuration models."""

from easynews.config.pipeline import (
    AllocationConfig,
    ClusteringConfig,
    DigestConfig,
    PipelineConfig,
)
from easynews.config.sources import RSSConfig

__all__ = [
    # Pipeline
    "AllocationConfig",
    "ClusteringConfig",
    "DigestConfig",
    "PipelineConfig",
    # Sources
    "RSSConfig",
]
