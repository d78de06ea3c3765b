"""Visual assets for articles."""

from easynews.services.visual.pexels import CategoryImageFetcher

__all__ = ["CategoryImageFetcher"]
