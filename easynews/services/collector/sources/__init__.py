"""Source collectors for news collection.

Feed Sources:
- RSS: Generic RSS/Atom feed collector
"""

from easynews.services.collector.sources.rss import RSSSource

__all__ = ["RSSSource"]
