"""easy-news: Greek news in simple words.

Collects syndicated feed items, merges items about the same event into
topics and allocates simplified articles into presentation categories.
"""

__version__ = "0.1.0"
