"""Daily digests built on top of news.json.

- serious: one simple-language article per serious topic
- lifestyle: one article per lifestyle category
- text_utils: link cleanup and source footers shared with the collector
"""
