"""Services layer for easy-news.

Services implement business logic and orchestrate data operations.
Organized by feature:
- collector: Feed collection, topic clustering, classification and allocation
- visual: Category stock photography
- digest: Serious and lifestyle digest articles
"""
