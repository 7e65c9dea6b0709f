"""
Archive Scraper

Batch crawler for paginated author/article archives.
"""

__version__ = "1.0.0"
__description__ = "Collects author profiles and their articles from a paginated archive site"
