"""
In-memory storage for crawl results.
"""

from .result_store import ResultStore, AuthorRecord, ArticleRecord

__all__ = ['ResultStore', 'AuthorRecord', 'ArticleRecord']
