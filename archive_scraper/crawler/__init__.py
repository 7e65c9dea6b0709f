"""
Crawler core components.
"""

from .url_frontier import URLFrontier, CrawlTask, PageKind
from .url_resolver import make_absolute_url
from .fetcher import WebFetcher, FetchResult
from .parser import PageExtractor, PageStructureError
from .scheduler import CrawlerScheduler, CrawlError, scrape

__all__ = [
    'URLFrontier', 'CrawlTask', 'PageKind',
    'make_absolute_url',
    'WebFetcher', 'FetchResult',
    'PageExtractor', 'PageStructureError',
    'CrawlerScheduler', 'CrawlError', 'scrape'
]
