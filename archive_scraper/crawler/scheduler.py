"""
Crawler scheduler that drives the batch fetch loop and routes pages to handlers.
"""

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence, Set

from .fetcher import FetchResult, WebFetcher
from .parser import PageExtractor, PageStructureError, parse_article_date
from .policies import CrawlPolicy, pending_articles_for
from .url_frontier import CrawlTask, PageKind, URLFrontier
from .url_resolver import make_absolute_url
from ..storage.result_store import ArticleRecord, AuthorRecord, ResultStore
from ..utils.config import ScraperConfig
from ..utils.logger import get_crawler_logger
from ..utils.monitoring import CrawlMetrics


PAGE_NUMBER_PREFIX = 'articles-page='


class CrawlError(Exception):
    """Raised when the crawl cannot start."""
    pass


class Fetcher(Protocol):
    async def fetch_all(self, urls: Sequence[str],
                        timeout: Optional[float] = None) -> List[FetchResult]:
        ...


def page_url(articles_url: str, page: int) -> str:
    """URL of a numbered articles page, derived from the first page's URL."""
    return f"{make_absolute_url(PAGE_NUMBER_PREFIX, articles_url)}{page}.html"


class CrawlerScheduler:
    """
    Runs the crawl as a sequence of batches.

    Each batch takes up to `concurrency` tasks off the frontier, fetches them
    concurrently and then handles the responses one by one in drain order.
    Tasks discovered while handling a batch are only picked up by later batches.
    """

    def __init__(self, config: ScraperConfig, fetcher: Fetcher,
                 extractor: Optional[PageExtractor] = None,
                 metrics: Optional[CrawlMetrics] = None,
                 sleep=asyncio.sleep):
        self.config = config
        self.fetcher = fetcher
        self.extractor = extractor or PageExtractor()
        self.metrics = metrics or CrawlMetrics()
        self.policy = CrawlPolicy.from_config(config)
        self._sleep = sleep

        self.logger = get_crawler_logger(__name__)
        self.frontier = URLFrontier()
        self.results = ResultStore()

        # Authors whose pagination has already been expanded
        self._paginated_authors: Set[int] = set()

    async def run(self) -> ResultStore:
        """Seed the frontier from the directory page and crawl until it empties."""
        await self.seed()
        await self.run_queue()
        self._log_final_stats()
        return self.results

    async def seed(self):
        """Enqueue one author page task per author listed on the directory page."""
        directory_url = self.config.directory_url
        [result] = await self.fetcher.fetch_all([directory_url], self.config.fetch_timeout)
        if not result.ok:
            raise CrawlError(f"Could not fetch directory page {directory_url}: {result.error}")

        links = self.extractor.extract_directory_page(result.content, directory_url)
        added_count = self.frontier.enqueue_many(
            CrawlTask.author_page(make_absolute_url(link, directory_url)) for link in links
        )
        self.logger.info(f"Added {added_count} author pages to frontier")

    async def run_queue(self):
        """Process batches until the frontier is empty."""
        while not self.frontier.is_empty():
            await self.run_batch()

    async def run_batch(self) -> List[CrawlTask]:
        """
        Drain, fetch and handle one batch.

        Returns:
            The tasks that made up the batch
        """
        batch = self.frontier.dequeue_up_to(self.config.concurrency)
        self.metrics.inc('batches')

        if self.config.wait:
            await self._sleep(self.config.wait)

        results = await self.fetcher.fetch_all(
            [task.url for task in batch], self.config.fetch_timeout
        )

        for task, result in zip(batch, results):
            if not result.ok:
                self.metrics.inc('fetch_failures')
                self.logger.warning(f"Dropping {task.kind.value} {task.url}: {result.error}")
                continue

            self.metrics.inc('pages_fetched')
            self.handle(task, result.content)

        self.metrics.set_frontier_size(len(self.frontier))
        self.logger.debug(
            f"Batch of {len(batch)} done, {len(self.frontier)} tasks queued, "
            f"{len(self.results)} authors collected"
        )
        return batch

    def handle(self, task: CrawlTask, body: str):
        """Route a fetched page to its handler according to the task kind."""
        try:
            if task.kind is PageKind.AUTHOR_PAGE:
                self.scrape_author_page(body, task.url)
            elif task.kind is PageKind.ARTICLES_PAGE:
                self.scrape_articles_page(body, task.url, task.author_id)
        except PageStructureError as e:
            if self.config.on_structure_error != 'skip':
                raise
            self.metrics.inc('structure_errors')
            self.logger.error(f"Skipping {task.kind.value} {task.url}: {e}")

    def scrape_author_page(self, body: str, url: str) -> int:
        """
        Create the author record and queue the author's articles index.

        Returns:
            The new author's id
        """
        page = self.extractor.extract_author_page(body, url)
        articles_url = make_absolute_url(page.articles_link, url)

        author_id = self.results.add_author(AuthorRecord(
            name=page.name,
            bio=page.bio,
            twitter=page.twitter
        ))
        self.metrics.inc('authors_found')

        if self.policy.cap.allows_articles:
            self.frontier.enqueue(CrawlTask.articles_page(articles_url, author_id))

        self.logger.bind(author_id=author_id).debug(f"Author {page.name!r} found at {url}")
        return author_id

    def scrape_articles_page(self, body: str, url: str, author_id: int):
        """Collect the author's articles on this page and queue further pages."""
        cap = self.policy.cap
        log = self.logger.bind(author_id=author_id, url=url)

        if cap.is_reached(self.results.article_count(author_id)):
            log.debug("Cap already reached, skipping page")
            return

        page = self.extractor.extract_articles_page(body, url)

        for listing in page.records:
            try:
                article_date = parse_article_date(listing.date_text)
            except ValueError as e:
                raise PageStructureError(str(e), url) from e

            if not self.policy.window.contains(article_date):
                self.metrics.inc('articles_filtered')
                continue

            count = self.results.append_article(author_id, ArticleRecord(
                title=listing.title,
                url=make_absolute_url(listing.link, url),
                date=article_date
            ))
            self.metrics.inc('articles_collected')

            if cap.is_reached(count):
                pruned = self.frontier.remove_where(pending_articles_for(author_id))
                self.metrics.inc('tasks_pruned', pruned)
                log.debug(f"Cap of {cap.limit} reached, pruned {pruned} pending pages")
                return

        self._discover_pagination(page.pagination, url, author_id)

    def _discover_pagination(self, pagination, url: str, author_id: int):
        # Only the first page expands pagination, and only once per author
        if pagination is None or pagination.current_page != 1:
            return
        if author_id in self._paginated_authors:
            return
        self._paginated_authors.add(author_id)

        added_count = self.frontier.enqueue_many(
            CrawlTask.articles_page(page_url(url, page), author_id)
            for page in range(2, pagination.last_page + 1)
        )
        self.logger.bind(author_id=author_id).debug(f"Queued {added_count} more articles pages")

    def _log_final_stats(self):
        """Log final crawl statistics."""
        summary = self.metrics.summary()
        self.logger.info("=== CRAWL COMPLETED ===")
        self.logger.info(f"Authors collected: {len(self.results)}")
        self.logger.info(f"Articles collected: {self.results.total_articles()}")
        self.logger.info(f"Crawl stats: {summary}")
        self.logger.info(f"Frontier stats: {self.frontier.get_stats()}")


async def scrape(config: ScraperConfig, metrics: Optional[CrawlMetrics] = None) -> ResultStore:
    """Run a full crawl with a real HTTP fetcher."""
    async with WebFetcher(
        user_agent=config.user_agent,
        request_timeout=config.request_timeout,
        max_concurrent_requests=config.concurrency,
        retry_attempts=config.retry_attempts
    ) as fetcher:
        scheduler = CrawlerScheduler(config, fetcher, metrics=metrics)
        return await scheduler.run()
