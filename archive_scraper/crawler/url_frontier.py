"""
URL Frontier implementation for managing pages to crawl.
Keeps tasks in FIFO order and supports pruning pending tasks by predicate.
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Dict, Iterable, List, Optional


class PageKind(Enum):
    """Page types the crawler knows how to handle."""
    AUTHOR_PAGE = 'AuthorPage'
    ARTICLES_PAGE = 'ArticlesPage'


@dataclass(frozen=True)
class CrawlTask:
    """Represents a single page fetch plus its routing metadata."""
    url: str
    kind: PageKind
    author_id: Optional[int] = None

    def __post_init__(self):
        if self.kind is PageKind.ARTICLES_PAGE and self.author_id is None:
            raise ValueError(f"Articles page task requires an author id: {self.url}")
        if self.kind is PageKind.AUTHOR_PAGE and self.author_id is not None:
            raise ValueError(f"Author page task must not carry an author id: {self.url}")

    @classmethod
    def author_page(cls, url: str) -> 'CrawlTask':
        return cls(url=url, kind=PageKind.AUTHOR_PAGE)

    @classmethod
    def articles_page(cls, url: str, author_id: int) -> 'CrawlTask':
        return cls(url=url, kind=PageKind.ARTICLES_PAGE, author_id=author_id)


class URLFrontier:
    """
    Ordered work queue of crawl tasks.
    Tasks are never deduplicated; the caller is trusted not to re-emit URLs.
    """

    def __init__(self, tasks: Optional[Iterable[CrawlTask]] = None):
        self.logger = logging.getLogger(__name__)
        self._queue: Deque[CrawlTask] = deque()

        self.stats = {
            'enqueued_total': 0,
            'dequeued_total': 0,
            'pruned_total': 0
        }

        if tasks:
            self.enqueue_many(tasks)

    def enqueue(self, task: CrawlTask):
        """Append a task to the tail of the frontier."""
        self._queue.append(task)
        self.stats['enqueued_total'] += 1
        self.logger.debug(f"Enqueued {task.kind.value} task: {task.url}")

    def enqueue_many(self, tasks: Iterable[CrawlTask]) -> int:
        """Append several tasks in order. Returns count of added tasks."""
        added_count = 0
        for task in tasks:
            self.enqueue(task)
            added_count += 1
        return added_count

    def dequeue_up_to(self, n: int) -> List[CrawlTask]:
        """
        Remove and return up to n tasks from the head of the frontier.

        Args:
            n: Maximum number of tasks to take, must be at least 1

        Returns:
            Tasks in FIFO order, fewer than n if the frontier runs out
        """
        if n < 1:
            raise ValueError(f"Batch size must be at least 1, got {n}")

        batch = []
        while self._queue and len(batch) < n:
            batch.append(self._queue.popleft())

        self.stats['dequeued_total'] += len(batch)
        return batch

    def remove_where(self, predicate: Callable[[CrawlTask], bool]) -> int:
        """
        Remove every pending task matching the predicate, wherever it sits.
        Returns the number of removed tasks.
        """
        kept = deque(task for task in self._queue if not predicate(task))
        removed_count = len(self._queue) - len(kept)
        self._queue = kept

        if removed_count:
            self.stats['pruned_total'] += removed_count
            self.logger.debug(f"Pruned {removed_count} tasks from frontier")
        return removed_count

    def is_empty(self) -> bool:
        """Check if the frontier is empty."""
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self):
        return iter(list(self._queue))

    def get_stats(self) -> Dict[str, int]:
        """Get frontier statistics."""
        stats = self.stats.copy()
        stats['queued'] = len(self._queue)
        return stats
