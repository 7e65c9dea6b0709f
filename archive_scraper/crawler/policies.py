"""
Filtering and termination policies applied while collecting articles.
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .url_frontier import CrawlTask, PageKind
from ..utils.config import ScraperConfig


@dataclass(frozen=True)
class DateWindow:
    """Inclusive date range; either bound may be open."""
    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


@dataclass(frozen=True)
class ResultCap:
    """Per-author article cap. None means unlimited."""
    limit: Optional[int] = None

    @property
    def allows_articles(self) -> bool:
        """False only for a cap of exactly zero."""
        return self.limit is None or self.limit > 0

    def is_reached(self, count: int) -> bool:
        return self.limit is not None and count >= self.limit


def pending_articles_for(author_id: int) -> Callable[[CrawlTask], bool]:
    """Predicate matching queued articles page tasks of one author."""
    def predicate(task: CrawlTask) -> bool:
        return task.kind is PageKind.ARTICLES_PAGE and task.author_id == author_id
    return predicate


@dataclass(frozen=True)
class CrawlPolicy:
    """Date window plus result cap, built from the scraper configuration."""
    window: DateWindow
    cap: ResultCap

    @classmethod
    def from_config(cls, config: ScraperConfig) -> 'CrawlPolicy':
        return cls(
            window=DateWindow(config.start_date, config.end_date),
            cap=ResultCap(config.max_results_per_author)
        )
