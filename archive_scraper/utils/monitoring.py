"""
Metrics collection for crawl runs.
"""

import logging
import time
from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, start_http_server


class CrawlMetrics:
    """
    Prometheus counters for one crawl run.
    Each instance owns its registry so runs never share counts.
    """

    COUNTERS = {
        'pages_fetched': 'Pages fetched successfully',
        'fetch_failures': 'Fetches dropped after failure',
        'structure_errors': 'Pages skipped because of unexpected layout',
        'authors_found': 'Author records created',
        'articles_collected': 'Articles appended to author records',
        'articles_filtered': 'Articles outside the date window',
        'tasks_pruned': 'Pending articles page tasks removed after cap',
        'batches': 'Fetch batches issued',
    }

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.logger = logging.getLogger(__name__)
        self.registry = registry or CollectorRegistry()
        self.start_time = time.time()

        self.counters: Dict[str, Counter] = {
            name: Counter(f'scraper_{name}', description, registry=self.registry)
            for name, description in self.COUNTERS.items()
        }
        self.frontier_size = Gauge(
            'scraper_frontier_size',
            'Number of tasks waiting in the frontier',
            registry=self.registry
        )

    def inc(self, name: str, amount: float = 1):
        self.counters[name].inc(amount)

    def value(self, name: str) -> float:
        return self.registry.get_sample_value(f'scraper_{name}_total') or 0.0

    def set_frontier_size(self, size: int):
        self.frontier_size.set(size)

    def start_server(self, port: int):
        """Expose metrics over HTTP."""
        start_http_server(port, registry=self.registry)
        self.logger.info(f"Prometheus metrics server started on port {port}")

    def summary(self) -> Dict[str, Any]:
        """Get a summary of all metrics."""
        runtime = time.time() - self.start_time
        summary: Dict[str, Any] = {name: int(self.value(name)) for name in self.COUNTERS}
        summary['runtime_seconds'] = round(runtime, 2)
        return summary
