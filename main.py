#!/usr/bin/env python3
"""
Main entry point for the archive scraper.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from archive_scraper.crawler.parser import PageStructureError
from archive_scraper.crawler.scheduler import CrawlError, scrape
from archive_scraper.utils.config import Config, ConfigError, load_config
from archive_scraper.utils.logger import setup_logging
from archive_scraper.utils.monitoring import CrawlMetrics


class ScraperApp:
    """Main application class for the archive scraper."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    async def run(self, config: Config, output: Optional[str] = None) -> int:
        """Run the scraper and write results as JSON."""
        scraper = config.scraper
        self.logger.info("=== ARCHIVE SCRAPER STARTING ===")
        self.logger.info(f"Directory: {scraper.directory_url}")
        self.logger.info(f"Concurrency: {scraper.concurrency}, wait: {scraper.wait}s")
        self.logger.info(f"Max results per author: {scraper.max_results_per_author}")
        self.logger.info(f"Date window: {scraper.start_date} .. {scraper.end_date}")

        metrics = CrawlMetrics()
        if config.monitoring.metrics_enabled:
            metrics.start_server(config.monitoring.prometheus_port)

        try:
            results = await scrape(scraper, metrics=metrics)
        except (CrawlError, PageStructureError) as e:
            self.logger.error(f"Fatal error: {e}")
            return 1

        payload = json.dumps(results.to_list(), indent=2, ensure_ascii=False)
        if output:
            Path(output).write_text(payload + "\n", encoding='utf-8')
            self.logger.info(f"Results written to {output}")
        else:
            print(payload)

        self.logger.info("=== ARCHIVE SCRAPER FINISHED ===")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Archive author/article scraper",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                                   # Run with defaults
  python main.py --config config.yaml              # Run with a config file
  python main.py --maxResultsPerAuthor 10          # Up to 10 articles per author
  python main.py --startDate 2015-01-01 --endDate 2016-12-31
  python main.py --concurrency 2 --wait 1 --output authors.json
        """
    )

    parser.add_argument('--config', help='Path to YAML configuration file')
    parser.add_argument('--maxResultsPerAuthor', dest='max_results_per_author',
                        help='Maximum articles per author (>= 0)')
    parser.add_argument('--startDate', dest='start_date', help='Earliest article date, YYYY-MM-DD')
    parser.add_argument('--endDate', dest='end_date', help='Latest article date, YYYY-MM-DD')
    parser.add_argument('--concurrency', help='Pages fetched per batch (>= 1)')
    parser.add_argument('--wait', help='Seconds to wait before each batch, also the fetch timeout (>= 0)')
    parser.add_argument('--base-url', dest='base_url', help='Archive base URL')
    parser.add_argument('--output', help='Write JSON results to this file instead of stdout')
    parser.add_argument('--log-level', dest='log_level', help='Override the configured log level')
    parser.add_argument('--version', action='version', version='Archive Scraper 1.0.0')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    overrides = {
        'max_results_per_author': args.max_results_per_author,
        'start_date': args.start_date,
        'end_date': args.end_date,
        'concurrency': args.concurrency,
        'wait': args.wait,
        'base_url': args.base_url,
    }

    try:
        config = load_config(args.config, overrides, log_level=args.log_level)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ConfigError as e:
        for message in e.errors:
            print(message, file=sys.stderr)
        return 2

    # Results may go to stdout, keep logs on stderr
    setup_logging(config.logging, stream=sys.stderr)

    try:
        return asyncio.run(ScraperApp().run(config, output=args.output))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
