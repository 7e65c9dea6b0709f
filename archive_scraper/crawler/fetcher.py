"""
Web page fetcher. Fetches batches of URLs concurrently over a shared aiohttp session.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status_code: int
    content: Optional[str] = None
    error: Optional[str] = None
    fetch_time: float = 0.0
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None


class WebFetcher:
    """
    Fetches web pages concurrently with a per-request timeout.
    Failures are reported in the FetchResult, never raised.
    """

    def __init__(self, user_agent: str, request_timeout: float = 30,
                 max_concurrent_requests: int = 5, retry_attempts: int = 0,
                 max_content_size: int = 10 * 1024 * 1024):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_concurrent_requests = max_concurrent_requests
        self.retry_attempts = retry_attempts
        self.max_content_size = max_content_size

        self.logger = logging.getLogger(__name__)

        # Session management
        self.session: Optional[ClientSession] = None
        self.semaphore = asyncio.Semaphore(max_concurrent_requests)

        # Statistics
        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'retried_requests': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            timeout = ClientTimeout(total=self.request_timeout)
            headers = {'User-Agent': self.user_agent}

            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers=headers,
                connector=aiohttp.TCPConnector(
                    limit=self.max_concurrent_requests * 2,
                    ttl_dns_cache=300
                )
            )
            self.logger.info("WebFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.info("WebFetcher session closed")

    async def fetch(self, url: str, timeout: Optional[float] = None) -> FetchResult:
        """
        Fetch a single URL, retrying up to retry_attempts times on failure.

        Args:
            url: The URL to fetch
            timeout: Total timeout in seconds, None for the session default

        Returns:
            FetchResult object containing the response body or error information
        """
        result = await self._fetch_once(url, timeout)
        attempts = 1
        while not result.ok and attempts <= self.retry_attempts:
            attempts += 1
            self.stats['retried_requests'] += 1
            self.logger.info(f"Retrying {url} ({attempts - 1}/{self.retry_attempts})")
            result = await self._fetch_once(url, timeout)

        result.attempts = attempts
        return result

    async def _fetch_once(self, url: str, timeout: Optional[float]) -> FetchResult:
        if self.session is None:
            await self.start()

        start_time = time.time()
        # Without an override the session timeout applies
        request_kwargs = {'timeout': ClientTimeout(total=timeout)} if timeout else {}

        async with self.semaphore:
            try:
                self.stats['total_requests'] += 1

                async with self.session.get(url, **request_kwargs) as response:
                    fetch_time = time.time() - start_time

                    if response.status >= 400:
                        self.stats['failed_requests'] += 1
                        self.logger.warning(f"HTTP {response.status} fetching {url}")
                        return FetchResult(
                            url=url,
                            status_code=response.status,
                            error=f"HTTP {response.status}",
                            fetch_time=fetch_time
                        )

                    content = await self._read_content_safely(response)
                    if content is None:
                        self.stats['failed_requests'] += 1
                        return FetchResult(
                            url=url,
                            status_code=response.status,
                            error="Unreadable or oversized content",
                            fetch_time=fetch_time
                        )

                    self.stats['total_bytes_downloaded'] += len(content)
                    self.stats['successful_requests'] += 1

                    self.logger.debug(f"Fetched {url}: {response.status} ({len(content)} bytes)")
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        content=content,
                        fetch_time=fetch_time
                    )

            except asyncio.TimeoutError:
                self.stats['failed_requests'] += 1
                error_msg = "Request timeout"
                self.logger.warning(f"Timeout fetching {url}")

            except ClientError as e:
                self.stats['failed_requests'] += 1
                error_msg = f"Client error: {str(e)}"
                self.logger.warning(f"Client error fetching {url}: {e}")

            return FetchResult(
                url=url,
                status_code=0,
                error=error_msg,
                fetch_time=time.time() - start_time
            )

    async def _read_content_safely(self, response) -> Optional[str]:
        """
        Read response content with a size limit.

        Returns:
            Content string or None if too large
        """
        content_length = response.headers.get('content-length')
        if content_length and int(content_length) > self.max_content_size:
            self.logger.warning(f"Content too large ({content_length} bytes): {response.url}")
            return None

        content_bytes = b''
        async for chunk in response.content.iter_chunked(8192):
            content_bytes += chunk
            if len(content_bytes) > self.max_content_size:
                self.logger.warning(f"Content exceeded size limit during reading: {response.url}")
                return None

        encoding = response.charset or 'utf-8'
        try:
            return content_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            return content_bytes.decode('utf-8', errors='replace')

    async def fetch_all(self, urls: Sequence[str],
                        timeout: Optional[float] = None) -> List[FetchResult]:
        """
        Fetch multiple URLs concurrently.

        Args:
            urls: URLs to fetch
            timeout: Per-request timeout in seconds, None for the session default

        Returns:
            FetchResult objects in the same order as urls
        """
        tasks = [self.fetch(url, timeout) for url in urls]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        fetch_results = []
        for url, result in zip(urls, results):
            if isinstance(result, Exception):
                self.logger.error(f"Exception fetching {url}: {result}")
                self.stats['failed_requests'] += 1
                fetch_results.append(FetchResult(
                    url=url,
                    status_code=0,
                    error=str(result)
                ))
            else:
                fetch_results.append(result)

        return fetch_results

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()
