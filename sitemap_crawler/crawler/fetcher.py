"""
Web page fetcher built on a single shared aiohttp session.
"""

import asyncio
import aiohttp
import logging
from datetime import datetime, timezone
from typing import Optional, Dict
from dataclasses import dataclass, field
from aiohttp import ClientSession, ClientTimeout, ClientError

from ..exceptions import FetchError

DEFAULT_USER_AGENT = 'SitemapCrawler/1.0.0'
DEFAULT_ACCEPT = 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8'
DEFAULT_MAX_CONTENT_SIZE = 10 * 1024 * 1024

HTML_CONTENT_TYPES = ('text/html', 'application/xhtml+xml')


@dataclass
class FetchedPage:
    """A successfully fetched page."""
    url: str
    content: str
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    final_url: Optional[str] = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class PageFetcher:
    """
    Fetches HTML pages for the crawler.

    The underlying session is opened on first use and released by close()
    or by leaving the async context manager.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, request_timeout: int = 30,
                 max_concurrent_requests: int = 10,
                 max_content_size: int = DEFAULT_MAX_CONTENT_SIZE):
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.max_concurrent_requests = max_concurrent_requests
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
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def start(self):
        """Initialize the fetcher session."""
        if self.session is None:
            timeout = ClientTimeout(total=self.request_timeout)
            headers = {
                'User-Agent': self.user_agent,
                'Accept': DEFAULT_ACCEPT,
            }

            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers=headers,
                connector=aiohttp.TCPConnector(
                    limit=self.max_concurrent_requests * 2,
                    limit_per_host=self.max_concurrent_requests,
                    ttl_dns_cache=300,
                    use_dns_cache=True
                )
            )
            self.logger.info("PageFetcher session started")

    async def close(self):
        """Close the fetcher session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.info("PageFetcher session closed")

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a single URL.

        Args:
            url: The URL to fetch

        Returns:
            FetchedPage with the decoded HTML

        Raises:
            FetchError: on network errors, timeouts, HTTP errors and
                non-HTML responses
        """
        await self.start()

        async with self.semaphore:
            self.stats['total_requests'] += 1
            try:
                async with self.session.get(url) as response:
                    headers = dict(response.headers)
                    content_type = response.headers.get('content-type', '').lower()

                    if response.status >= 400:
                        raise FetchError(url, f"HTTP {response.status}", status=response.status)

                    if not self._is_html_content(content_type):
                        raise FetchError(url, f"Non-HTML content type ({content_type})")

                    content = await self._read_content_safely(url, response)

            except FetchError:
                self.stats['failed_requests'] += 1
                raise

            except asyncio.TimeoutError:
                self.stats['failed_requests'] += 1
                raise FetchError(url, "Request timeout")

            except ClientError as e:
                self.stats['failed_requests'] += 1
                raise FetchError(url, f"Client error: {e}")

        self.stats['successful_requests'] += 1
        self.stats['total_bytes_downloaded'] += len(content)
        self.logger.debug(f"Fetched {url}: {response.status} ({len(content)} chars)")

        return FetchedPage(
            url=url,
            content=content,
            status=response.status,
            headers=headers,
            final_url=str(response.url),
        )

    def _is_html_content(self, content_type: str) -> bool:
        """Missing content types are given the benefit of the doubt."""
        if not content_type:
            return True
        return any(html_type in content_type for html_type in HTML_CONTENT_TYPES)

    async def _read_content_safely(self, url: str, response) -> str:
        """
        Read response content with a size limit.

        Args:
            url: Requested URL, used for error reporting
            response: aiohttp response object

        Returns:
            Decoded content string
        """
        content_length = response.headers.get('content-length')
        if content_length and content_length.isdigit() and int(content_length) > self.max_content_size:
            raise FetchError(url, f"Content too large ({content_length} bytes)")

        # Read content in chunks to respect size limit
        content_bytes = b''
        async for chunk in response.content.iter_chunked(8192):
            content_bytes += chunk
            if len(content_bytes) > self.max_content_size:
                raise FetchError(url, "Content exceeded size limit during reading")

        encoding = response.charset or 'utf-8'
        try:
            return content_bytes.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            # Try common encodings
            for fallback_encoding in ['utf-8', 'cp1252']:
                try:
                    return content_bytes.decode(fallback_encoding)
                except UnicodeDecodeError:
                    continue

            return content_bytes.decode('latin-1')

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()
