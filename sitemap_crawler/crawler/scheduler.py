"""
Crawler scheduler that drains the frontier in concurrent batches and drives
a crawl run through its phases.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .fetcher import FetchedPage, PageFetcher
from .parser import HtmlParser
from .processor import PageProcessor
from .state import CrawlState, CrawlStats, SitemapEntry, TreeNode
from .url_frontier import FrontierItem, SEED_DEPTH
from .urls import validate_seed_url
from ..exceptions import FetchError, InvalidSeedURLError

FetchOutcome = Union[FetchedPage, FetchError]


class CrawlPhase(Enum):
    """Phases of a crawl run."""
    IDLE = 'idle'
    CRAWLING = 'crawling'
    DRAINING = 'draining'
    WRITING = 'writing'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class CrawlResult:
    """What a finished crawl hands to the output layer."""
    seed_url: str
    entries: List[SitemapEntry] = field(default_factory=list)
    nodes: List[TreeNode] = field(default_factory=list)
    stats: CrawlStats = field(default_factory=CrawlStats)


class CrawlerScheduler:
    """
    Coordinates fetching and processing for one crawl run.

    Fetches within a batch run concurrently; everything that touches the
    crawl state happens on the coordinating task once the batch has settled.
    """

    def __init__(self, fetcher: PageFetcher, max_concurrent_requests: int = 10,
                 exclude_patterns: Optional[Sequence[str]] = None,
                 strip_querystring: bool = True, max_pages: Optional[int] = None,
                 parser: Optional[HtmlParser] = None):
        if max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1")

        self.fetcher = fetcher
        self.max_concurrent_requests = max_concurrent_requests
        self.exclude_patterns = list(exclude_patterns or [])
        self.strip_querystring = strip_querystring
        self.max_pages = max_pages
        self.parser = parser or HtmlParser()
        self.logger = logging.getLogger(__name__)

        self.phase = CrawlPhase.IDLE
        self.state: Optional[CrawlState] = None

    async def run(self, seed_url: str) -> CrawlResult:
        """
        Crawl everything reachable from seed_url and return the drained result.

        Raises:
            InvalidSeedURLError: if the seed is not an absolute http(s) URL
        """
        try:
            validate_seed_url(seed_url)
        except InvalidSeedURLError:
            self._set_phase(CrawlPhase.FAILED)
            raise

        self.state = CrawlState(seed_url=seed_url)
        self.state.frontier.add(FrontierItem(location=seed_url, depth=SEED_DEPTH))
        processor = PageProcessor(self.state, self.exclude_patterns, self.parser)

        self.logger.info(f"Starting crawl from: {seed_url}")
        while self.state.frontier.has_pending() and not self._page_limit_reached():
            self._set_phase(CrawlPhase.CRAWLING)
            batch = self.state.frontier.next_batch(self.max_concurrent_requests)
            outcomes = await self.fetch_batch(batch)

            for item, outcome in outcomes:
                if isinstance(outcome, FetchError):
                    self.logger.warning(f"Error fetching {item.location}: {outcome.message}",
                                        extra={'url': item.location, 'status': outcome.status})
                    self.state.stats.fetch_errors += 1
                    continue
                if self._page_limit_reached():
                    break
                processor.process(item, outcome)

            self.logger.debug(f"Batch done: {len(batch)} fetched, "
                              f"{self.state.frontier.pending_count} pending")

        if self._page_limit_reached():
            self.logger.info(f"Reached max pages limit: {self.max_pages}")

        self._set_phase(CrawlPhase.DRAINING)
        return self.drain()

    async def fetch_batch(self, batch: Sequence[FrontierItem]) -> List[Tuple[FrontierItem, FetchOutcome]]:
        """
        Fetch a batch concurrently and pair every item with its outcome.
        Failures come back as FetchError values instead of being raised.
        """
        tasks = [self.fetcher.fetch(item.location) for item in batch]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = []
        for item, result in zip(batch, results):
            if isinstance(result, FetchError):
                outcomes.append((item, result))
            elif isinstance(result, Exception):
                self.logger.error(f"Unexpected error fetching {item.location}: {result}",
                                  extra={'url': item.location})
                outcomes.append((item, FetchError(item.location, str(result))))
            else:
                outcomes.append((item, result))

        return outcomes

    def drain(self) -> CrawlResult:
        """Apply the query-string filter and package the run's records."""
        entries = list(self.state.entries)
        if self.strip_querystring:
            entries = [entry for entry in entries if not entry.has_query]
            dropped = len(self.state.entries) - len(entries)
            if dropped:
                self.logger.info(f"Dropped {dropped} URLs with query strings from the sitemap")

        return CrawlResult(
            seed_url=self.state.seed_url,
            entries=entries,
            nodes=list(self.state.nodes),
            stats=self.state.stats,
        )

    def write(self, result: CrawlResult, writer) -> List[Path]:
        """
        Hand a drained result to the output layer.

        Raises:
            OutputError: if a document cannot be written
        """
        self._set_phase(CrawlPhase.WRITING)
        try:
            written = writer.write(result)
        except Exception:
            self._set_phase(CrawlPhase.FAILED)
            raise
        self._set_phase(CrawlPhase.DONE)
        return written

    def _set_phase(self, phase: CrawlPhase):
        if phase is self.phase:
            return
        self.logger.debug(f"Crawl phase: {self.phase.value} -> {phase.value}", extra={'phase': phase.value})
        self.phase = phase

    def _page_limit_reached(self) -> bool:
        return self.max_pages is not None and self.state.stats.pages_visited >= self.max_pages

    def log_final_stats(self):
        """Log final crawl statistics."""
        if self.state is None:
            return

        stats = self.state.stats
        self.logger.info("=== CRAWL COMPLETED ===")
        self.logger.info(f"Pages visited: {stats.pages_visited}")
        self.logger.info(f"Pages excluded: {stats.pages_excluded + stats.links_excluded}")
        self.logger.info(f"Fetch errors: {stats.fetch_errors}")
        self.logger.info(f"Processing errors: {stats.processing_errors}")
        self.logger.info(f"Total time: {stats.elapsed_time:.2f} seconds")
        self.logger.info(f"Average rate: {stats.pages_per_minute:.1f} pages/min")
        if hasattr(self.fetcher, 'get_stats'):
            self.logger.info(f"Fetcher stats: {self.fetcher.get_stats()}")
