"""
Records produced by a crawl run and the state that owns them.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .url_frontier import Frontier, VisitedSet


@dataclass(frozen=True)
class SitemapEntry:
    """A fetched page as it appears in sitemap.xml."""
    location: str
    last_modified: str
    priority: str
    title: str = ''

    @property
    def has_query(self) -> bool:
        return '?' in self.location


@dataclass(frozen=True)
class TreeNode:
    """Discovery lineage of a page, used for the HTML tree."""
    url: str
    title: str
    parent: Optional[str] = None
    path: str = '/'
    level: int = 1


@dataclass
class CrawlStats:
    """Statistics for a crawl run."""
    start_time: float = field(default_factory=time.time)
    pages_visited: int = 0
    pages_excluded: int = 0
    links_excluded: int = 0
    fetch_errors: int = 0
    processing_errors: int = 0
    duplicates_skipped: int = 0
    links_queued: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time

    @property
    def pages_per_minute(self) -> float:
        elapsed_minutes = self.elapsed_time / 60
        return self.pages_visited / elapsed_minutes if elapsed_minutes > 0 else 0

    def to_dict(self) -> dict:
        return {
            'pages_visited': self.pages_visited,
            'pages_excluded': self.pages_excluded,
            'links_excluded': self.links_excluded,
            'fetch_errors': self.fetch_errors,
            'processing_errors': self.processing_errors,
            'duplicates_skipped': self.duplicates_skipped,
            'links_queued': self.links_queued,
            'elapsed_time': self.elapsed_time,
        }


@dataclass
class CrawlState:
    """Everything a single crawl run mutates. Never shared between runs."""
    seed_url: str
    frontier: Frontier = field(default_factory=Frontier)
    visited: VisitedSet = field(default_factory=VisitedSet)
    entries: List[SitemapEntry] = field(default_factory=list)
    nodes: List[TreeNode] = field(default_factory=list)
    excluded: Set[str] = field(default_factory=set)
    stats: CrawlStats = field(default_factory=CrawlStats)
