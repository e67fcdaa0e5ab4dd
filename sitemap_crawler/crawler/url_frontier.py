"""
URL Frontier implementation for managing URLs to crawl.
The frontier is drained in contiguous batches from a read cursor.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Set

from .urls import visit_key

SEED_DEPTH = 1.0
MIN_DEPTH = 0.1
DEPTH_STEP = 0.2


def child_depth(parent_depth: float) -> float:
    """Depth handed to links discovered on a page of the given depth."""
    return round(max(MIN_DEPTH, parent_depth - DEPTH_STEP), 1)


@dataclass(frozen=True)
class FrontierItem:
    """Represents a URL waiting to be fetched."""
    location: str
    depth: float = SEED_DEPTH
    parent: Optional[str] = None
    path: str = '/'

    @property
    def priority(self) -> str:
        """Depth formatted the way the sitemap expects it."""
        return f"{self.depth:.1f}"


class Frontier:
    """
    Ordered work list of pending fetches.

    Items are appended at the tail and consumed from a cursor at the head.
    Consumed items stay in the list so a URL is never enqueued twice.
    """

    def __init__(self):
        self._items: List[FrontierItem] = []
        self._keys: Set[str] = set()
        self._cursor = 0
        self.logger = logging.getLogger(__name__)

    def add(self, item: FrontierItem) -> bool:
        """
        Add an item to the frontier.
        Returns True if it was appended, False if the URL was already queued.
        """
        key = visit_key(item.location)
        if key in self._keys:
            return False

        self._keys.add(key)
        self._items.append(item)
        self.logger.debug(f"Added URL to frontier: {item.location}")
        return True

    def contains(self, url: str) -> bool:
        """Check whether url was ever enqueued, pending or consumed."""
        return visit_key(url) in self._keys

    def has_pending(self) -> bool:
        return self._cursor < len(self._items)

    @property
    def pending_count(self) -> int:
        return len(self._items) - self._cursor

    def next_batch(self, size: int) -> List[FrontierItem]:
        """Take the next contiguous batch of at most size items."""
        if size < 1:
            raise ValueError("Batch size must be at least 1")

        batch = self._items[self._cursor:self._cursor + size]
        self._cursor += len(batch)
        return batch

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[FrontierItem]:
        return iter(self._items)


class VisitedSet:
    """URLs already processed, compared without a trailing slash."""

    def __init__(self):
        self._keys: Set[str] = set()

    def add(self, url: str):
        self._keys.add(visit_key(url))

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and visit_key(url) in self._keys

    def __len__(self) -> int:
        return len(self._keys)
