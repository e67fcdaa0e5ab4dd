"""Shared fixtures for the sitemap crawler tests."""

import asyncio
from typing import Dict, Iterable, Optional

import pytest

from sitemap_crawler.crawler.fetcher import FetchedPage
from sitemap_crawler.exceptions import FetchError

SEED = "https://example.com/"


def html_page(title: str, *hrefs: str) -> str:
    """Minimal HTML document with a title and one anchor per href."""
    anchors = "\n".join(f'<a href="{href}">{href}</a>' for href in hrefs)
    return f"<html><head><title>{title}</title></head><body>{anchors}</body></html>"


class FakeFetcher:
    """In-memory stand-in for PageFetcher."""

    def __init__(self, pages: Dict[str, str], failures: Optional[Iterable[str]] = None,
                 errors: Optional[Dict[str, Exception]] = None):
        self.pages = pages
        self.failures = set(failures or ())
        self.errors = errors or {}
        self.requested = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> FetchedPage:
        self.requested.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if url in self.errors:
                raise self.errors[url]
            if url in self.failures or url not in self.pages:
                raise FetchError(url, "HTTP 404", status=404)
            return FetchedPage(url=url, content=self.pages[url], status=200)
        finally:
            self.in_flight -= 1


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetcher instances."""
    return FakeFetcher


@pytest.fixture
def page():
    """Factory for small HTML documents."""
    return html_page
