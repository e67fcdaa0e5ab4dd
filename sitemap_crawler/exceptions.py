"""
Exception types raised by the sitemap crawler.
"""

from typing import Optional


class SitemapCrawlerError(Exception):
    """Base class for all sitemap crawler errors."""
    pass


class ConfigError(SitemapCrawlerError):
    """Raised when configuration values are missing or invalid."""
    pass


class InvalidSeedURLError(SitemapCrawlerError, ValueError):
    """Raised when the seed URL is not an absolute http(s) URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid domain format: {url}")


class FetchError(SitemapCrawlerError):
    """A single page could not be fetched (network, timeout, HTTP error)."""

    def __init__(self, url: str, message: str, status: Optional[int] = None):
        self.url = url
        self.message = message
        self.status = status
        super().__init__(f"Request failed for {url}: {message}")


class OutputError(SitemapCrawlerError):
    """Raised when an output document cannot be written."""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Could not write {path}: {message}")
