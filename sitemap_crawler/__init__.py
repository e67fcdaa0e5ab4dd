"""
Sitemap Crawler

Crawls a single site from a seed URL and writes sitemap.xml plus an HTML
page tree of everything it found.
"""

__version__ = "1.0.0"
__description__ = "Single-origin crawler that generates XML and HTML sitemaps"
