#!/usr/bin/env python3
"""
Main entry point for the sitemap crawler.
"""

import asyncio
import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .crawler.fetcher import PageFetcher
from .crawler.scheduler import CrawlerScheduler
from .exceptions import ConfigError, InvalidSeedURLError, OutputError
from .output.writer import SitemapWriter
from .utils.config import Config, load_config, parse_patterns, validate_config
from .utils.logger import setup_logging


class CrawlerApp:
    """Main application class for the sitemap crawler."""

    def __init__(self, config: Config):
        self.config = config
        self.scheduler: Optional[CrawlerScheduler] = None
        self.logger = logging.getLogger(__name__)

    async def run(self, seed_url: str) -> int:
        """Crawl the site and write both documents. Returns the exit code."""
        crawler_config = self.config.crawler
        sitemap_config = self.config.sitemap

        self.logger.info("Start creating sitemap")
        self.logger.info(f"Seed URL: {seed_url}")
        self.logger.info(f"Max concurrent requests: {crawler_config.max_concurrent_requests}")
        if crawler_config.exclude_patterns:
            self.logger.info(f"Exclude patterns: {crawler_config.exclude_patterns}")

        try:
            async with PageFetcher(
                user_agent=crawler_config.user_agent,
                request_timeout=crawler_config.request_timeout,
                max_concurrent_requests=crawler_config.max_concurrent_requests,
                max_content_size=crawler_config.max_content_size
            ) as fetcher:
                self.scheduler = CrawlerScheduler(
                    fetcher,
                    max_concurrent_requests=crawler_config.max_concurrent_requests,
                    exclude_patterns=crawler_config.exclude_patterns,
                    strip_querystring=sitemap_config.strip_querystring,
                    max_pages=crawler_config.max_pages
                )
                result = await self.scheduler.run(seed_url)
                self.scheduler.log_final_stats()

            writer = SitemapWriter(
                save_path=sitemap_config.save_path,
                changefreq=sitemap_config.changefreq,
                include_lastmod=sitemap_config.include_lastmod,
                max_entries_per_file=sitemap_config.max_entries_per_file
            )
            self.scheduler.write(result, writer)

        except InvalidSeedURLError as e:
            self.logger.error(str(e))
            return 1

        except OutputError as e:
            self.logger.error(f"Sitemap generation failed: {e}")
            return 1

        except Exception as e:
            self.logger.error(f"Fatal error: {e}", exc_info=True)
            return 1

        self.logger.info("Sitemap generation completed successfully.")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Crawl a site from a seed URL and generate sitemap.xml and an HTML page tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  sitemap-crawler https://example.com
  sitemap-crawler https://example.com --changefreq=daily --save-path=/var/www/sitemap.xml
  sitemap-crawler https://example.com --exclude-patterns=/admin,/cart,logout
  sitemap-crawler https://example.com --config crawler.yaml
        """
    )

    parser.add_argument('url', help='Seed URL, e.g. https://example.com')
    parser.add_argument('--config', help='Path to a YAML configuration file')
    parser.add_argument('--changefreq', help='Value for <changefreq> (default: weekly)')
    parser.add_argument('--save-path', help='Where to write sitemap.xml (default: ./public/sitemap.xml)')
    parser.add_argument(
        '--exclude-patterns',
        help='Comma-separated substrings or /regex/ patterns of URLs to skip'
    )
    parser.add_argument('--max-concurrent', type=int, help='Maximum concurrent fetches per batch')
    parser.add_argument('--max-pages', type=int, help='Stop after this many pages')
    parser.add_argument('--timeout', type=int, help='Request timeout in seconds')
    parser.add_argument('--log-level', help='Logging level (default: INFO)')
    parser.add_argument('--version', action='version', version=f'Sitemap Crawler {__version__}')

    return parser


def apply_overrides(config: Config, args: argparse.Namespace) -> Config:
    """Command-line flags win over configuration file values."""
    if args.changefreq:
        config.sitemap.changefreq = args.changefreq
    if args.save_path:
        config.sitemap.save_path = args.save_path
    if args.exclude_patterns is not None:
        config.crawler.exclude_patterns = parse_patterns(args.exclude_patterns)
    if args.max_concurrent is not None:
        config.crawler.max_concurrent_requests = args.max_concurrent
    if args.max_pages is not None:
        config.crawler.max_pages = args.max_pages
    if args.timeout is not None:
        config.crawler.request_timeout = args.timeout
    if args.log_level:
        config.logging.level = args.log_level

    validate_config(config)
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = apply_overrides(load_config(args.config), args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)

    app = CrawlerApp(config)
    try:
        return asyncio.run(app.run(args.url))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
