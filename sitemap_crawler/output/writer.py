"""
Writes the sitemap XML and the HTML page tree to disk.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import urljoin, urlparse

from .html_tree import render_tree_page
from .sitemap_xml import (
    MAX_URLS_PER_SITEMAP,
    chunk_entries,
    render_sitemap_index,
    render_urlset,
)
from ..crawler.tree import build_tree
from ..exceptions import OutputError

DEFAULT_SAVE_PATH = Path('public') / 'sitemap.xml'


def default_save_path() -> Path:
    """public/sitemap.xml under the current working directory."""
    return Path.cwd() / DEFAULT_SAVE_PATH


def tree_path_for(sitemap_path: Path) -> Path:
    """The HTML tree lives next to the sitemap with an .html suffix."""
    if sitemap_path.suffix == '.xml':
        return sitemap_path.with_suffix('.html')
    return sitemap_path.with_name(sitemap_path.name + '.html')


class SitemapWriter:
    """
    Writes the artifacts of a finished crawl.

    A crawl with more entries than fit in one file is split into numbered
    part files and save_path becomes a sitemap index.
    """

    def __init__(self, save_path: Optional[Union[str, Path]] = None, changefreq: str = 'weekly',
                 include_lastmod: bool = True,
                 max_entries_per_file: int = MAX_URLS_PER_SITEMAP,
                 tree_title: str = 'Sitemap'):
        self.save_path = Path(save_path) if save_path else default_save_path()
        self.changefreq = changefreq
        self.include_lastmod = include_lastmod
        self.max_entries_per_file = max_entries_per_file
        self.tree_title = tree_title
        self.logger = logging.getLogger(__name__)

    def write(self, result) -> List[Path]:
        """
        Write sitemap and tree documents for a crawl result.

        Returns:
            Paths of every file written, sitemap first

        Raises:
            OutputError: if any file cannot be written
        """
        self._ensure_directory(self.save_path.parent)

        written = self._write_sitemap(result)

        tree_path = tree_path_for(self.save_path)
        forest = build_tree(result.nodes)
        self._write_text(tree_path, render_tree_page(forest, self.tree_title))
        self.logger.info(f"HTML sitemap saved to {tree_path}")
        written.append(tree_path)

        return written

    def _write_sitemap(self, result) -> List[Path]:
        entries = list(result.entries)

        if len(entries) <= self.max_entries_per_file:
            self._write_text(self.save_path, self._render(entries))
            self.logger.info(f"Sitemap saved to {self.save_path}")
            return [self.save_path]

        written = []
        locations = []
        chunks = chunk_entries(entries, self.max_entries_per_file)
        for number, chunk in enumerate(chunks, start=1):
            part_path = self.part_path(number)
            self._write_text(part_path, self._render(chunk))
            written.append(part_path)
            locations.append(self.part_location(result.seed_url, part_path))

        lastmod = datetime.now(timezone.utc).isoformat(timespec='seconds') if self.include_lastmod else None
        self._write_text(self.save_path, render_sitemap_index(locations, lastmod))
        self.logger.info(f"Sitemap index saved to {self.save_path} ({len(chunks)} parts)")

        return [self.save_path] + written

    def _render(self, entries) -> str:
        return render_urlset(entries, self.changefreq, self.include_lastmod)

    def part_path(self, number: int) -> Path:
        """sitemap.xml -> sitemap-1.xml, sitemap-2.xml, ..."""
        return self.save_path.with_name(f"{self.save_path.stem}-{number}{self.save_path.suffix or '.xml'}")

    @staticmethod
    def part_location(seed_url: str, part_path: Path) -> str:
        """Public URL of a part file, assumed to be served from the site root."""
        parsed = urlparse(seed_url)
        return urljoin(f"{parsed.scheme}://{parsed.netloc}/", part_path.name)

    def _ensure_directory(self, directory: Path):
        """Create the output directory; failures are logged and ignored."""
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Error creating directory: {e}")

    def _write_text(self, path: Path, text: str):
        try:
            path.write_text(text, encoding='utf-8')
        except OSError as e:
            raise OutputError(str(path), str(e))
