"""
HTML parser for extracting the page title and candidate links.
"""

import re
import logging
from typing import List
from dataclasses import dataclass, field
from bs4 import BeautifulSoup


@dataclass
class ParsedPage:
    """Title and raw hrefs found on a page."""
    title: str = ''
    links: List[str] = field(default_factory=list)


class HtmlParser:
    """
    Parses HTML content into a title and the ordered list of raw hrefs.
    Links are returned as written in the document; resolving them is left
    to the caller.
    """

    def __init__(self, features: str = 'lxml'):
        self.features = features
        self.logger = logging.getLogger(__name__)
        self.whitespace_pattern = re.compile(r'\s+')

    def parse(self, content: str, base_url: str) -> ParsedPage:
        """
        Parse HTML content.

        Args:
            content: Raw HTML content
            base_url: URL the content was fetched from

        Returns:
            ParsedPage with the title and raw link targets
        """
        soup = BeautifulSoup(content, self.features)

        parsed_page = ParsedPage(
            title=self._extract_title(soup),
            links=self._extract_links(soup),
        )

        self.logger.debug(f"Parsed {base_url}: title={parsed_page.title!r}, "
                          f"{len(parsed_page.links)} links")
        return parsed_page

    def _extract_title(self, soup: BeautifulSoup) -> str:
        """Extract page title."""
        title_tag = soup.find('title')
        if title_tag:
            return self._clean_text(title_tag.get_text())
        return ''

    def _extract_links(self, soup: BeautifulSoup) -> List[str]:
        """Extract href values in document order, skipping nofollow anchors."""
        links = []

        for link in soup.find_all('a', href=True):
            rel = link.get('rel') or []
            if isinstance(rel, str):
                rel = rel.split()
            if 'nofollow' in (value.lower() for value in rel):
                continue

            href = link['href'].strip()
            if href:
                links.append(href)

        return links

    def _clean_text(self, text: str) -> str:
        """Collapse whitespace."""
        if not text:
            return ""
        return self.whitespace_pattern.sub(' ', text.strip())
