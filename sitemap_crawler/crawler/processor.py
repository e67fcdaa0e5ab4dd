"""
Turns fetched pages into sitemap entries, tree nodes and new frontier items.
"""

import logging
from typing import List, Optional, Sequence

from .fetcher import FetchedPage
from .parser import HtmlParser
from .state import CrawlState, SitemapEntry, TreeNode
from .url_frontier import FrontierItem, child_depth
from .urls import is_same_origin, normalize_url, path_level, should_exclude, url_path, visit_key


class PageProcessor:
    """
    Processes one fetched page at a time against a CrawlState.

    Every change to the state is applied after parsing succeeded, so a page
    that fails to parse leaves nothing behind except its visited mark.
    """

    def __init__(self, state: CrawlState, exclude_patterns: Optional[Sequence[str]] = None,
                 parser: Optional[HtmlParser] = None):
        self.state = state
        self.exclude_patterns = list(exclude_patterns or [])
        self.parser = parser or HtmlParser()
        self.logger = logging.getLogger(__name__)

    def process(self, item: FrontierItem, page: FetchedPage) -> bool:
        """
        Process a fetched page.
        Returns True if the page was recorded in the sitemap.
        """
        url = item.location
        state = self.state

        if url in state.visited:
            self.logger.debug(f"Already visited: {url}")
            state.stats.duplicates_skipped += 1
            return False

        if should_exclude(url, self.exclude_patterns):
            self.logger.info(f"Excluded by pattern: {url}", extra={'url': url})
            state.stats.pages_excluded += 1
            return False

        state.visited.add(url)

        try:
            parsed_page = self.parser.parse(page.content, url)
            links = self.candidate_links(parsed_page.links, url)
        except Exception as e:
            self.logger.error(f"Error processing {url}: {e}", exc_info=True, extra={'url': url})
            state.stats.processing_errors += 1
            return False

        path = url_path(url)
        entry = SitemapEntry(
            location=url,
            last_modified=page.fetched_at.isoformat(timespec='seconds'),
            priority=item.priority,
            title=parsed_page.title or '',
        )
        node = TreeNode(
            url=url,
            title=parsed_page.title or '',
            parent=item.parent,
            path=path,
            level=path_level(path),
        )
        children = self._new_children(links, item, path)

        state.entries.append(entry)
        state.nodes.append(node)
        for child in children:
            state.frontier.add(child)
        state.stats.pages_visited += 1
        state.stats.links_queued += len(children)

        self.logger.info(f"Visited: {url}", extra={'url': url, 'status': page.status})
        return True

    def candidate_links(self, raw_links: Sequence[str], page_url: str) -> List[str]:
        """Normalize raw hrefs and keep distinct links under the seed URL."""
        links = []
        seen = set()

        for href in raw_links:
            link = normalize_url(href, page_url)
            if not link or link in seen:
                continue
            if not is_same_origin(link, self.state.seed_url):
                continue
            seen.add(link)
            links.append(link)

        return links

    def _new_children(self, links: Sequence[str], item: FrontierItem, path: str) -> List[FrontierItem]:
        """Build frontier items for links that are neither visited nor queued."""
        depth = child_depth(item.depth)
        children = []
        queued = set()

        for link in links:
            if should_exclude(link, self.exclude_patterns):
                self._record_excluded(link)
                continue

            if link in self.state.visited or self.state.frontier.contains(link):
                continue

            key = visit_key(link)
            if key in queued:
                continue
            queued.add(key)

            children.append(FrontierItem(
                location=link,
                depth=depth,
                parent=item.location,
                path=path,
            ))

        return children

    def _record_excluded(self, link: str):
        """Log an excluded link the first time it is seen."""
        key = visit_key(link)
        if key in self.state.excluded:
            return
        self.state.excluded.add(key)
        self.state.stats.links_excluded += 1
        self.logger.info(f"Excluded by pattern: {link}", extra={'url': link})
