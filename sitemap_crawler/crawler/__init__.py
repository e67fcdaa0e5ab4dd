"""
Crawl engine: frontier, fetching, page processing and tree building.
"""

from .url_frontier import Frontier, FrontierItem, VisitedSet
from .fetcher import PageFetcher, FetchedPage
from .parser import HtmlParser, ParsedPage
from .processor import PageProcessor
from .scheduler import CrawlerScheduler, CrawlPhase, CrawlResult
from .state import CrawlState, CrawlStats, SitemapEntry, TreeNode
from .tree import TreeBranch, build_tree, flatten

__all__ = [
    'Frontier', 'FrontierItem', 'VisitedSet',
    'PageFetcher', 'FetchedPage',
    'HtmlParser', 'ParsedPage',
    'PageProcessor',
    'CrawlerScheduler', 'CrawlPhase', 'CrawlResult',
    'CrawlState', 'CrawlStats', 'SitemapEntry', 'TreeNode',
    'TreeBranch', 'build_tree', 'flatten'
]
