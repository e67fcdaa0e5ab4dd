"""
Output layer: sitemap XML, HTML page tree and the file writer.
"""

from .writer import SitemapWriter, tree_path_for
from .sitemap_xml import render_urlset, render_sitemap_index, escape_xml
from .html_tree import render_tree_page

__all__ = [
    'SitemapWriter', 'tree_path_for',
    'render_urlset', 'render_sitemap_index', 'escape_xml',
    'render_tree_page'
]
