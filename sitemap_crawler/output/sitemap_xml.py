"""
Sitemap protocol XML rendering.
"""

from typing import Iterable, Sequence
from xml.sax.saxutils import escape

SITEMAP_NAMESPACE = 'http://www.sitemaps.org/schemas/sitemap/0.9'
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'

# Sitemap protocol limit for a single file
MAX_URLS_PER_SITEMAP = 50000

CHANGEFREQ_VALUES = ('always', 'hourly', 'daily', 'weekly', 'monthly', 'yearly', 'never')

_XML_ENTITIES = {"'": '&apos;', '"': '&quot;'}


def escape_xml(value: str) -> str:
    """Escape & < > ' and " for use in element text."""
    return escape(value, _XML_ENTITIES)


def render_urlset(entries: Iterable, changefreq: str = 'weekly', include_lastmod: bool = True) -> str:
    """Render sitemap entries as a <urlset> document."""
    parts = [XML_DECLARATION, f'<urlset xmlns="{SITEMAP_NAMESPACE}">\n']

    for entry in entries:
        parts.append('  <url>\n')
        parts.append(f'    <loc>{escape_xml(entry.location)}</loc>\n')
        if include_lastmod:
            parts.append(f'    <lastmod>{entry.last_modified}</lastmod>\n')
        parts.append(f'    <changefreq>{changefreq}</changefreq>\n')
        parts.append(f'    <priority>{entry.priority}</priority>\n')
        parts.append('  </url>\n')

    parts.append('</urlset>\n')
    return ''.join(parts)


def render_sitemap_index(locations: Sequence[str], lastmod: str = None) -> str:
    """Render a <sitemapindex> pointing at the given sitemap files."""
    parts = [XML_DECLARATION, f'<sitemapindex xmlns="{SITEMAP_NAMESPACE}">\n']

    for location in locations:
        parts.append('  <sitemap>\n')
        parts.append(f'    <loc>{escape_xml(location)}</loc>\n')
        if lastmod:
            parts.append(f'    <lastmod>{lastmod}</lastmod>\n')
        parts.append('  </sitemap>\n')

    parts.append('</sitemapindex>\n')
    return ''.join(parts)


def chunk_entries(entries: Sequence, size: int) -> list:
    """Split entries into consecutive chunks of at most size items."""
    if size < 1:
        raise ValueError("Chunk size must be at least 1")
    return [entries[i:i + size] for i in range(0, len(entries), size)]
