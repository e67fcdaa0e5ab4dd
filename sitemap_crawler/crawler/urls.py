"""
URL normalization, same-origin checks and exclusion patterns.
"""

import re
from functools import lru_cache
from typing import Iterable, Optional, Pattern
from urllib.parse import urljoin, urlparse

from ..exceptions import InvalidSeedURLError

NOFOLLOW_MARKER = 'rel="nofollow"'


def validate_seed_url(url: str) -> str:
    """Return the seed URL unchanged or raise InvalidSeedURLError."""
    try:
        parsed = urlparse(url)
    except ValueError:
        raise InvalidSeedURLError(url)

    if parsed.scheme not in ('http', 'https') or not parsed.netloc:
        raise InvalidSeedURLError(url)
    return url


def normalize_url(href: Optional[str], base_url: str) -> Optional[str]:
    """
    Resolve a raw href against the page it was found on.

    Returns None for empty hrefs, pure fragments (``#top``), links carrying
    a nofollow marker and anything urljoin cannot make sense of.
    """
    if not href:
        return None

    href = href.strip()
    if not href or href.startswith('#') or NOFOLLOW_MARKER in href:
        return None

    # Absolute links are kept verbatim
    if href.startswith('http'):
        return href

    try:
        return urljoin(base_url, href)
    except ValueError:
        return None


def is_same_origin(url: str, seed_url: str) -> bool:
    """Check that url lives under the seed URL on the seed's host."""
    if not url.startswith(seed_url):
        return False
    try:
        candidate = urlparse(url)
        seed = urlparse(seed_url)
    except ValueError:
        return False
    return (candidate.scheme, candidate.hostname) == (seed.scheme, seed.hostname)


def visit_key(url: str) -> str:
    """Identity used for deduplication: a single trailing slash is ignored."""
    if url.endswith('/'):
        return url[:-1]
    return url


def url_path(url: str) -> str:
    """Path component of url, '/' when empty."""
    try:
        return urlparse(url).path or '/'
    except ValueError:
        return '/'


def path_level(path: str) -> int:
    """Nesting level of a path: number of '/' characters plus one."""
    return path.count('/') + 1


@lru_cache(maxsize=256)
def _compile(pattern: str) -> Optional[Pattern[str]]:
    try:
        return re.compile(pattern)
    except re.error:
        return None


def matches_pattern(url: str, pattern: str) -> bool:
    """Test a single exclusion pattern against url."""
    if pattern.startswith('/'):
        regex = _compile(pattern)
        if regex is not None:
            return regex.search(url) is not None
    return pattern in url


def should_exclude(url: str, patterns: Optional[Iterable[str]]) -> bool:
    """Return True if any configured pattern matches the URL."""
    if not patterns:
        return False
    return any(matches_pattern(url, pattern) for pattern in patterns)
