"""
Relative to absolute URL resolution.
"""

import re
from urllib.parse import urlparse

# '//' or '/./'
_SLASH_DOT_PATTERN = re.compile(r'/\.?/')
# '/segment/../' where segment is not '..' itself
_PARENT_SEGMENT_PATTERN = re.compile(r'/(?!\.\.)[^/]+/\.\./')


def _collapse(path: str) -> str:
    """Collapse '//', '/./' and '/segment/../' until the path is stable."""
    while True:
        collapsed = _SLASH_DOT_PATTERN.sub('/', path)
        collapsed = _PARENT_SEGMENT_PATTERN.sub('/', collapsed)
        if collapsed == path:
            return collapsed
        path = collapsed


def make_absolute_url(url: str, base: str) -> str:
    """
    Resolve a possibly relative URL against a base URL.

    Args:
        url: Link as found on a page (absolute, root-relative or relative)
        base: URL of the page the link was found on

    Returns:
        Absolute URL
    """
    if not url:
        return base

    if urlparse(url).scheme:
        return url

    if url[0] in ('#', '?'):
        return base + url

    parts = urlparse(base)
    path = parts.path or '/'

    # Drop the non-directory part of the base path
    path = path[:path.rfind('/')] if '/' in path else ''

    if url[0] == '/':
        path = ''

    absolute = _collapse(f"{parts.netloc}{path}/{url}")
    return f"{parts.scheme}://{absolute}"
