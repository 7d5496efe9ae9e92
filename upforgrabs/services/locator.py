"""
Repository locator for upforgrabs.

Finds the GitHub `owner/repo` a record refers to. Records hosted
anywhere else yield None and are left out of health checks.
"""

from typing import Optional
from urllib.parse import urlsplit

from ..domain.record import Record

GITHUB_HOST = "github.com"


def find_github_identifier(url: Optional[str]) -> Optional[str]:
    """
    Extract `owner/repo` from a github.com URL.

    Only the first two path segments count; anything after them, along
    with the query and fragment, is ignored. Case is preserved.

    Args:
        url: Candidate URL (may be None or malformed)

    Returns:
        "owner/repo", or None when the URL does not name a repository

    Example:
        >>> find_github_identifier("https://github.com/foo/bar/labels/help")
        'foo/bar'
        >>> find_github_identifier("https://github.com/orgs/foo/projects/1") is None
        True
    """
    if not isinstance(url, str):
        return None

    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except ValueError:
        return None

    if parts.scheme.lower() not in ('http', 'https') or not host:
        return None

    if host.lower() != GITHUB_HOST:
        return None

    segments = parts.path.split('/')[1:3]

    # search URLs and bare hosts carry fewer than two usable segments
    if len(segments) < 2 or not all(segments):
        return None

    # organization project boards, not repositories
    if segments[0].lower() == 'orgs':
        return None

    return '/'.join(segments)


def locate(record: Record) -> Optional[str]:
    """Identifier from `site`, falling back to `upforgrabs.link`."""
    return find_github_identifier(record.site_url) or find_github_identifier(record.label_link_url)
