"""link_scout.utils: small URL helpers shared by the crawler components."""

from __future__ import annotations

from typing import Collection, List, Optional, Sequence
from urllib.parse import urlsplit, urlunsplit

__all__: Sequence[str] = (
    "is_http_url",
    "hostname_of",
    "origin_of",
    "site_root",
    "first_path_segment",
    "is_sitemap_url",
    "remove_duplicates",
)

SITEMAP_SUFFIXES = ("sitemap.xml", "sitemap_index.xml")


def is_http_url(url: str) -> bool:
    """True for absolute http(s) URLs with a host."""
    try:
        parts = urlsplit(url)
        return parts.scheme.lower() in ("http", "https") and bool(parts.hostname)
    except ValueError:
        return False


def hostname_of(url: str) -> Optional[str]:
    """Lower-cased hostname or None when *url* cannot be parsed."""
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def origin_of(url: str) -> str:
    """``scheme://netloc`` part of *url*."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, "", "", ""))


def is_sitemap_url(url: str) -> bool:
    """Suffix match on the well-known sitemap file names."""
    return url.lower().endswith(SITEMAP_SUFFIXES)


def site_root(url: str) -> str:
    """Directory-like root of *url*, always ending with ``/``.

    For a sitemap URL the file name is stripped; otherwise query and
    fragment are dropped and a trailing slash is added when missing.
    """
    parts = urlsplit(url)
    path = parts.path
    if is_sitemap_url(url):
        path = path[: path.rfind("/") + 1]
    if not path.endswith("/"):
        path += "/"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def first_path_segment(url: str) -> Optional[str]:
    """First non-empty path segment (``"en"`` for ``/en/about``) or None."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    for segment in path.split("/"):
        if segment:
            return segment
    return None


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    return list(dict.fromkeys(urls))
