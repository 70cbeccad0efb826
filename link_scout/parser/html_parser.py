"""HTML link collection for LinkScout.

Used by the fallback link extractor when a site publishes no sitemap.  The
parser knows nothing about hosts or crawl scope; it only turns markup into
absolute URLs in document order.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Dict, List, Literal, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = ("LINK_ATTRS", "extract_links")

#: element -> attribute holding its target
LINK_ATTRS: Dict[str, str] = {
    "a": "href",
    "link": "href",
    "img": "src",
    "script": "src",
}

_SKIP_PREFIXES: Tuple[str, ...] = ("mailto:", "javascript:", "tel:", "data:")


def extract_links(html: str, base_url: str, scope: Literal["all", "anchors"] = "all") -> List[str]:
    """Return absolute targets of link-bearing elements in *html*.

    ``scope="anchors"`` limits the scan to ``<a href>``; ``"all"`` adds
    stylesheets and other ``<link>`` targets, images and scripts.  Targets
    are resolved against *base_url*; duplicates are kept.
    """
    soup = BeautifulSoup(html, "html.parser")
    names = ["a"] if scope == "anchors" else list(LINK_ATTRS)
    links: List[str] = []
    for tag in soup.find_all(names):
        if not isinstance(tag, Tag):
            continue
        value = tag.get(LINK_ATTRS[tag.name])
        if not isinstance(value, str):
            continue
        raw = value.strip()
        if not raw or raw.lower().startswith(_SKIP_PREFIXES):
            continue
        try:
            links.append(urljoin(base_url, raw))
        except ValueError:
            continue
    return links
