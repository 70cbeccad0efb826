# File: link_scout/parser/sitemap_parser.py
"""link_scout.parser.sitemap_parser: разбор sitemap.xml и sitemap index."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import re
from typing import List, Union

from lxml import etree

__all__ = ["SitemapKind", "SitemapDocument", "parse_sitemap"]


class SitemapKind(str, Enum):
    INDEX = "sitemapindex"
    URLSET = "urlset"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class SitemapDocument:
    """Parsed sitemap: for an index ``locs`` are nested sitemaps, for a urlset pages."""

    kind: SitemapKind
    locs: List[str] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return self.kind is SitemapKind.INDEX


_CHILD_TAG = {SitemapKind.INDEX: "sitemap", SitemapKind.URLSET: "url"}

# "&" that does not start a character reference or a predefined XML entity
_BARE_AMP = re.compile(rb"&(?!#[0-9]+;|#x[0-9a-fA-F]+;|(?:amp|lt|gt|quot|apos);)")


def parse_sitemap(content: Union[str, bytes]) -> SitemapDocument:
    """Разбирает sitemap и возвращает его тип и значения <loc>.

    Args:
        content: содержимое sitemap (bytes предпочтительнее: кодировку
            определит объявление XML).

    Returns:
        SitemapDocument. Для неизвестного корневого элемента или битого XML
        возвращается документ ``UNKNOWN`` без ссылок.

    Пример:
    ```python
    from link_scout.parser.sitemap_parser import parse_sitemap

    with open('sitemap.xml', 'rb') as f:
        doc = parse_sitemap(f.read())
    print(doc.kind, doc.locs)
    ```
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    # recover=True would silently drop "&x=2" from "?y=1&x=2"
    content = _BARE_AMP.sub(b"&amp;", content)
    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(content, parser=parser)
    except (etree.XMLSyntaxError, ValueError):
        return SitemapDocument(SitemapKind.UNKNOWN)
    if root is None or not isinstance(root.tag, str):
        return SitemapDocument(SitemapKind.UNKNOWN)

    local = etree.QName(root).localname.lower()
    try:
        kind = SitemapKind(local)
    except ValueError:
        return SitemapDocument(SitemapKind.UNKNOWN)

    locs: List[str] = []
    for entry in root.iterfind(f"{{*}}{_CHILD_TAG[kind]}"):
        loc = entry.find("{*}loc")
        if loc is not None and loc.text and loc.text.strip():
            locs.append(loc.text.strip())
    return SitemapDocument(kind, locs)
