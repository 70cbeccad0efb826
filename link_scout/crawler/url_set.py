"""
Merge candidate URL lists into one ordered, deduplicated crawl set.
"""
from __future__ import annotations

from typing import Dict, Iterable, List

from link_scout.config import PathNormalization
from link_scout.crawler.normalizer import normalize

__all__ = ("build_url_set", "duplicate_groups")


def build_url_set(
    *sources: Iterable[str],
    mode: PathNormalization = PathNormalization.PRESERVE,
) -> List[str]:
    """Concatenate *sources* and keep the first URL seen for every key.

    The returned list never grows past the input size and its elements have
    pairwise distinct normalized keys.
    """
    seen: Dict[str, str] = {}
    for source in sources:
        for url in source:
            url = url.strip()
            if not url:
                continue
            seen.setdefault(normalize(url, mode), url)
    return list(seen.values())


def duplicate_groups(
    urls: Iterable[str],
    mode: PathNormalization = PathNormalization.PRESERVE,
) -> Dict[str, List[str]]:
    """Keys shared by more than one original URL, with those originals."""
    groups: Dict[str, List[str]] = {}
    for url in urls:
        groups.setdefault(normalize(url, mode), []).append(url)
    return {key: members for key, members in groups.items() if len(members) > 1}
