"""
URL canonicalisation used to decide whether two candidate URLs are the same page.
"""
from __future__ import annotations

from typing import Union
from urllib.parse import parse_qsl, urlencode, urlsplit

from link_scout.config import PathNormalization

__all__ = ("normalize",)

_ModeT = Union[PathNormalization, str]


def normalize(url: str, mode: _ModeT = PathNormalization.PRESERVE) -> str:
    """Return the dedup key for *url*.

    * scheme and hostname are lower-cased, an explicit port is kept;
    * userinfo and fragment are dropped;
    * query pairs are sorted by key, then value, and re-encoded;
    * the path is kept as given (``preserve``) or lower-cased with trailing
      slashes removed (``fold``).

    Anything that does not parse as an absolute URL is returned unchanged.
    The function never raises and ``normalize(normalize(u)) == normalize(u)``.
    """
    try:
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return url
    if not parts.scheme or not host:
        return url

    if ":" in host:
        host = f"[{host}]"
    netloc = host if port is None else f"{host}:{port}"

    path = parts.path or "/"
    if PathNormalization(mode) is PathNormalization.FOLD:
        path = path.rstrip("/").lower() or "/"

    key = f"{parts.scheme.lower()}://{netloc}{path}"
    if parts.query:
        pairs = sorted(parse_qsl(parts.query, keep_blank_values=True))
        if pairs:
            key += "?" + urlencode(pairs)
    return key
