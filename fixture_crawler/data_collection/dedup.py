"""Deduplication of extracted entities.

First occurrence wins, input order is preserved and dropped duplicates are
not reported.
"""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, TypeVar
from urllib.parse import urlsplit

T = TypeVar("T")


def url_identity(url: str | None) -> str:
    """Case- and scheme-insensitive key for an absolute URL.

    ``http://Site/a/`` and ``https://site/a#top`` share the key ``site/a``.
    """
    raw = (url or "").strip().lower()
    if not raw:
        return ""
    parts = urlsplit(raw)
    path = parts.path.rstrip("/")
    key = f"{parts.netloc}{path}"
    if parts.query:
        key = f"{key}?{parts.query}"
    return key


def dedupe(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    seen: set[Hashable] = set()
    out: list[T] = []
    for item in items:
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        out.append(item)
    return out


def dedupe_by_url(items: Iterable[T], url_of: Callable[[T], str]) -> list[T]:
    return dedupe(items, lambda item: url_identity(url_of(item)))


__all__ = ["url_identity", "dedupe", "dedupe_by_url"]
