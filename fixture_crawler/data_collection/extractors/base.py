"""
Building blocks shared by all field extractors.

An extractor is an ordered list of strategies. Each strategy is a pure
function ``Document -> list | None``; the first one that returns a non-empty
list wins and the rest are not consulted (fallbacks, not merges). A
strategy that finds nothing returns ``None`` or ``[]``; a missing selector is
never an exception.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Sequence, TypeVar
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from ...common.logging_utils import get_logger
from ...common.parsing import clean_text, soup_from_html

T = TypeVar("T")

logger = get_logger(__name__)

# Result cap for team options. Bounds output size; not a correctness rule.
MAX_CANDIDATES = 20

# Href prefixes that never navigate to another page
NON_NAVIGATIONAL_PREFIXES: tuple[str, ...] = ("#", "javascript:", "mailto:", "tel:")

# Whole path segments of parent, listing and search pages
BOILERPLATE_SEGMENTS: frozenset[str] = frozenset({"search", "login", "account", "news"})
LISTING_PATHS: tuple[str, ...] = ("", "/", "/competitions", "/competitions/competition")


@dataclass
class Document:
    """Parsed snapshot of a rendered page."""

    url: str
    html: str
    title: str = ""
    soup: BeautifulSoup = field(init=False, repr=False)

    def __post_init__(self):
        self.soup = soup_from_html(self.html)
        if not self.title and self.soup.title:
            self.title = clean_text(self.soup.title.get_text())

    def select(self, selector: str) -> list[Tag]:
        return self.soup.select(selector)

    def absolute(self, href: str | None) -> str:
        if not href:
            return ""
        return urljoin(self.url, href.strip()) if self.url else href.strip()

    def body_sample(self, limit: int) -> str:
        body = self.soup.body
        markup = body.decode_contents() if body is not None else self.html
        return markup[: max(0, limit)]


Strategy = Callable[[Document], Optional[list[T]]]


def run_chain(doc: Document, strategies: Sequence[Strategy], name: str = "extractor") -> list[T]:
    """Return the first non-empty strategy result, or [] if all come up empty."""
    for strategy in strategies:
        found = strategy(doc)
        if found:
            logger.debug(
                "%s: strategy %s yielded %d candidates",
                name,
                getattr(strategy, "__name__", repr(strategy)),
                len(found),
            )
            return list(found)
    logger.debug("%s: no strategy yielded candidates on %s", name, doc.url)
    return []


def text_of(el: Tag | None) -> str:
    """Cleaned text content of an element, '' when absent."""
    if el is None:
        return ""
    return clean_text(el.get_text(" "))


def select_text(root: Tag | BeautifulSoup, selector: str) -> str:
    return text_of(root.select_one(selector))


def is_denied_url(href: str | None) -> bool:
    """True for links that are non-navigational or point at boilerplate pages."""
    raw = (href or "").strip()
    if not raw:
        return True
    lowered = raw.lower()
    if lowered.startswith(NON_NAVIGATIONAL_PREFIXES):
        return True
    path = urlsplit(lowered).path.rstrip("/")
    if path in LISTING_PATHS:
        return True
    return any(segment in BOILERPLATE_SEGMENTS for segment in path.split("/"))


def has_name(name: str | None) -> bool:
    return bool(name and name.strip())


def cap(items: Iterable[T], limit: int = MAX_CANDIDATES) -> list[T]:
    items = list(items)
    if len(items) > limit:
        logger.debug("Truncating %d candidates to %d", len(items), limit)
    return items[:limit]


__all__ = [
    "Document",
    "Strategy",
    "run_chain",
    "text_of",
    "select_text",
    "is_denied_url",
    "has_name",
    "cap",
    "MAX_CANDIDATES",
]
