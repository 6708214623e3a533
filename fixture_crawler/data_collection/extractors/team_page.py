"""Team page extractor: finds the link to the draw (fixtures) or roster page."""

from __future__ import annotations

from typing import Optional

from ...domain.contracts import DrawerLink
from .base import Document, is_denied_url, run_chain, text_of

DRAWER_KEYWORDS: tuple[str, ...] = ("draw", "fixture", "squad", "roster")


def _matches(value: str) -> bool:
    v = value.lower()
    return any(k in v for k in DRAWER_KEYWORDS)


def links_by_href(doc: Document) -> Optional[list[DrawerLink]]:
    out = []
    for a in doc.select("a[href]"):
        href = a.get("href", "")
        if is_denied_url(href) or not _matches(href):
            continue
        out.append(DrawerLink(found=True, url=doc.absolute(href), link_text=text_of(a)))
    return out


def links_by_text(doc: Document) -> Optional[list[DrawerLink]]:
    out = []
    for a in doc.select("a[href]"):
        href = a.get("href", "")
        text = text_of(a)
        if is_denied_url(href) or not _matches(text):
            continue
        out.append(DrawerLink(found=True, url=doc.absolute(href), link_text=text))
    return out


STRATEGIES = (links_by_href, links_by_text)


def find_drawer_link(doc: Document) -> DrawerLink:
    """First drawer link on the page, or ``DrawerLink(found=False)``."""
    found = run_chain(doc, STRATEGIES, name="team_page")
    if found:
        return found[0]
    return DrawerLink(found=False)


__all__ = ["find_drawer_link", "links_by_href", "links_by_text", "DRAWER_KEYWORDS"]
