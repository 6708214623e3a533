"""
Draw page (fixtures) extractor.

Each match is rendered as a list item in ``ul.l-grid``. The extractor only
collects raw text here; scores and completion are resolved by the
normalizer.
"""

from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional

from bs4 import NavigableString, Tag

from ...common.parsing import first_line
from ...domain.contracts import Match
from ..dedup import dedupe
from ..normalizer import RawMatch, normalize_match
from .base import Document, run_chain, select_text, text_of

MATCH_ROWS = "ul.l-grid > li"
HOME_TEAM = ".match-team__name--home"
AWAY_TEAM = ".match-team__name--away"
HOME_SCORE = ".match-team__score--home"
AWAY_SCORE = ".match-team__score--away"
HEADER_TITLE = ".match-header__title"
ROUND = ".match-header__title span"
VENUE = ".match-cta__link"
STATUS = ".match__lozenge"
MATCH_LINK = 'a[href*="/Competitions/Match/"]'

WAIT_SELECTORS = ["ul.l-grid"]


def _header_date(container: Tag) -> str:
    header = container.select_one(HEADER_TITLE)
    if header is None:
        return ""
    # the round sits in a nested span; the date is the header's own text
    for child in header.children:
        if isinstance(child, NavigableString):
            line = first_line(str(child))
            if line:
                return line
    return first_line(header.get_text("\n"))


def _raw_text(container: Tag, selector: str) -> Optional[str]:
    el = container.select_one(selector)
    return el.get_text(" ") if el is not None else None


def raw_match(doc: Document, container: Tag) -> RawMatch:
    time_el = container.select_one("time")
    link = container.select_one(MATCH_LINK)
    href = link.get("href", "") if link is not None else ""
    return RawMatch(
        date=_header_date(container),
        round=select_text(container, ROUND),
        kick_off_time=text_of(time_el),
        date_time=(time_el.get("datetime") or "") if time_el is not None else "",
        home_team=select_text(container, HOME_TEAM),
        away_team=select_text(container, AWAY_TEAM),
        venue=select_text(container, VENUE),
        match_url=doc.absolute(href),
        match_url_relative=href,
        status_text=_raw_text(container, STATUS) or "",
        home_score_text=_raw_text(container, HOME_SCORE),
        away_score_text=_raw_text(container, AWAY_SCORE),
    )


def _has_teams(raw: RawMatch) -> bool:
    return bool(raw.home_team and raw.away_team)


def grid_rows(doc: Document) -> Optional[list[RawMatch]]:
    """Direct children of the draw grid."""
    return [r for r in (raw_match(doc, li) for li in doc.select(MATCH_ROWS)) if _has_teams(r)]


def team_list_items(doc: Document) -> Optional[list[RawMatch]]:
    """Any list item that carries a home team name, wherever the list lives."""
    items = [
        li
        for li in doc.select("li")
        if li.select_one(HOME_TEAM) is not None
        # innermost item only
        and not any(inner.select_one(HOME_TEAM) is not None for inner in li.find_all("li"))
    ]
    return [r for r in (raw_match(doc, li) for li in items) if _has_teams(r)]


def whole_page(doc: Document) -> Optional[list[RawMatch]]:
    """The page itself as a single match container (match detail pages)."""
    root = doc.soup.body or doc.soup
    raw = raw_match(doc, root)
    return [raw] if _has_teams(raw) else None


STRATEGIES = (grid_rows, team_list_items, whole_page)


def extract_matches(doc: Document, now: datetime, site_tz: tzinfo | None = None) -> list[Match]:
    """Normalized, de-duplicated matches in page order. Naive kickoffs are read in ``site_tz``."""
    raws = run_chain(doc, STRATEGIES, name="fixtures")
    matches = [normalize_match(r, source_url=doc.url, now=now, site_tz=site_tz) for r in raws]
    return dedupe(matches, lambda m: m.identity)


__all__ = ["extract_matches", "raw_match", "grid_rows", "team_list_items", "whole_page", "WAIT_SELECTORS"]
