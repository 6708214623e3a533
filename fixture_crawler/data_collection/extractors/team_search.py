"""
Team-search extractor.

Reads the search results page and returns ``TeamOption`` candidates. The
current site renders results as grid cards linking to competition pages;
older layouts are still covered by a broad attribute match.
"""

from __future__ import annotations

from typing import Optional

from bs4 import Tag

from ...common.parsing import clean_text
from ...domain.contracts import TeamOption
from ..dedup import dedupe_by_url
from .base import Document, cap, has_name, is_denied_url, run_chain, select_text, text_of

COMPETITION_LINK = 'a[href*="/Competitions/Competition/"]'
RESULT_CARD_LINKS = f".l-grid__cell {COMPETITION_LINK}"
LEGACY_RESULT_SELECTORS = (
    'a[href*="/team/"], a[href*="/competitions/"], .result-item, .search-result, div[class*="result"]'
)

NAME_SELECTOR = "dl.u-spacing-mb-xx-small"
COMPETITION_SELECTOR = ".club-card-content__club"
RESULT_TYPE_SELECTOR = ".o-lozenge"

# Selectors the renderer waits on before the search page is snapshotted
WAIT_SELECTORS = [RESULT_CARD_LINKS, COMPETITION_LINK]


def _card_name(link: Tag) -> str:
    name = select_text(link, NAME_SELECTOR)
    if name:
        return name
    lozenge = link.select_one(RESULT_TYPE_SELECTOR)
    if lozenge is not None:
        all_text = link.get_text("\n")
        remainder = all_text.replace(lozenge.get_text("\n"), "", 1)
        for line in remainder.splitlines():
            line = line.strip()
            if line:
                return clean_text(line)
        return ""
    return text_of(link)


def _option_from_card(doc: Document, link: Tag) -> TeamOption:
    return TeamOption(
        name=_card_name(link),
        url=doc.absolute(link.get("href")),
        competition=select_text(link, COMPETITION_SELECTOR),
        result_type=select_text(link, RESULT_TYPE_SELECTOR),
    )


def result_cards(doc: Document) -> Optional[list[TeamOption]]:
    """Competition links inside the search result grid cells."""
    return [_option_from_card(doc, a) for a in doc.select(RESULT_CARD_LINKS) if a.get("href")]


def competition_links(doc: Document) -> Optional[list[TeamOption]]:
    """Any competition link on the page, grid or not."""
    return [_option_from_card(doc, a) for a in doc.select(COMPETITION_LINK) if a.get("href")]


def legacy_results(doc: Document) -> Optional[list[TeamOption]]:
    """Broad match used by older search layouts: team/competition links and result blocks."""
    out: list[TeamOption] = []
    for el in doc.select(LEGACY_RESULT_SELECTORS):
        link = el if el.name == "a" else el.find("a", href=True)
        if link is None or not link.get("href"):
            continue
        name = text_of(el) or text_of(link)
        out.append(TeamOption(name=name, url=doc.absolute(link.get("href"))))
    return out


STRATEGIES = (result_cards, competition_links, legacy_results)


def is_acceptable(option: TeamOption) -> bool:
    return has_name(option.name) and not is_denied_url(option.url)


def extract_team_options(doc: Document, limit: int | None = None) -> list[TeamOption]:
    """Filtered, de-duplicated and capped team options in page order."""
    candidates = run_chain(doc, STRATEGIES, name="team_search")
    accepted = [o for o in candidates if is_acceptable(o)]
    unique = dedupe_by_url(accepted, lambda o: o.url)
    return cap(unique, limit) if limit is not None else cap(unique)


__all__ = [
    "extract_team_options",
    "result_cards",
    "competition_links",
    "legacy_results",
    "STRATEGIES",
    "WAIT_SELECTORS",
]
