"""Roster extractor: player rows from squad tables or player cards."""

from __future__ import annotations

from typing import Optional

from bs4 import Tag

from ...domain.contracts import Player
from ..dedup import dedupe
from ..normalizer import normalize_player
from .base import Document, has_name, run_chain, select_text

ROW_SELECTOR = "tr, .player-row, .player-item"
CELL_SELECTOR = "td, .player-name, .player-position, .number"
ROW_NAME_SELECTOR = ".player-name, .name, td:first-child"
POSITION_SELECTOR = ".position, .pos"
JERSEY_SELECTOR = ".number, .jersey"

CARD_SELECTOR = '.player, [data-player], div[class*="player"]'
CARD_NAME_SELECTOR = ".name, .player-name, strong, b"

HEADER_LABELS = frozenset({"name", "player"})


def _is_header(name: str) -> bool:
    return name.strip().lower() in HEADER_LABELS


def _player_from_row(row: Tag) -> Optional[Player]:
    if row.select_one(CELL_SELECTOR) is None:
        return None
    name = select_text(row, ROW_NAME_SELECTOR)
    if not has_name(name) or _is_header(name):
        return None
    return normalize_player(name, select_text(row, POSITION_SELECTOR), select_text(row, JERSEY_SELECTOR))


def table_rows(doc: Document) -> Optional[list[Player]]:
    players = (_player_from_row(row) for row in doc.select(ROW_SELECTOR))
    return [p for p in players if p is not None]


def player_cards(doc: Document) -> Optional[list[Player]]:
    out = []
    for card in doc.select(CARD_SELECTOR):
        name = select_text(card, CARD_NAME_SELECTOR)
        if has_name(name) and not _is_header(name):
            out.append(normalize_player(name))
    return out


STRATEGIES = (table_rows, player_cards)


def extract_players(doc: Document) -> list[Player]:
    """Players in page order; one entry per name."""
    return dedupe(run_chain(doc, STRATEGIES, name="roster"), lambda p: p.name)


__all__ = ["extract_players", "table_rows", "player_cards"]
