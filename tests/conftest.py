"""Global pytest fixtures.

Centralizes:
 - Project root path insertion (so tests run without an editable install)
 - Reusable HTML snippets for search, team, draw and roster pages
 - A fixed crawl clock
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure project root (containing fixture_crawler/) is on sys.path once
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fixture_crawler.core.config import Settings  # noqa: E402

SITE = "https://www.touchfootball.com.au"
SEARCH_URL = f"{SITE}/Search?q=mudsharks"
TEAM_URL = f"{SITE}/Competitions/Competition/mudsharks-mixed-123"
DRAW_URL = f"{SITE}/Competitions/Competition/mudsharks-mixed-123/Draw"

# Crawl time used across tests: 1 March 2025, 12:00 UTC
NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def result_card(slug: str, name: str, competition: str = "Sydney Metro", result_type: str = "Team") -> str:
    return f"""
        <div class="l-grid__cell">
            <a href="/Competitions/Competition/{slug}">
                <span class="o-lozenge">{result_type}</span>
                <dl class="u-spacing-mb-xx-small">{name}</dl>
                <p class="club-card-content__club">{competition}</p>
            </a>
        </div>
    """


def search_page(cards: list[str]) -> str:
    return f"<html><head><title>Search</title></head><body><div class='l-grid'>{''.join(cards)}</div></body></html>"


def match_item(
    *,
    home: str = "Mudsharks",
    away: str = "Stingrays",
    date: str = "Thursday, 6 February",
    round_label: str = "Round 1",
    datetime_attr: str = "2025-02-06T18:30:00+11:00",
    kickoff: str = "6:30 PM",
    venue: str = "Field 3",
    href: str = "/Competitions/Match/1001",
    status: str | None = None,
    home_score: str | None = None,
    away_score: str | None = None,
) -> str:
    status_html = f'<div class="match__lozenge">{status}</div>' if status is not None else ""
    hs = f'<div class="match-team__score--home">{home_score}</div>' if home_score is not None else ""
    aw = f'<div class="match-team__score--away">{away_score}</div>' if away_score is not None else ""
    return f"""
        <li>
            <h3 class="match-header__title">{date}
                <span>{round_label}</span>
            </h3>
            <time datetime="{datetime_attr}">{kickoff}</time>
            {status_html}
            <div class="match-team__name--home">{home}</div>
            {hs}
            <div class="match-team__name--away">{away}</div>
            {aw}
            <a class="match-cta__link" href="/Venues/3">{venue}</a>
            <a href="{href}">Match centre</a>
        </li>
    """


def draw_page(items: list[str]) -> str:
    return f"<html><head><title>Draw</title></head><body><ul class='l-grid'>{''.join(items)}</ul></body></html>"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        dataset_path=str(tmp_path / "dataset.jsonl"),
        input_path=str(tmp_path / "INPUT.json"),
        fetch_retries=1,
        fetch_backoff_base=0.0,
        settle_delay_ms=0,
    )


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def sample_search_html():
    return search_page(
        [
            result_card("mudsharks-mixed-123", "Mudsharks", "Sydney Metro Mixed Open"),
            result_card("mudsharks-mens-456", "Mudsharks Men", "Sydney Metro Men's Open"),
            result_card("mudsharks-mixed-123", "Mudsharks (duplicate)", "Sydney Metro Mixed Open"),
        ]
    )


@pytest.fixture
def sample_team_html():
    return f"""
        <html><head><title>Mudsharks</title></head>
        <body>
            <nav><a href="#">Menu</a><a href="/Search">Search</a></nav>
            <h1>Mudsharks</h1>
            <ul class="tabs">
                <li><a href="/Competitions/Competition/mudsharks-mixed-123/Ladder">Ladder</a></li>
                <li><a href="/Competitions/Competition/mudsharks-mixed-123/Draw">Draw</a></li>
            </ul>
        </body></html>
    """


@pytest.fixture
def sample_draw_html():
    return draw_page(
        [
            match_item(status="Full Time", home_score="17", away_score="12"),
            match_item(
                home="Mudsharks",
                away="Barracudas",
                date="Thursday, 13 March",
                round_label="Round 2",
                datetime_attr="2025-03-13T18:30:00+11:00",
                href="/Competitions/Match/1002",
                home_score="0",
                away_score="0",
            ),
        ]
    )


@pytest.fixture
def sample_roster_html():
    return """
        <html><head><title>Squad</title></head>
        <body>
            <table>
                <tr><th>Name</th><th>Position</th><th>#</th></tr>
                <tr><td class="player-name">Alex Smith</td><td class="position">Link</td><td class="number">7</td></tr>
                <tr><td class="player-name">Jamie Lee</td><td class="position">Wing</td><td class="number">12</td></tr>
                <tr><td class="player-name">Sam Taylor</td><td></td><td></td></tr>
            </table>
        </body></html>
    """
