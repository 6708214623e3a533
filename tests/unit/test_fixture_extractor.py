from conftest import DRAW_URL, NOW, SITE, draw_page, match_item

from fixture_crawler.data_collection.extractors.base import Document
from fixture_crawler.data_collection.extractors.fixtures import (
    extract_matches,
    grid_rows,
    team_list_items,
    whole_page,
)


def _doc(html: str) -> Document:
    return Document(url=DRAW_URL, html=html)


def test_grid_matches_are_normalized(sample_draw_html):
    played, upcoming = extract_matches(_doc(sample_draw_html), NOW)

    assert played.date == "Thursday, 6 February"
    assert played.round == "Round 1"
    assert played.kick_off_time == "6:30 PM"
    assert played.date_time_iso == "2025-02-06T18:30:00+11:00"
    assert (played.home_team, played.away_team) == ("Mudsharks", "Stingrays")
    assert played.venue == "Field 3"
    assert played.match_url == f"{SITE}/Competitions/Match/1001"
    assert played.match_url_relative == "/Competitions/Match/1001"
    assert played.game_status == "Full Time"
    assert played.is_completed is True
    assert (played.home_score, played.away_score) == (17, 12)
    assert played.source_url == DRAW_URL

    assert upcoming.round == "Round 2"
    assert upcoming.is_completed is False
    assert upcoming.game_status == ""
    assert (upcoming.home_score, upcoming.away_score) == (None, None)


def test_match_record_keys(sample_draw_html):
    record = extract_matches(_doc(sample_draw_html), NOW)[0].to_record()
    assert record["type"] == "match"
    assert record["homeTeam"] == "Mudsharks"
    assert record["dateTimeISO"] == "2025-02-06T18:30:00+11:00"
    assert record["isCompleted"] is True
    assert record["homeScore"] == 17
    assert record["matchUrlRelative"] == "/Competitions/Match/1001"


def test_past_match_without_status_is_completed_by_score():
    html = draw_page([match_item(home_score="14", away_score="0")])
    (m,) = extract_matches(_doc(html), NOW)
    assert m.is_completed is True
    assert m.game_status == "Full Time"


def test_past_nil_all_is_not_completed():
    html = draw_page([match_item(home_score="0", away_score="0")])
    (m,) = extract_matches(_doc(html), NOW)
    assert m.is_completed is False
    assert (m.home_score, m.away_score) == (0, 0)


def test_missing_score_elements_are_null():
    (m,) = extract_matches(_doc(draw_page([match_item()])), NOW)
    assert m.home_score is None
    assert m.away_score is None
    assert m.is_completed is False


def test_status_split_across_markup():
    html = draw_page([match_item(status="F<br>in\tal", datetime_attr="")])
    (m,) = extract_matches(_doc(html), NOW)
    assert m.is_completed is True
    assert m.game_status == "Final"


def test_duplicate_matches_are_dropped():
    html = draw_page([match_item(), match_item(venue="Field 9")])
    matches = extract_matches(_doc(html), NOW)
    assert len(matches) == 1
    assert matches[0].venue == "Field 3"


def test_matches_without_link_use_teams_and_kickoff_as_identity():
    html = draw_page(
        [
            match_item(href="/Venues/x"),
            match_item(href="/Venues/x", datetime_attr="2025-02-13T18:30:00+11:00"),
            match_item(href="/Venues/x"),
        ]
    )
    matches = extract_matches(_doc(html), NOW)
    assert len(matches) == 2
    assert all(m.match_url == "" for m in matches)


def test_list_items_outside_grid_are_a_fallback():
    html = f"""
        <html><body>
            <ul class="fixtures">
                <li><ul>{match_item()}</ul></li>
            </ul>
        </body></html>
    """
    doc = _doc(html)
    assert not grid_rows(doc)
    raws = team_list_items(doc)
    assert len(raws) == 1
    assert extract_matches(doc, NOW)[0].home_team == "Mudsharks"


def test_single_match_page():
    html = """
        <html><body>
            <div class="match-team__name--home">Mudsharks</div>
            <div class="match-team__score--home">3</div>
            <div class="match-team__name--away">Stingrays</div>
            <div class="match-team__score--away">5</div>
        </body></html>
    """
    doc = _doc(html)
    assert whole_page(doc)
    (m,) = extract_matches(doc, NOW)
    assert (m.home_score, m.away_score) == (3, 5)
    assert m.is_completed is True


def test_page_without_matches():
    assert extract_matches(_doc("<html><body><p>Draw not yet released</p></body></html>"), NOW) == []
