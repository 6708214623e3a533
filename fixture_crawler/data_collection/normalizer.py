"""
Normalizer and match-completion inference.

Markup on draw pages is inconsistent about marking a match as played, so
completion is decided from three signals in a fixed order:

1. status text matching a completion keyword (whitespace inside the text is
   ignored, so ``"F\\nin\\tal"`` reads as ``Final``);
2. the kickoff timestamp: a future kickoff is never completed and a 0-0 is
   treated as an unset placeholder; a past kickoff needs a positive score;
3. without a timestamp, a strictly positive score.

A match completed on score evidence alone with no status text gets the
synthesized status ``Full Time``. Scores stay ``None`` unless a digit was
observed in the document.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Optional

from ..common.parsing import clean_text, parse_iso_datetime, parse_score, squash
from ..domain.contracts import Match, Player

# (whitespace-free lower-case keyword, canonical label), checked in order
COMPLETION_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("fulltime", "Full Time"),
    ("final", "Final"),
    ("complete", "Complete"),
    ("finished", "Finished"),
)
# Phrases that contain a keyword without meaning the match is over: negations
# and finals-series round names. Removed before keyword matching.
NON_COMPLETION_PHRASES: tuple[str, ...] = (
    "incomplete",
    "notcompleted",
    "notcomplete",
    "notfinished",
    "unfinished",
    "grandfinal",
    "preliminaryfinal",
    "qualifyingfinal",
    "eliminationfinal",
    "semifinal",
    "quarterfinal",
)
SYNTHESIZED_STATUS = "Full Time"
UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Completion:
    game_status: str
    is_completed: bool
    home_score: Optional[int]
    away_score: Optional[int]


@dataclass(frozen=True)
class RawMatch:
    """Raw text pulled from one match container, before normalisation."""

    date: str = ""
    round: str = ""
    kick_off_time: str = ""
    date_time: str = ""
    home_team: str = ""
    away_team: str = ""
    venue: str = ""
    match_url: str = ""
    match_url_relative: str = ""
    status_text: str = ""
    home_score_text: Optional[str] = None
    away_score_text: Optional[str] = None


def classify_status(status_text: str | None) -> Optional[str]:
    """Canonical completion label for the status text, or None."""
    compact = squash(status_text).replace("-", "")
    for phrase in NON_COMPLETION_PHRASES:
        compact = compact.replace(phrase, "")
    if not compact:
        return None
    for keyword, label in COMPLETION_KEYWORDS:
        if keyword in compact:
            return label
    return None


def _positive(score: Optional[int]) -> bool:
    return score is not None and score > 0


def infer_completion(
    status_text: str | None,
    kickoff: str | datetime | None,
    home_score: Optional[int],
    away_score: Optional[int],
    now: datetime,
    site_tz: tzinfo | None = None,
) -> Completion:
    """Completion, status label and cleaned scores. Naive kickoffs are read in ``site_tz`` (UTC when omitted)."""
    status = clean_text(status_text)
    label = classify_status(status)
    if label:
        return Completion(label, True, home_score, away_score)

    if isinstance(kickoff, datetime):
        ko = kickoff if kickoff.tzinfo else kickoff.replace(tzinfo=site_tz or timezone.utc)
    else:
        ko = parse_iso_datetime(kickoff, site_tz)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    if ko is not None and ko > now:
        if home_score == 0 and away_score == 0:
            home_score = away_score = None
        return Completion(status, False, home_score, away_score)

    # past kickoff or no usable timestamp: only a positive score is evidence
    completed = _positive(home_score) or _positive(away_score)
    if completed and not status:
        status = SYNTHESIZED_STATUS
    return Completion(status, completed, home_score, away_score)


def normalize_match(raw: RawMatch, source_url: str, now: datetime, site_tz: tzinfo | None = None) -> Match:
    home_score = parse_score(raw.home_score_text)
    away_score = parse_score(raw.away_score_text)
    parsed_kickoff = parse_iso_datetime(raw.date_time, site_tz)
    completion = infer_completion(raw.status_text, parsed_kickoff, home_score, away_score, now)
    return Match(
        date=clean_text(raw.date),
        round=clean_text(raw.round),
        kick_off_time=clean_text(raw.kick_off_time),
        # the markup value is kept as written; no offset is added to naive values
        date_time_iso=clean_text(raw.date_time),
        home_team=clean_text(raw.home_team),
        away_team=clean_text(raw.away_team),
        venue=clean_text(raw.venue),
        match_url=(raw.match_url or "").strip(),
        match_url_relative=(raw.match_url_relative or "").strip(),
        game_status=completion.game_status,
        is_completed=completion.is_completed,
        home_score=completion.home_score,
        away_score=completion.away_score,
        source_url=source_url,
    )


def normalize_player(name: str | None, position: str | None = None, jersey_number: str | None = None) -> Player:
    return Player(
        name=clean_text(name),
        position=clean_text(position) or UNKNOWN,
        jersey_number=clean_text(jersey_number) or UNKNOWN,
    )


__all__ = [
    "Completion",
    "RawMatch",
    "classify_status",
    "infer_completion",
    "normalize_match",
    "normalize_player",
    "COMPLETION_KEYWORDS",
]
