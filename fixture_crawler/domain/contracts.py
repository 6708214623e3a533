from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

# Typed records shared across stages. Every record is immutable; a later
# crawl pass derives fresh ones instead of updating these in place.


class Stage(str, Enum):
    SEARCH = "search"
    TEAM_SELECTION = "team-selection"
    SCRAPE_DRAW = "scrape-draw"


class RecordType(str, Enum):
    TEAM_OPTION = "team-option"
    MATCH = "match"
    PLAYER = "player"
    ERROR = "error"


def normalize_stage(value: str | Stage) -> Stage:
    """Return the Stage for a tag. Raises ValueError for unknown tags."""
    if isinstance(value, Stage):
        return value
    return Stage((value or "").strip().lower())


@dataclass(frozen=True)
class RenderedPage:
    """Snapshot of a page as handed over by the renderer."""

    url: str
    html: str
    title: str = ""


@dataclass(frozen=True)
class CrawlJob:
    url: str
    stage: Stage
    payload: Mapping[str, Any] = field(default_factory=dict)
    unique_key: str = ""

    def __post_init__(self):
        # freeze the payload so a job cannot be mutated after creation
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))
        if not self.unique_key:
            object.__setattr__(self, "unique_key", f"{self.stage.value}-{self.url}")


@dataclass(frozen=True)
class TeamOption:
    name: str
    url: str
    competition: str = ""
    result_type: str = ""

    def to_record(self, index: Optional[int] = None, selected: bool = False) -> dict[str, Any]:
        rec: dict[str, Any] = {
            "type": RecordType.TEAM_OPTION.value,
            "name": self.name,
            "url": self.url,
            "competition": self.competition,
            "resultType": self.result_type,
        }
        if index is not None:
            rec["index"] = index
            rec["selected"] = selected
        return rec


@dataclass(frozen=True)
class DrawerLink:
    found: bool
    url: str = ""
    link_text: str = ""


@dataclass(frozen=True)
class Match:
    date: str
    round: str
    kick_off_time: str
    date_time_iso: str
    home_team: str
    away_team: str
    venue: str
    match_url: str
    match_url_relative: str
    game_status: str
    is_completed: bool
    home_score: Optional[int]
    away_score: Optional[int]
    source_url: str

    @property
    def identity(self) -> str:
        if self.match_url:
            return self.match_url
        return f"{self.home_team}|{self.away_team}|{self.date_time_iso}"

    def to_record(self) -> dict[str, Any]:
        return {
            "type": RecordType.MATCH.value,
            "date": self.date,
            "round": self.round,
            "kickOffTime": self.kick_off_time,
            "dateTimeISO": self.date_time_iso,
            "homeTeam": self.home_team,
            "awayTeam": self.away_team,
            "venue": self.venue,
            "matchUrl": self.match_url,
            "matchUrlRelative": self.match_url_relative,
            "gameStatus": self.game_status,
            "isCompleted": self.is_completed,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
            "sourceUrl": self.source_url,
        }


@dataclass(frozen=True)
class Player:
    name: str
    position: str = "Unknown"
    jersey_number: str = "Unknown"

    def to_record(self, team_url: str = "", scraped_at: Optional[str] = None) -> dict[str, Any]:
        return {
            "type": RecordType.PLAYER.value,
            "name": self.name,
            "position": self.position,
            "jerseyNumber": self.jersey_number,
            "teamUrl": team_url,
            "scrapedAt": scraped_at,
        }


@dataclass(frozen=True)
class ErrorRecord:
    kind: str
    message: str
    url: str = ""
    context: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))

    @classmethod
    def from_exception(cls, exc: Exception, url: str = "") -> "ErrorRecord":
        kind = getattr(exc, "kind", None) or "ExtractionError"
        return cls(
            kind=kind,
            message=getattr(exc, "message", None) or str(exc) or exc.__class__.__name__,
            url=getattr(exc, "url", "") or url,
            context=getattr(exc, "context", None) or {},
        )

    def to_record(self) -> dict[str, Any]:
        return {
            "type": RecordType.ERROR.value,
            "kind": self.kind,
            "message": self.message,
            "url": self.url,
            "context": dict(self.context),
        }


__all__ = [
    "Stage",
    "RecordType",
    "normalize_stage",
    "RenderedPage",
    "CrawlJob",
    "TeamOption",
    "DrawerLink",
    "Match",
    "Player",
    "ErrorRecord",
]
