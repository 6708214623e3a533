"""
Stage Router

Binds a job's stage tag to its extraction routine and decides the follow-up
jobs:

    search          -> team options, then one team-selection job
    team-selection  -> one scrape-draw job, or scrape the current page
    scrape-draw     -> match or player records (terminal)

Extraction failures never leave the router; they come back as error
records in the ``StageOutcome``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence

from ..common.logging_utils import get_logger
from ..common.parsing import site_timezone
from ..core.config import Settings, settings as default_settings
from ..core.errors import CrawlerError, ExtractionError, NoDataFound, NoResultsFound, UnknownStage
from ..domain.contracts import CrawlJob, ErrorRecord, RenderedPage, Stage
from .dedup import url_identity
from .extractors import fixtures, team_search
from .extractors.base import Document
from .extractors.roster import extract_players
from .extractors.team_page import find_drawer_link

Clock = Callable[[], datetime]


@dataclass
class StageOutcome:
    records: list[dict[str, Any]] = field(default_factory=list)
    jobs: list[CrawlJob] = field(default_factory=list)


@dataclass(frozen=True)
class WaitPlan:
    selectors: Sequence[str] = ()
    network_idle: bool = False


WAIT_PLANS: dict[Stage, WaitPlan] = {
    Stage.SEARCH: WaitPlan(selectors=tuple(team_search.WAIT_SELECTORS)),
    Stage.TEAM_SELECTION: WaitPlan(network_idle=True),
    Stage.SCRAPE_DRAW: WaitPlan(selectors=tuple(fixtures.WAIT_SELECTORS)),
}


def resolve_selection_index(index: Any, count: int) -> int:
    """Index of the option to follow; anything missing, non-numeric or out of range selects 0."""
    if index is None or isinstance(index, bool):
        return 0
    if isinstance(index, float):
        if not index.is_integer():
            return 0
        index = int(index)
    try:
        i = int(str(index).strip())
    except (TypeError, ValueError):
        return 0
    return i if 0 <= i < count else 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StageRouter:
    def __init__(self, settings: Optional[Settings] = None, clock: Optional[Clock] = None):
        self.settings = settings or default_settings
        self.clock = clock or _utcnow
        self.site_tz = site_timezone(self.settings.site_timezone)
        self.logger = get_logger(__name__)
        self._handlers: dict[Stage, Callable[[CrawlJob, Document], StageOutcome]] = {
            Stage.SEARCH: self.handle_search,
            Stage.TEAM_SELECTION: self.handle_team_selection,
            Stage.SCRAPE_DRAW: self.handle_scrape_draw,
        }

    def wait_plan(self, stage: Stage) -> WaitPlan:
        return WAIT_PLANS.get(stage, WaitPlan())

    def route(self, job: CrawlJob, page: RenderedPage) -> StageOutcome:
        """Run the extraction routine bound to the job's stage on a rendered page."""
        doc = Document(url=page.url or job.url, html=page.html, title=page.title)
        stage = getattr(job.stage, "value", job.stage)
        handler = self._handlers.get(job.stage)
        self.logger.info("Processing stage: %s (%s)", stage, doc.url, extra={"stage": stage})
        try:
            if handler is None:
                raise UnknownStage(f"Unknown stage: {stage}", url=doc.url)
            return handler(job, doc)
        except CrawlerError as e:
            self.logger.warning("%s on %s: %s", e.kind, doc.url, e.message, extra={"stage": stage})
            return StageOutcome(records=[ErrorRecord.from_exception(e, doc.url).to_record()])
        except Exception as e:
            self.logger.exception("Extraction failed for %s", doc.url, extra={"stage": stage})
            err = ExtractionError(str(e) or e.__class__.__name__, url=doc.url, context={"stage": stage})
            return StageOutcome(records=[ErrorRecord.from_exception(err).to_record()])

    # ------------------------------------------------------------------
    # Stage handlers
    # ------------------------------------------------------------------

    def handle_search(self, job: CrawlJob, doc: Document) -> StageOutcome:
        team_name = job.payload.get("teamName", "")
        options = team_search.extract_team_options(doc, limit=self.settings.max_team_options)
        if not options:
            raise NoResultsFound(
                "No search results found",
                url=doc.url,
                context=self._page_context(doc, teamName=team_name),
            )

        requested = job.payload.get("selectedTeamIndex")
        idx = resolve_selection_index(requested, len(options))
        if idx == 0 and requested not in (None, 0, "0"):
            self.logger.info("Invalid team index %r. Defaulting to first option.", requested)
        chosen = options[idx]
        self.logger.info(
            "Found %d team options (limited to %d); selected %d: %s",
            len(options), self.settings.max_team_options, idx, chosen.name,
        )

        outcome = StageOutcome(records=[o.to_record(index=i, selected=i == idx) for i, o in enumerate(options)])
        if job.payload.get("followSelection", True):
            outcome.jobs.append(
                CrawlJob(
                    url=chosen.url,
                    stage=Stage.TEAM_SELECTION,
                    payload={"teamName": chosen.name, "competition": chosen.competition},
                    unique_key=f"team-{chosen.url}",
                )
            )
        return outcome

    def handle_team_selection(self, job: CrawlJob, doc: Document) -> StageOutcome:
        link = find_drawer_link(doc)
        if link.found and link.url and url_identity(link.url) != url_identity(doc.url):
            self.logger.info("Found draw link: %s (%s)", link.url, link.link_text)
            payload = dict(job.payload)
            payload["drawerLinkText"] = link.link_text
            return StageOutcome(
                jobs=[CrawlJob(url=link.url, stage=Stage.SCRAPE_DRAW, payload=payload, unique_key=f"draw-{link.url}")]
            )
        self.logger.info("No specific draw link found, scraping current page")
        return self.handle_scrape_draw(job, doc)

    def handle_scrape_draw(self, job: CrawlJob, doc: Document) -> StageOutcome:
        now = self.clock()
        matches = fixtures.extract_matches(doc, now, self.site_tz)
        if matches:
            completed = sum(1 for m in matches if m.is_completed)
            self.logger.info("Found %d matches (%d completed)", len(matches), completed)
            return StageOutcome(records=[m.to_record() for m in matches])

        players = extract_players(doc)
        if players:
            self.logger.info("Found %d players", len(players))
            scraped_at = now.isoformat()
            return StageOutcome(records=[p.to_record(team_url=doc.url, scraped_at=scraped_at) for p in players])

        raise NoDataFound("No match or player data found", url=doc.url, context=self._page_context(doc))

    def _page_context(self, doc: Document, **extra: Any) -> dict[str, Any]:
        context: dict[str, Any] = {"pageTitle": doc.title}
        context.update(extra)
        context["pageHtmlSample"] = doc.body_sample(self.settings.html_sample_chars)
        return context


__all__ = ["StageRouter", "StageOutcome", "WaitPlan", "resolve_selection_index"]
