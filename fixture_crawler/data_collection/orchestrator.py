"""
Crawl Orchestrator

Seeds the first job from the crawl input, pumps the request queue one job
at a time, hands each rendered page to the stage router and pushes the
resulting records to the dataset. A failing job is recorded and the crawl
moves on; only configuration errors abort the run.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..common.logging_utils import get_logger
from ..core.config import MODE_SCRAPER, CrawlInput, Settings, settings as default_settings
from ..core.errors import NavigationTimeout
from ..domain.contracts import CrawlJob, ErrorRecord, RecordType, RenderedPage, Stage
from .dataset import Dataset
from .queue import RequestQueue
from .router import StageRouter


class Renderer(Protocol):
    async def fetch(
        self, url: str, wait_selectors: Sequence[str] | None = None, network_idle: bool = False
    ) -> RenderedPage: ...


def seed_jobs(crawl_input: CrawlInput) -> list[CrawlJob]:
    """Initial job(s) for the run. Raises ConfigurationError for unusable input."""
    mode = crawl_input.resolve_mode()
    if mode == MODE_SCRAPER:
        return [CrawlJob(url=crawl_input.drawer_url, stage=Stage.SCRAPE_DRAW, unique_key="drawer-scrape")]
    return [
        CrawlJob(
            url=crawl_input.search_url(),
            stage=Stage.SEARCH,
            payload={
                "teamName": crawl_input.team_name,
                "selectedTeamIndex": crawl_input.selected_team_index,
                "followSelection": crawl_input.follow_selection,
            },
            unique_key=f"search-{crawl_input.team_name}",
        )
    ]


class CrawlOrchestrator:
    """Drives a single crawl run over injected collaborators."""

    def __init__(
        self,
        renderer: Renderer,
        settings: Optional[Settings] = None,
        queue: Optional[RequestQueue] = None,
        dataset: Optional[Dataset] = None,
        router: Optional[StageRouter] = None,
    ):
        self.settings = settings or default_settings
        self.renderer = renderer
        self.queue = queue or RequestQueue()
        if dataset is None:
            dataset = Dataset(self.settings.dataset_path, append=self.settings.dataset_append)
        self.dataset = dataset
        self.router = router or StageRouter(self.settings)
        self.logger = get_logger(__name__)
        self.errors: list[dict[str, Any]] = []

    async def run(self, crawl_input: CrawlInput) -> dict[str, Any]:
        mode = crawl_input.resolve_mode()
        for job in seed_jobs(crawl_input):
            self.queue.add(job)
        self.logger.info("Starting in %s mode", mode)

        start_time = datetime.now()
        jobs_processed = 0
        while (job := self.queue.fetch_next()) is not None:
            await self.process_job(job)
            self.queue.mark_handled(job)
            jobs_processed += 1

        by_type = self.dataset.counts_by_type()
        summary = {
            "mode": mode,
            "status": "completed_with_errors" if self.errors else "success",
            "jobs_processed": jobs_processed,
            "records_emitted": len(self.dataset),
            "records_by_type": by_type,
            "errors": [e["kind"] for e in self.errors],
            "duration_seconds": (datetime.now() - start_time).total_seconds(),
        }
        self.logger.info(
            "Crawl finished: %d jobs, %d records, %d errors",
            jobs_processed, summary["records_emitted"], len(self.errors),
        )
        return summary

    async def process_job(self, job: CrawlJob) -> None:
        plan = self.router.wait_plan(job.stage)
        try:
            page = await self.renderer.fetch(
                job.url, wait_selectors=list(plan.selectors), network_idle=plan.network_idle
            )
        except NavigationTimeout as e:
            self.logger.error("Request %s failed: %s", job.url, e.message)
            await self.emit(ErrorRecord.from_exception(e, job.url).to_record())
            return
        except Exception as e:
            self.logger.error("Renderer failed for %s: %s", job.url, e)
            await self.emit(
                ErrorRecord(
                    kind=NavigationTimeout.kind,
                    message=str(e) or e.__class__.__name__,
                    url=job.url,
                    context={"stage": job.stage.value},
                ).to_record()
            )
            return

        outcome = self.router.route(job, page)
        for record in outcome.records:
            await self.emit(record)
        for follow_up in outcome.jobs:
            self.queue.add(follow_up)

    async def emit(self, record: dict[str, Any]) -> None:
        if record.get("type") == RecordType.ERROR.value:
            self.errors.append(record)
        await self.dataset.push_data(record)


__all__ = ["CrawlOrchestrator", "Renderer", "seed_jobs"]
