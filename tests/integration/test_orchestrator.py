import json

import pytest
from conftest import DRAW_URL, SEARCH_URL, SITE, TEAM_URL

from fixture_crawler.common.playwright_utils import PlaywrightFetchError
from fixture_crawler.core.config import CrawlInput
from fixture_crawler.core.errors import ConfigurationError
from fixture_crawler.data_collection.dataset import Dataset
from fixture_crawler.data_collection.extractors import team_search
from fixture_crawler.data_collection.orchestrator import CrawlOrchestrator, seed_jobs
from fixture_crawler.data_collection.queue import RequestQueue
from fixture_crawler.data_collection.router import StageRouter
from fixture_crawler.domain.contracts import RenderedPage, Stage


class FakeRenderer:
    """Serves canned HTML per URL; URLs mapped to an exception raise it."""

    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    async def fetch(self, url, wait_selectors=None, network_idle=False):
        self.calls.append((url, list(wait_selectors or []), network_idle))
        page = self.pages[url]
        if isinstance(page, Exception):
            raise page
        return RenderedPage(url=url, html=page)


@pytest.fixture
def build(settings, fixed_clock, tmp_path):
    def _build(pages, queue=None):
        renderer = FakeRenderer(pages)
        orch = CrawlOrchestrator(
            renderer,
            settings=settings,
            queue=queue,
            dataset=Dataset(tmp_path / "dataset.jsonl"),
            router=StageRouter(settings, clock=fixed_clock),
        )
        return orch, renderer

    return _build


def discover_input(**extra):
    return CrawlInput(startUrl=f"{SITE}/Search?q=", teamName="Mudsharks", **extra)


def test_seed_jobs():
    (search,) = seed_jobs(discover_input(selectedTeamIndex=1))
    assert search.url == SEARCH_URL
    assert search.stage is Stage.SEARCH
    assert search.unique_key == "search-Mudsharks"
    assert search.payload["selectedTeamIndex"] == 1

    (scrape,) = seed_jobs(CrawlInput(drawerUrl=DRAW_URL))
    assert scrape.stage is Stage.SCRAPE_DRAW
    assert scrape.unique_key == "drawer-scrape"


@pytest.mark.asyncio
async def test_discover_flow(build, sample_search_html, sample_team_html, sample_draw_html, tmp_path):
    orch, renderer = build({SEARCH_URL: sample_search_html, TEAM_URL: sample_team_html, DRAW_URL: sample_draw_html})

    summary = await orch.run(discover_input())

    assert summary["mode"] == "discover"
    assert summary["status"] == "success"
    assert summary["jobs_processed"] == 3
    assert summary["records_by_type"] == {"team-option": 2, "match": 2}
    assert summary["errors"] == []

    assert [c[0] for c in renderer.calls] == [SEARCH_URL, TEAM_URL, DRAW_URL]
    assert renderer.calls[0][1] == team_search.WAIT_SELECTORS
    assert renderer.calls[1][2] is True
    assert renderer.calls[2][1] == ["ul.l-grid"]

    lines = [json.loads(line) for line in (tmp_path / "dataset.jsonl").read_text(encoding="utf-8").splitlines()]
    assert [r["type"] for r in lines] == ["team-option", "team-option", "match", "match"]
    assert lines[0]["selected"] is True
    played, upcoming = lines[2], lines[3]
    assert played["isCompleted"] is True and (played["homeScore"], played["awayScore"]) == (17, 12)
    assert upcoming["isCompleted"] is False and upcoming["homeScore"] is None


@pytest.mark.asyncio
async def test_discover_without_follow(build, sample_search_html):
    orch, renderer = build({SEARCH_URL: sample_search_html})
    summary = await orch.run(discover_input(followSelection=False))
    assert summary["jobs_processed"] == 1
    assert summary["records_by_type"] == {"team-option": 2}


@pytest.mark.asyncio
async def test_scraper_mode(build, sample_draw_html):
    orch, renderer = build({DRAW_URL: sample_draw_html})
    summary = await orch.run(CrawlInput(drawerUrl=DRAW_URL))
    assert summary["mode"] == "scraper"
    assert summary["jobs_processed"] == 1
    assert summary["records_by_type"] == {"match": 2}
    assert [c[0] for c in renderer.calls] == [DRAW_URL]


@pytest.mark.asyncio
async def test_navigation_failure_is_recorded_and_crawl_ends(build, sample_search_html):
    orch, _ = build(
        {SEARCH_URL: sample_search_html, TEAM_URL: PlaywrightFetchError("Timeout 30000ms exceeded", url=TEAM_URL)}
    )
    summary = await orch.run(discover_input())

    assert summary["status"] == "completed_with_errors"
    assert summary["errors"] == ["NavigationTimeout"]
    assert summary["jobs_processed"] == 2
    err = orch.dataset.items[-1]
    assert err["type"] == "error"
    assert err["url"] == TEAM_URL


@pytest.mark.asyncio
async def test_failed_job_does_not_stop_other_jobs(build, sample_draw_html):
    broken = f"{SITE}/Competitions/Competition/broken/Draw"
    queue = RequestQueue()
    queue.enqueue(broken, Stage.SCRAPE_DRAW)
    orch, renderer = build({broken: RuntimeError("browser crashed"), DRAW_URL: sample_draw_html}, queue=queue)

    summary = await orch.run(CrawlInput(drawerUrl=DRAW_URL))

    assert [c[0] for c in renderer.calls] == [broken, DRAW_URL]
    assert summary["jobs_processed"] == 2
    assert summary["records_by_type"] == {"error": 1, "match": 2}
    err = orch.dataset.items[0]
    assert err["kind"] == "NavigationTimeout"
    assert err["message"] == "browser crashed"
    assert err["context"] == {"stage": "scrape-draw"}


@pytest.mark.asyncio
async def test_empty_search_results(build):
    orch, renderer = build({SEARCH_URL: "<html><head><title>Search</title></head><body></body></html>"})
    summary = await orch.run(discover_input())
    assert summary["errors"] == ["NoResultsFound"]
    assert summary["jobs_processed"] == 1
    assert len(renderer.calls) == 1


@pytest.mark.asyncio
async def test_configuration_error_aborts_before_rendering(build):
    orch, renderer = build({})
    with pytest.raises(ConfigurationError):
        await orch.run(CrawlInput(teamName="Mudsharks"))
    assert renderer.calls == []
    assert len(orch.dataset) == 0
