"""
Command-line interface for running crawls.
Usage examples:
  python -m fixture_crawler.apps.cli run --input storage/INPUT.json
  python -m fixture_crawler.apps.cli discover --start-url "https://.../Search?q=" --team-name "Mudsharks" --index 1
  python -m fixture_crawler.apps.cli scrape --drawer-url "https://.../Competitions/Competition/xyz/Draw"
"""

import asyncio
import json
from typing import Any, Optional

import click

from fixture_crawler.common.logging_utils import configure_logging, get_logger
from fixture_crawler.common.playwright_utils import PlaywrightRenderer
from fixture_crawler.core.config import MODE_DISCOVER, MODE_SCRAPER, CrawlInput, Settings, load_crawl_input
from fixture_crawler.core.errors import ConfigurationError
from fixture_crawler.data_collection.dataset import Dataset
from fixture_crawler.data_collection.orchestrator import CrawlOrchestrator

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2

logger = get_logger("fixture_crawler.cli")


async def cmd_run(crawl_input: CrawlInput, cfg: Settings, dataset_path: Optional[str] = None) -> dict[str, Any]:
    dataset = Dataset(dataset_path if dataset_path is not None else cfg.dataset_path, append=cfg.dataset_append)
    orch = CrawlOrchestrator(PlaywrightRenderer(cfg), settings=cfg, dataset=dataset)
    return await orch.run(crawl_input)


def _execute(input_path: Optional[str], overrides: dict[str, Any], output: Optional[str], log_level: Optional[str]) -> int:
    cfg = Settings()
    configure_logging(service="fixture-crawler", level=log_level or cfg.log_level)
    try:
        crawl_input = load_crawl_input(input_path or cfg.input_path, overrides)
        crawl_input.resolve_mode()
        summary = asyncio.run(cmd_run(crawl_input, cfg, output))
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e.message)
        click.echo(f"Configuration error: {e.message}", err=True)
        return EXIT_CONFIG_ERROR
    click.echo(json.dumps(summary, ensure_ascii=False, indent=2))
    return EXIT_OK


@click.group()
def cli():
    """Staged crawler for league search, team selection and draw extraction."""


_common_options = [
    click.option("--input", "input_path", type=click.Path(dir_okay=False), default=None,
                 help="Input JSON file (default: settings.input_path)"),
    click.option("--output", type=click.Path(dir_okay=False), default=None,
                 help="Dataset JSONL file (default: settings.dataset_path)"),
    click.option("--log-level", default=None, help="Override LOG_LEVEL"),
]


def common_options(func):
    for option in reversed(_common_options):
        func = option(func)
    return func


@cli.command()
@common_options
@click.option("--mode", type=click.Choice([MODE_DISCOVER, MODE_SCRAPER]), default=None,
              help="Pipeline to run; inferred from the input when omitted")
def run(input_path, output, log_level, mode):
    """Run a crawl from the input file, inferring the mode."""
    raise SystemExit(_execute(input_path, {"mode": mode}, output, log_level))


@cli.command()
@common_options
@click.option("--start-url", default=None, help="Search endpoint; the team name is appended")
@click.option("--team-name", default=None, help="Team to search for")
@click.option("--index", "selected_team_index", default=None, help="0-based option to follow")
@click.option("--no-follow", is_flag=True, default=False, help="Stop after listing team options")
def discover(input_path, output, log_level, start_url, team_name, selected_team_index, no_follow):
    """Search for a team, follow the selected option and scrape its draw."""
    overrides = {
        "mode": MODE_DISCOVER,
        "startUrl": start_url,
        "teamName": team_name,
        "selectedTeamIndex": selected_team_index,
        "followSelection": False if no_follow else None,
    }
    raise SystemExit(_execute(input_path, overrides, output, log_level))


@cli.command()
@common_options
@click.option("--drawer-url", default=None, help="Draw (fixtures) page to scrape directly")
def scrape(input_path, output, log_level, drawer_url):
    """Scrape matches or players from a draw page."""
    overrides = {"mode": MODE_SCRAPER, "drawerUrl": drawer_url}
    raise SystemExit(_execute(input_path, overrides, output, log_level))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
