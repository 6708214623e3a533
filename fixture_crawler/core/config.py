"""
Central configuration for the fixture crawler.

``Settings`` holds process-level knobs (renderer, output, logging) and is
based on pydantic-settings with environment variable / ``.env`` support.
``CrawlInput`` is the per-run input document (``INPUT.json``) with the
camelCase keys the crawler has always accepted.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from .errors import ConfigurationError

MODE_DISCOVER = "discover"
MODE_SCRAPER = "scraper"
MODES = (MODE_DISCOVER, MODE_SCRAPER)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Site
    base_url: str = "https://www.touchfootball.com.au"

    # Renderer
    headless: bool = True
    page_timeout_ms: int = 30000
    selector_timeout_ms: int = 15000
    fetch_retries: int = 3
    fetch_backoff_base: float = 1.0
    settle_delay_ms: int = 500
    accept_consent: bool = True
    user_agent: Optional[str] = None
    locale: str = "en-AU"

    # Extraction policy
    site_timezone: str = "Australia/Sydney"
    max_team_options: int = 20
    html_sample_chars: int = 2000

    # Storage
    input_path: str = "./storage/INPUT.json"
    dataset_path: Optional[str] = "./storage/dataset.jsonl"
    dataset_append: bool = False

    # Monitoring
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class CrawlInput(BaseModel):
    """Run input. Accepts both the camelCase keys and the field names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    start_url: Optional[str] = Field(default=None, alias="startUrl")
    team_name: Optional[str] = Field(default=None, alias="teamName")
    # Any value; the router falls back to 0 for bad indices.
    selected_team_index: Any = Field(default=None, alias="selectedTeamIndex")
    drawer_url: Optional[str] = Field(default=None, alias="drawerUrl")
    mode: Optional[str] = None
    follow_selection: bool = Field(default=True, alias="followSelection")

    @field_validator("start_url", "team_name", "drawer_url", "mode", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def resolve_mode(self) -> str:
        """Return the pipeline to run, inferring it when ``mode`` is omitted.

        Raises ConfigurationError when the required keys for the chosen (or
        inferred) mode are absent.
        """
        mode = self.mode.lower() if self.mode else None
        if mode is None:
            if self.drawer_url:
                return MODE_SCRAPER
            if self.start_url and self.team_name:
                return MODE_DISCOVER
            raise ConfigurationError(
                "Please provide either: startUrl and teamName (discover), "
                "drawerUrl (scraper), or set mode explicitly"
            )
        if mode not in MODES:
            raise ConfigurationError(f"Unknown mode: {self.mode}. Must be 'discover' or 'scraper'")
        if mode == MODE_SCRAPER and not self.drawer_url:
            raise ConfigurationError("Please provide drawerUrl in the input")
        if mode == MODE_DISCOVER and not (self.start_url and self.team_name):
            raise ConfigurationError("Please provide both startUrl and teamName in the input")
        return mode

    def search_url(self) -> str:
        """Search endpoint with the lower-cased, URL-encoded team name appended."""
        if not (self.start_url and self.team_name):
            raise ConfigurationError("Please provide both startUrl and teamName in the input")
        return f"{self.start_url}{quote(self.team_name.lower(), safe='')}"


def load_crawl_input(path: str | Path | None = None, overrides: Optional[dict[str, Any]] = None) -> CrawlInput:
    """Read the input JSON file (if present) and apply non-empty overrides."""
    data: dict[str, Any] = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            try:
                raw = json.loads(p.read_text(encoding="utf-8") or "{}")
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Input file {p} is not valid JSON: {e}") from e
            if not isinstance(raw, dict):
                raise ConfigurationError(f"Input file {p} must contain a JSON object")
            data.update(raw)
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    try:
        return CrawlInput.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid crawl input: {e}") from e


# Global Settings Instance
settings = Settings()
