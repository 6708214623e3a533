"""Async Playwright rendering helpers.

This is the browser collaborator of the crawler: it brings a URL to a ready
state, applies tolerant waits and returns a snapshot (final URL, title,
HTML). Extraction never touches the live page.
"""
from __future__ import annotations

import asyncio
import contextlib
import random
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Sequence

from playwright.async_api import Page, async_playwright

from ..core.errors import NavigationTimeout
from .logging_utils import get_logger
from ..domain.contracts import RenderedPage

logger = get_logger(__name__)


class PlaywrightFetchError(NavigationTimeout):
    pass


@dataclass
class FetchOptions:
    url: str
    wait_until: str = "domcontentloaded"
    wait_selectors: Sequence[str] | None = None
    selector_timeout_ms: int = 15000
    network_idle: bool = False
    settle_ms: int = 500
    timeout_ms: int = 30000
    retries: int = 3
    backoff_base: float = 1.0
    headless: bool = True
    user_agent: str | None = None
    locale: str | None = None
    consent: bool = True


async def _apply_waits(page: Page, opts: FetchOptions) -> None:
    # Missing selectors are tolerated; the snapshot is taken regardless.
    if opts.wait_selectors:
        for sel in opts.wait_selectors:
            try:
                await page.wait_for_selector(sel, timeout=opts.selector_timeout_ms)
                logger.debug("Selector ready: %s", sel)
                break
            except Exception:
                logger.debug("Selector not found within timeout: %s", sel)
                continue
    if opts.network_idle:
        with contextlib.suppress(Exception):
            await page.wait_for_load_state("networkidle", timeout=opts.timeout_ms)
    if opts.settle_ms > 0:
        await page.wait_for_timeout(opts.settle_ms)


@asynccontextmanager
async def browser_page(*, headless: bool = True, user_agent: str | None = None,
                       locale: str | None = None) -> AsyncIterator[Page]:
    """Async context manager yielding a Playwright Page with standard teardown."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        context_args: dict[str, Any] = {}
        if user_agent:
            context_args["user_agent"] = user_agent
        if locale:
            context_args["locale"] = locale
        context = await browser.new_context(**context_args)
        page = await context.new_page()
        try:
            yield page
        finally:
            with contextlib.suppress(Exception):
                await context.close()
            with contextlib.suppress(Exception):
                await browser.close()


async def accept_consent(page: Page) -> bool:
    """Click the first visible cookie/consent button. Returns True if one was clicked."""
    candidates = [
        "button:has-text('Accept All')",
        "button:has-text('Accept')",
        "button[aria-label*='Accept']",
        "#onetrust-accept-btn-handler",
        "[id*='consent'] button",
        "button:has-text('I Accept')",
        "button:has-text('Agree')",
    ]
    for sel in candidates:
        try:
            el = await page.query_selector(sel)
            if el:
                await el.click()
                await page.wait_for_timeout(300)
                return True
        except Exception:
            continue
    return False


async def fetch_rendered(opts: FetchOptions) -> RenderedPage:
    """Navigate with retries and exponential backoff; return the rendered snapshot.

    Raises PlaywrightFetchError (a NavigationTimeout) after exhausting retries.
    """
    last_err: Exception | None = None
    backoff = opts.backoff_base
    for attempt in range(1, opts.retries + 1):
        try:
            async with browser_page(headless=opts.headless, user_agent=opts.user_agent,
                                    locale=opts.locale) as page:
                await page.goto(opts.url, wait_until=opts.wait_until, timeout=opts.timeout_ms)
                if opts.consent:
                    with contextlib.suppress(Exception):
                        await accept_consent(page)
                await _apply_waits(page, opts)
                html = await page.content()
                title = ""
                with contextlib.suppress(Exception):
                    title = await page.title()
                if html:
                    return RenderedPage(url=page.url or opts.url, html=html, title=title)
        except Exception as e:  # pragma: no cover - network/env variability
            last_err = e
            logger.warning("Attempt %d/%d failed for %s: %s", attempt, opts.retries, opts.url, e)
        if attempt < opts.retries:
            jitter = random.uniform(0, 0.5)
            await asyncio.sleep(backoff + jitter)
            backoff = min(backoff * 2, 8.0)
    raise PlaywrightFetchError(
        f"Failed to fetch {opts.url} after {opts.retries} attempts: {last_err}",
        url=opts.url,
        context={"attempts": opts.retries},
    )


class PlaywrightRenderer:
    """Renderer used by the orchestrator: ``await renderer.fetch(url, ...)``."""

    def __init__(self, settings):
        self.settings = settings

    def options_for(self, url: str, wait_selectors: Sequence[str] | None = None,
                    network_idle: bool = False) -> FetchOptions:
        s = self.settings
        return FetchOptions(
            url=url,
            wait_selectors=list(wait_selectors or []),
            selector_timeout_ms=s.selector_timeout_ms,
            network_idle=network_idle,
            settle_ms=s.settle_delay_ms,
            timeout_ms=s.page_timeout_ms,
            retries=s.fetch_retries,
            backoff_base=s.fetch_backoff_base,
            headless=s.headless,
            user_agent=s.user_agent,
            locale=s.locale,
            consent=s.accept_consent,
        )

    async def fetch(self, url: str, wait_selectors: Sequence[str] | None = None,
                    network_idle: bool = False) -> RenderedPage:
        return await fetch_rendered(self.options_for(url, wait_selectors, network_idle))


__all__ = [
    "PlaywrightFetchError",
    "RenderedPage",
    "FetchOptions",
    "browser_page",
    "accept_consent",
    "fetch_rendered",
    "PlaywrightRenderer",
]
