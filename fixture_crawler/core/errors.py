"""
Error taxonomy for the crawler.

Only ``ConfigurationError`` is allowed to abort a run. Every other error is
raised inside a stage handler or the renderer and converted into an error
record at the router/orchestrator boundary.
"""

from __future__ import annotations

from typing import Any, Optional


class CrawlerError(Exception):
    """Base class for all crawler errors. ``kind`` is the record discriminator."""

    kind: str = "CrawlerError"

    def __init__(self, message: str, *, url: str = "", context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.url = url
        self.context = dict(context or {})


class ConfigurationError(CrawlerError):
    """Required input is missing or contradictory. Fatal."""

    kind = "ConfigurationError"


class NoResultsFound(CrawlerError):
    """The search page produced zero team options."""

    kind = "NoResultsFound"


class NoDataFound(CrawlerError):
    """A draw page was reached but yielded neither matches nor players."""

    kind = "NoDataFound"


class NavigationTimeout(CrawlerError):
    """The renderer could not bring the page to a ready state."""

    kind = "NavigationTimeout"


class ExtractionError(CrawlerError):
    """Unexpected failure inside an extraction routine."""

    kind = "ExtractionError"


class UnknownStage(CrawlerError):
    kind = "UnknownStage"


__all__ = [
    "CrawlerError",
    "ConfigurationError",
    "NoResultsFound",
    "NoDataFound",
    "NavigationTimeout",
    "ExtractionError",
    "UnknownStage",
]
