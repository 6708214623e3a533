"""
Core Module
Central configuration, crawl input and error taxonomy
"""

from .config import CrawlInput, Settings, settings
from .errors import ConfigurationError, CrawlerError, NavigationTimeout, NoDataFound, NoResultsFound

__all__ = [
    "settings",
    "Settings",
    "CrawlInput",
    "CrawlerError",
    "ConfigurationError",
    "NavigationTimeout",
    "NoDataFound",
    "NoResultsFound",
]
