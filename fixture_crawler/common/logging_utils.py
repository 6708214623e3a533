"""Central logging utilities for the fixture crawler.

- One place to configure logging for the CLI and for library use.
- Human-readable console output (coloured on a TTY) or structured JSON lines
  (``LOG_FORMAT=json``), so crawl runs can be shipped to a log collector.
- Environment variables:
    LOG_LEVEL=INFO|DEBUG|... (default: INFO, overridable by argument)
    LOG_FORMAT=console|json (default: console)
    LOG_NO_COLOR=1 disables colour even on a TTY.
    LOG_TIMEZONE=utc|local (default: local)

Usage:
    from fixture_crawler.common.logging_utils import configure_logging, get_logger
    configure_logging(service="fixture-crawler")  # idempotent
    logger = get_logger(__name__)
    logger.info("Processing stage: %s", "search", extra={"stage": "search"})

Calling configure_logging() again is a no-op unless ``force=True``.
"""
from __future__ import annotations

import json
import logging
import os
import sys
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_CONFIG_LOCK = threading.Lock()
_ALREADY_CONFIGURED = False

# Attributes every LogRecord carries; anything else came in via ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


class ColorFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\x1b[38;5;245m",
        "INFO": "\x1b[38;5;39m",
        "WARNING": "\x1b[38;5;214m",
        "ERROR": "\x1b[38;5;196m",
        "CRITICAL": "\x1b[48;5;196m\x1b[38;5;231m",
    }
    RESET = "\x1b[0m"

    def __init__(self, tz_local: bool):
        super().__init__()
        self.tz_local = tz_local

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        ts = _timestamp(record, self.tz_local).strftime("%Y-%m-%d %H:%M:%S")
        base = f"{ts} | {record.levelname:<8} | {record.name} | {record.getMessage()}"
        stage = getattr(record, "stage", None)
        if stage:
            base = f"{base} [{stage}]"
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        color = self.COLORS.get(record.levelname, "")
        return f"{color}{base}{self.RESET}" if color else base


class JsonFormatter(logging.Formatter):
    def __init__(self, tz_local: bool):
        super().__init__()
        self.tz_local = tz_local

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "ts": _timestamp(record, self.tz_local).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in payload or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                payload[key] = value
            except (TypeError, ValueError):
                payload[key] = repr(value)
        return json.dumps(payload, ensure_ascii=False)


def _timestamp(record: logging.LogRecord, tz_local: bool) -> datetime:
    ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
    return ts.astimezone() if tz_local else ts


def configure_logging(
    service: str | None = None,
    *,
    level: str | None = None,
    force: bool = False,
) -> None:
    """Configure root logging once.

    Parameters
    ----------
    service: Optional service name, attached as ``service`` to every record
        the root handler emits, including loggers created before this call.
    level: Log level; falls back to ``LOG_LEVEL`` then INFO.
    force: Reconfigure even if already configured.
    """
    global _ALREADY_CONFIGURED
    with _CONFIG_LOCK:
        if _ALREADY_CONFIGURED and not force:
            return

        log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
        log_format = os.getenv("LOG_FORMAT", "console").lower()
        tz_local = os.getenv("LOG_TIMEZONE", "local").lower() != "utc"
        no_color = os.getenv("LOG_NO_COLOR") == "1"

        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)

        if log_format == "json":
            formatter: logging.Formatter = JsonFormatter(tz_local=tz_local)
        elif sys.stderr.isatty() and not no_color:
            formatter = ColorFormatter(tz_local=tz_local)
        else:
            formatter = logging.Formatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )

        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        if service:
            handler.addFilter(_ServiceFilter(service))
        root.addHandler(handler)
        root.setLevel(getattr(logging, log_level, logging.INFO))

        _ServiceLoggerAdapter.BASE_SERVICE = service
        _ALREADY_CONFIGURED = True


def get_logger(name: str) -> logging.Logger | logging.LoggerAdapter:
    base = logging.getLogger(name)
    service = _ServiceLoggerAdapter.BASE_SERVICE
    if service:
        return _ServiceLoggerAdapter(base, {"service": service})
    return base


class _ServiceFilter(logging.Filter):
    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "service", None):
            record.service = self.service
        return True


class _ServiceLoggerAdapter(logging.LoggerAdapter):
    BASE_SERVICE: Optional[str] = None

    def process(self, msg: Any, kwargs: Dict[str, Any]):  # noqa: D401
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("service", self.extra.get("service"))
        kwargs["extra"] = extra
        return msg, kwargs


__all__ = [
    "configure_logging",
    "get_logger",
]
