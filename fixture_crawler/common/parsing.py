import re
from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from bs4 import BeautifulSoup

from .logging_utils import get_logger

_WS_RE = re.compile(r"\s+")
_DIGITS_RE = re.compile(r"\d+")


def clean_text(s: str | None) -> str:
    """Collapse every whitespace run (spaces, newlines, tabs) to one space and trim."""
    if not s:
        return ""
    return _WS_RE.sub(" ", s).strip()


def squash(s: str | None) -> str:
    """Lower-case and drop all whitespace, for keyword comparisons."""
    if not s:
        return ""
    return _WS_RE.sub("", s).lower()


def first_line(s: str | None) -> str:
    """First non-empty line of a multi-line text block, trimmed."""
    for line in (s or "").splitlines():
        line = line.strip()
        if line:
            return line
    return ""


def parse_score(s: str | None) -> int | None:
    """First run of digits in the cleaned text. No digits means no score, never 0."""
    m = _DIGITS_RE.search(clean_text(s))
    return int(m.group(0)) if m else None


def parse_iso_datetime(s: str | None, default_tz: tzinfo | None = None) -> datetime | None:
    """Parse an ISO-8601 timestamp. Returns None if unparseable.

    Values without an offset are read in ``default_tz`` (UTC when omitted).
    """
    s = clean_text(s)
    if not s:
        return None
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=default_tz or timezone.utc)
    return dt


def site_timezone(name: str | None) -> tzinfo:
    """Zone used for naive kickoff timestamps; unknown names fall back to UTC."""
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        get_logger(__name__).warning("Unknown site timezone %r, using UTC", name)
        return timezone.utc


def soup_from_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")
