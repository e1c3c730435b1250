"""Calendar dates as stored in the ledger files."""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timezone

DATE_FORMAT = "%Y-%m-%d"

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


def today() -> date:
    """The current date in UTC."""
    return datetime.now(timezone.utc).date()


def _parse_rfc3339(value: str) -> date | None:
    match = _RFC3339.fullmatch(value)
    if match is None:
        return None
    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    offset = match.group(8)
    try:
        datetime(year, month, day, hour, minute, min(second, 59))
    except ValueError:
        return None
    if second > 60:
        return None
    if offset not in ("Z", "z") and (int(offset[1:3]) > 23 or int(offset[4:6]) > 59):
        return None
    return date(year, month, day)


def parse_date(value: str) -> date:
    """Parse ``%Y-%m-%d`` or RFC 3339 text; an empty string means today."""
    if value == "":
        return today()
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        pass
    parsed = _parse_rfc3339(value)
    if parsed is None:
        raise ValueError(f"Invalid format for date: {value} (only accept %Y-%m-%d)")
    return parsed


def format_date(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def is_future(day: date) -> bool:
    """Whether ``day`` lies after the local current date."""
    return day > datetime.now().date()