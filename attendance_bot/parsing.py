from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from .errors import DateFormatError, TimeFormatError, TimeRangeError

# Time fragments: H:MM / HH:MM, HMM / HHMM, H / HH.
_TIME_WITH_COLON = re.compile(r"^(\d{1,2}):(\d{1,2})$", re.ASCII)
_TIME_COMPACT = re.compile(r"^(\d{1,2})(\d{2})$", re.ASCII)
_TIME_HOUR_ONLY = re.compile(r"^(\d{1,2})$", re.ASCII)

# Date fragments: [YY|YYYY/]M/D or [YY|YYYY]MDD.
_DATE_WITH_SLASH = re.compile(r"^(?:(\d{2}|\d{4})/)?(\d{1,2})/(\d{1,2})$", re.ASCII)
_DATE_COMPACT = re.compile(r"^(\d{2}|\d{4})?(\d{1,2})(\d{2})$", re.ASCII)

# Month fragments: [YY|YYYY[/]]M.
_MONTH = re.compile(r"^(?:(\d{2}|\d{4})/?)?(\d{1,2})$", re.ASCII)

ONE_DAY = timedelta(days=1)


def local_now() -> datetime:
    """Current host-local time truncated to the minute."""
    return datetime.now().replace(second=0, microsecond=0)


def day_start(day: date) -> datetime:
    return datetime.combine(day, time.min)


def format_time(instant: datetime) -> str:
    return f"{instant.hour:02}:{instant.minute:02}"


def _expand_year(raw: str | None, default: int) -> int:
    if not raw:
        return default
    if len(raw) == 2:
        return 2000 + int(raw)
    return int(raw)


def parse_time_text(text: str) -> tuple[int, int]:
    """Split a time fragment into (hour, minute) without range checks."""
    if ":" in text:
        match = _TIME_WITH_COLON.match(text)
    elif len(text) in (3, 4):
        match = _TIME_COMPACT.match(text)
    else:
        match = _TIME_HOUR_ONLY.match(text)

    if match is None:
        raise TimeFormatError(text)

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.lastindex == 2 else 0
    return hour, minute


def resolve_time(day: date, text: str) -> datetime:
    """Anchor a time fragment to ``day``.

    Minutes past 59 carry into the hour (``9:75`` is 10:15), but the result
    must stay inside ``[day 00:00, next day 00:00)``.
    """
    hour, minute = parse_time_text(text)
    start = day_start(day)
    instant = start + timedelta(hours=hour, minutes=minute)
    if instant < start or instant >= start + ONE_DAY:
        raise TimeRangeError(text)
    return instant


def parse_date_text(text: str, reference: date | None = None) -> date:
    """Parse a date fragment, filling omitted parts from ``reference``."""
    ref = reference or local_now().date()

    if "/" in text:
        match = _DATE_WITH_SLASH.match(text)
    else:
        match = _DATE_COMPACT.match(text)

    if match is None:
        raise DateFormatError(text)

    year_raw, month_raw, day_raw = match.groups()
    year = _expand_year(year_raw, ref.year)
    month = int(month_raw) if month_raw else ref.month
    day_of_month = int(day_raw) if day_raw else ref.day

    try:
        return date(year, month, day_of_month)
    except ValueError as exc:
        raise DateFormatError(text) from exc


def parse_month_text(text: str | None, reference: date | None = None) -> tuple[int, int]:
    """Parse a ``list`` month fragment into (year, month)."""
    ref = reference or local_now().date()
    if not text:
        return ref.year, ref.month

    match = _MONTH.match(text)
    if match is None:
        raise DateFormatError(text)

    year = _expand_year(match.group(1), ref.year)
    month = int(match.group(2))
    if not 1 <= month <= 12:
        raise DateFormatError(text)
    return year, month
