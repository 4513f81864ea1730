"""
time_utils.py — Timezone and duration helpers.

Timestamps are stored in UTC; the business operates in a single local
timezone (settings.default_timezone) which is what appointments, reminder
emails and "today" are expressed in.

Usage:
    from poolcrm_shared.time_utils import to_local, format_duration

    to_local("2025-01-15T19:30:00Z")   # datetime(2025, 1, 15, 14, 30, tzinfo=America/New_York)
    format_duration(90)                # "1h 30m"
    start, end = default_event_times()
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

from poolcrm_shared.config import settings
from poolcrm_shared.constants import DEFAULT_EVENT_DURATION_MINUTES


def business_tz(tz_name: str | None = None) -> ZoneInfo:
    return ZoneInfo(tz_name or settings.default_timezone)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(value: str | datetime) -> datetime:
    """
    Parse an ISO-8601 string into an aware datetime.

    Naive values are taken to be UTC.

    Raises:
        ValueError: if the string is not a date/time.
    """
    dt = value if isinstance(value, datetime) else date_parser.isoparse(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def to_local(value: str | datetime, tz_name: str | None = None) -> datetime:
    return parse_datetime(value).astimezone(business_tz(tz_name))


def to_utc(local: datetime, tz_name: str | None = None) -> datetime:
    """Interpret a naive wall-clock time in the business timezone."""
    if local.tzinfo is None:
        local = local.replace(tzinfo=business_tz(tz_name))
    return local.astimezone(timezone.utc)


def to_iso(value: datetime) -> str:
    return parse_datetime(value).astimezone(timezone.utc).isoformat()


def local_day_bounds(day: date, tz_name: str | None = None) -> tuple[datetime, datetime]:
    """UTC start and end of a local calendar day."""
    start = to_utc(datetime.combine(day, datetime.min.time()), tz_name)
    return start, start + timedelta(days=1) - timedelta(microseconds=1)


def default_event_times(
    now: datetime | None = None,
    tz_name: str | None = None,
) -> tuple[datetime, datetime]:
    """Next half hour in local time, lasting the default event duration."""
    local_now = (now or utc_now()).astimezone(business_tz(tz_name))
    minute_start = local_now.replace(second=0, microsecond=0)
    if minute_start < local_now:
        minute_start += timedelta(minutes=1)
    rounded = math.ceil(minute_start.minute / 30) * 30
    start = minute_start + timedelta(minutes=rounded - minute_start.minute)
    end = start + timedelta(minutes=DEFAULT_EVENT_DURATION_MINUTES)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def event_duration_minutes(start: str | datetime, end: str | datetime) -> int:
    delta = parse_datetime(end) - parse_datetime(start)
    return int(delta.total_seconds() // 60)


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}m"
    hours, remainder = divmod(minutes, 60)
    if remainder == 0:
        return f"{hours}h"
    return f"{hours}h {remainder}m"


def format_local(value: str | datetime, pattern: str = "%b %-d, %Y at %-I:%M %p",
                 tz_name: str | None = None) -> str:
    return to_local(value, tz_name).strftime(pattern)
