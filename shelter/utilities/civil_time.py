"""Civil-calendar helpers.

Stored meal and booking dates are either full ISO-8601 timestamps
("2026-01-08T16:00:00.000Z") or bare calendar dates ("2026-01-08"). Every
day-of-week or month bucketing decision is made in one fixed civil
timezone (CIVIL_TIMEZONE), never in UTC and never in the host's local zone.

A bare date carries no instant, so it is taken literally. A timestamp is
converted into the civil zone first, which means midnight UTC on Jan 8 is
still Jan 7 (a Wednesday) in America/Los_Angeles.

All "today"/"now" helpers accept an optional ``now`` so callers and tests
can pin the clock.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from functools import lru_cache
from typing import Optional, Union
from zoneinfo import ZoneInfo

from shelter.utilities.config import CIVIL_TIMEZONE

DATE_ONLY_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

DateInput = Union[str, datetime, date, None]


@dataclass(frozen=True)
class CivilDateParts:
    """Calendar parts of a stored date in the civil timezone.

    month is 0-11 and day_of_week is 0-6 with 0 meaning Sunday.
    """
    year: int
    month: int
    day: int
    day_of_week: int

    @classmethod
    def from_date(cls, d: date) -> "CivilDateParts":
        return cls(d.year, d.month - 1, d.day, day_of_week(d))

    def to_date(self) -> date:
        return date(self.year, self.month + 1, self.day)


@lru_cache(maxsize=None)
def get_civil_tz(name: str = CIVIL_TIMEZONE) -> ZoneInfo:
    return ZoneInfo(name)


def day_of_week(d: date) -> int:
    """Sunday-based weekday number (0=Sunday .. 6=Saturday)."""
    return (d.weekday() + 1) % 7


def _to_civil_date(value: DateInput) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        instant = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return instant.astimezone(get_civil_tz()).date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    if DATE_ONLY_PATTERN.match(s):
        try:
            return date.fromisoformat(s)
        except ValueError:
            return None
    if s.endswith('Z') or s.endswith('z'):
        s = s[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        return None
    # Naive timestamps are stored instants without an offset: read them as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(get_civil_tz()).date()


def parse_civil_date_parts(value: DateInput) -> Optional[CivilDateParts]:
    """Return the civil calendar parts of a stored date, or None if it can't be read."""
    d = _to_civil_date(value)
    if d is None:
        return None
    return CivilDateParts.from_date(d)


def civil_date_string(value: DateInput) -> Optional[str]:
    """YYYY-MM-DD of the stored date in the civil timezone."""
    d = _to_civil_date(value)
    return d.isoformat() if d else None


def now_civil(now: Optional[datetime] = None) -> datetime:
    """Current instant expressed in the civil timezone."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(get_civil_tz())


def today_civil(now: Optional[datetime] = None) -> date:
    return now_civil(now).date()


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp in the same shape the data store keeps."""
    instant = now_civil(now).astimezone(timezone.utc)
    return instant.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def format_slot_label(label: str) -> str:
    """'07:30' -> '7:30 AM', '13:00' -> '1:00 PM'."""
    hours, minutes = (int(p) for p in label.split(':'))
    suffix = 'AM' if hours < 12 else 'PM'
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {suffix}"


__all__ = [
    'CivilDateParts', 'get_civil_tz', 'day_of_week', 'parse_civil_date_parts',
    'civil_date_string', 'now_civil', 'today_civil', 'utc_timestamp', 'format_slot_label',
]
