"""Service-day counting used for per-service-day averages."""
import calendar
from datetime import date, datetime
from typing import Iterable, Optional

from shelter.utilities.civil_time import day_of_week, today_civil


def count_service_days(year: int, month: int, service_days: Iterable[int],
                       through_day: Optional[int] = None) -> int:
    """Number of configured service weekdays from day 1 through through_day (month is 0-11)."""
    days = set(service_days)
    last = calendar.monthrange(year, month + 1)[1]
    end = last if through_day is None else max(0, min(through_day, last))
    return sum(1 for d in range(1, end + 1) if day_of_week(date(year, month + 1, d)) in days)


def elapsed_service_days(year: int, month: int, service_days: Iterable[int],
                         now: Optional[datetime] = None) -> int:
    """Service days that have already happened in the month.

    For the current civil month the count stops at today; past months count
    every service day; future months have none yet.
    """
    today = today_civil(now)
    if (year, month + 1) == (today.year, today.month):
        return count_service_days(year, month, service_days, through_day=today.day)
    if (year, month + 1) > (today.year, today.month):
        return 0
    return count_service_days(year, month, service_days)


__all__ = ['count_service_days', 'elapsed_service_days']
