"""Report filter policies.

The trend chart, the monthly PDF and the monthly summary table each select
records for a month differently. The three policies are defined here once
and every report surface goes through them, so their totals stay equal:

  trend    same month, and either a bulk category or an on-site service day
  pdf      same month, every day
  summary  same month, optionally restricted to a bucket's weekday set

Records whose date cannot be parsed are dropped by every policy.
"""
from typing import Iterable, List, Optional

from shelter.utilities.civil_time import parse_civil_date_parts


def _record_date(record):
    if isinstance(record, dict):
        return record.get('date')
    return getattr(record, 'date', None)


def _in_month(record, year: int, month: int):
    parts = parse_civil_date_parts(_record_date(record))
    if parts is None or parts.year != year or parts.month != month:
        return None
    return parts


def trend_filter(records: Iterable, year: int, month: int,
                 service_days: Iterable[int], is_bulk: bool) -> List:
    """Records kept by the trend chart.

    Bulk categories are never dropped by weekday: an RV delivery on a
    Thursday still counts for the month.
    """
    days = set(service_days)
    kept = []
    for r in records:
        parts = _in_month(r, year, month)
        if parts is None:
            continue
        if not is_bulk and parts.day_of_week not in days:
            continue
        kept.append(r)
    return kept


def pdf_filter(records: Iterable, year: int, month: int) -> List:
    """Records kept by the monthly PDF: everything delivered in the month."""
    return [r for r in records if _in_month(r, year, month) is not None]


def summary_filter(records: Iterable, year: int, month: int,
                   days: Optional[Iterable[int]] = None) -> List:
    """Records kept by one summary bucket; days=None means the whole month."""
    allowed = set(days) if days is not None else None
    kept = []
    for r in records:
        parts = _in_month(r, year, month)
        if parts is None:
            continue
        if allowed is not None and parts.day_of_week not in allowed:
            continue
        kept.append(r)
    return kept


def catch_all(total: int, named_buckets: Iterable[int]) -> int:
    """Residual of a category total once every named day-group bucket is removed."""
    return total - sum(named_buckets)


__all__ = ['trend_filter', 'pdf_filter', 'summary_filter', 'catch_all']
