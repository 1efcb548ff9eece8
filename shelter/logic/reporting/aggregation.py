"""Meal report aggregation.

Builds the three monthly views from the shared filter policies:

  trend    one number per category (and per month for the chart series)
  pdf      export rows; RV and shelter are reported together as "RV + shelter"
  summary  table rows; RV split into weekday groups plus a catch-all bucket,
           shelter on its own row, lunch bags outside the hot-meal subtotal

For any month the three grand totals are equal as long as individually
logged meals (guest, extra) fall on their service days.
"""
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from shelter.logic.reporting.classifier import is_bulk
from shelter.logic.reporting.filters import trend_filter, pdf_filter, summary_filter, catch_all
from shelter.logic.reporting.service_days import elapsed_service_days
from shelter.utilities.civil_time import civil_date_string, today_civil
from shelter.utilities.constants import (
    MEAL_CATEGORIES, SERVICE_DAYS, RV_DAY_GROUPS, RV_CATCH_ALL_LABEL, PDF_RV_SHELTER_LABEL,
    GUEST, EXTRA, RV, DAY_WORKER, SHELTER, UNITED_EFFORT, LUNCH_BAG,
)

MONTH_NAMES = ["January", "February", "March", "April", "May", "June", "July",
               "August", "September", "October", "November", "December"]

CATEGORY_LABELS = {
    GUEST: "Guest meals",
    EXTRA: "Extra meals",
    RV: "RV meals",
    DAY_WORKER: "Day worker meals",
    SHELTER: "Shelter meals",
    UNITED_EFFORT: "United Effort meals",
    LUNCH_BAG: "Lunch bags",
}


def _count(record) -> int:
    raw = record.get('count') if isinstance(record, dict) else getattr(record, 'count', 0)
    try:
        value = int(raw or 0)
    except (TypeError, ValueError):
        return 0
    return value if value > 0 else 0


def sum_counts(records: Iterable) -> int:
    """Sum of record counts; missing, invalid and negative counts add nothing."""
    return sum(_count(r) for r in records)


def _records(by_category: Mapping[str, Iterable], category: str) -> List:
    return list(by_category.get(category) or [])


def trend_totals(by_category: Mapping[str, Iterable], year: int, month: int,
                 service_days: Mapping[str, Iterable[int]] = SERVICE_DAYS) -> Dict[str, Any]:
    categories = {
        c: sum_counts(trend_filter(_records(by_category, c), year, month,
                                   service_days.get(c, ()), is_bulk(c)))
        for c in MEAL_CATEGORIES
    }
    return {'categories': categories, 'total': sum(categories.values())}


def pdf_totals(by_category: Mapping[str, Iterable], year: int, month: int) -> Dict[str, Any]:
    categories = {c: sum_counts(pdf_filter(_records(by_category, c), year, month)) for c in MEAL_CATEGORIES}
    rows = [
        (CATEGORY_LABELS[GUEST], categories[GUEST]),
        (CATEGORY_LABELS[EXTRA], categories[EXTRA]),
        (PDF_RV_SHELTER_LABEL, categories[RV] + categories[SHELTER]),
        (CATEGORY_LABELS[DAY_WORKER], categories[DAY_WORKER]),
        (CATEGORY_LABELS[UNITED_EFFORT], categories[UNITED_EFFORT]),
        (CATEGORY_LABELS[LUNCH_BAG], categories[LUNCH_BAG]),
    ]
    return {
        'categories': categories,
        'rows': [{'label': label, 'count': count} for label, count in rows],
        'total': sum(count for _, count in rows),
    }


def unique_guest_count(records: Iterable) -> int:
    return len({getattr(r, 'guest_id', None) for r in records} - {None, ""})


def daily_unique_guests(records: Iterable) -> Dict[str, int]:
    """Distinct guest ids per civil day."""
    per_day = defaultdict(set)
    for r in records:
        guest_id = getattr(r, 'guest_id', None)
        day = civil_date_string(getattr(r, 'date', None))
        if guest_id and day:
            per_day[day].add(guest_id)
    return {day: len(ids) for day, ids in sorted(per_day.items())}


def summary_totals(by_category: Mapping[str, Iterable], year: int, month: int,
                   service_days: Mapping[str, Iterable[int]] = SERVICE_DAYS,
                   rv_day_groups: Mapping[str, Iterable[int]] = RV_DAY_GROUPS,
                   now: Optional[datetime] = None) -> Dict[str, Any]:
    guest = summary_filter(_records(by_category, GUEST), year, month, service_days.get(GUEST, ()))
    extra = summary_filter(_records(by_category, EXTRA), year, month, service_days.get(EXTRA, ()))
    rv_records = _records(by_category, RV)

    rv_groups = {
        label: sum_counts(summary_filter(rv_records, year, month, days))
        for label, days in rv_day_groups.items()
    }
    rv_all = sum_counts(summary_filter(rv_records, year, month))
    rv_other = catch_all(rv_all, rv_groups.values())

    rows = [(CATEGORY_LABELS[GUEST], sum_counts(guest)), (CATEGORY_LABELS[EXTRA], sum_counts(extra))]
    rows += [(f"RV meals ({label})", value) for label, value in rv_groups.items()]
    rows.append((f"RV meals ({RV_CATCH_ALL_LABEL})", rv_other))
    for category in (DAY_WORKER, SHELTER, UNITED_EFFORT):
        rows.append((CATEGORY_LABELS[category],
                     sum_counts(summary_filter(_records(by_category, category), year, month))))
    total_hot_meals = sum(value for _, value in rows)
    lunch_bags = sum_counts(summary_filter(_records(by_category, LUNCH_BAG), year, month))

    per_day = daily_unique_guests(guest)
    days_elapsed = elapsed_service_days(year, month, service_days.get(GUEST, ()), now)
    avg_unique = round(sum(per_day.values()) / days_elapsed, 1) if days_elapsed else 0.0

    return {
        'rows': [{'label': label, 'count': value} for label, value in rows],
        'rv_buckets': dict(rv_groups, **{RV_CATCH_ALL_LABEL: rv_other}),
        'rv_total': rv_all,
        'total_hot_meals': total_hot_meals,
        'lunch_bags': lunch_bags,
        'total': total_hot_meals + lunch_bags,
        'unique_guests': unique_guest_count(guest),
        'elapsed_service_days': days_elapsed,
        'avg_unique_guests_per_service_day': avg_unique,
    }


def monthly_meal_report(by_category: Mapping[str, Iterable], year: int, month: int,
                        now: Optional[datetime] = None) -> Dict[str, Any]:
    """All three views for one month plus a consistency flag (month is 0-11)."""
    trend = trend_totals(by_category, year, month)
    pdf = pdf_totals(by_category, year, month)
    summary = summary_totals(by_category, year, month, now=now)
    return {
        'year': year,
        'month': month,
        'title': f"{MONTH_NAMES[month]} {year}",
        'trend': trend,
        'pdf': pdf,
        'summary': summary,
        'consistent': trend['total'] == pdf['total'] == summary['total'],
    }


def build_trend_series(by_category: Mapping[str, Iterable], year: int,
                       now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    """One trend point per month of the year, up to the current civil month."""
    today = today_civil(now)
    last_month = 11 if year < today.year else (today.month - 1 if year == today.year else -1)
    series = []
    for month in range(last_month + 1):
        totals = trend_totals(by_category, year, month)
        series.append({
            'month': month,
            'label': MONTH_NAMES[month][:3],
            'categories': totals['categories'],
            'total': totals['total'],
        })
    return series


__all__ = [
    'sum_counts', 'trend_totals', 'pdf_totals', 'summary_totals', 'unique_guest_count', 'daily_unique_guests',
    'monthly_meal_report', 'build_trend_series', 'MONTH_NAMES', 'CATEGORY_LABELS',
]
