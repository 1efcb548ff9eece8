"""Meal record classification.

Raw records arrive from several tables and older exports with loose type
tags ("rv_delivery", "lunch_bags", "dayworker", ...). classify() maps them
onto one of MEAL_CATEGORIES so the report filters only ever see canonical
categories, and exposes whether the category is a bulk one.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

from shelter.domain.MealRecord import MealRecord
from shelter.utilities.constants import (
    BULK_CATEGORIES, MEAL_CATEGORIES,
    GUEST, EXTRA, RV, DAY_WORKER, SHELTER, UNITED_EFFORT, LUNCH_BAG,
)

_TYPE_ALIASES = {
    'guest': GUEST, 'meal': GUEST, 'guest_meal': GUEST,
    'extra': EXTRA, 'extra_meal': EXTRA, 'extra_meals': EXTRA,
    'rv': RV, 'rv_delivery': RV, 'rv_meal': RV, 'rv_meals': RV,
    'day_worker': DAY_WORKER, 'dayworker': DAY_WORKER, 'day-worker': DAY_WORKER, 'day_worker_meal': DAY_WORKER,
    'shelter': SHELTER, 'shelter_meal': SHELTER, 'shelter_meals': SHELTER,
    'united_effort': UNITED_EFFORT, 'united-effort': UNITED_EFFORT, 'unitedeffort': UNITED_EFFORT,
    'lunch_bag': LUNCH_BAG, 'lunch_bags': LUNCH_BAG, 'lunchbag': LUNCH_BAG, 'lunch-bag': LUNCH_BAG,
}


def normalize_category(tag: Optional[str]) -> Optional[str]:
    if not isinstance(tag, str):
        return None
    return _TYPE_ALIASES.get(tag.strip().lower())


def is_bulk(category: str) -> bool:
    return category in BULK_CATEGORIES


def classify(raw, default_category: str = GUEST) -> MealRecord:
    """Build a MealRecord with a canonical category from a raw record dict.

    The category is read from 'category' then 'type'; unknown tags fall back
    to default_category (the table the record was loaded from).
    """
    if isinstance(raw, MealRecord):
        return raw
    d = dict(raw) if isinstance(raw, dict) else {}
    category = normalize_category(d.get('category')) or normalize_category(d.get('type'))
    if category is None:
        category = normalize_category(default_category) or GUEST
    d['category'] = category
    return MealRecord.from_dict(d)


def group_by_category(records: Iterable[MealRecord]) -> Dict[str, List[MealRecord]]:
    """Bucket records per category; every category key is always present."""
    grouped: Dict[str, List[MealRecord]] = defaultdict(list)
    for category in MEAL_CATEGORIES:
        grouped[category] = []
    for r in records:
        grouped[r.category].append(r)
    return dict(grouped)


__all__ = ['normalize_category', 'is_bulk', 'classify', 'group_by_category']
