from datetime import date, datetime
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from shelter.api.deps import ShelterStores, get_now, get_stores, http_errors, saved_or_500
from shelter.utilities.civil_time import civil_date_string
from shelter.utilities.constants import MEAL_CATEGORIES
from shelter.utilities.validators import (
    MealInput, ExtraMealInput, BulkMealInput, BulkMealUpdateInput, BulkDeleteInput,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _check_category(category: str) -> str:
    if category not in MEAL_CATEGORIES:
        raise HTTPException(status_code=404, detail=f"Unknown meal category: {category}")
    return category


def _within(record, start: Optional[date], end: Optional[date]) -> bool:
    day = civil_date_string(record.date)
    if not day:
        return False
    return (start is None or day >= start.isoformat()) and (end is None or day <= end.isoformat())


@router.get("/api/meals")
def list_meals(category: Optional[str] = Query(default=None),
               start: Optional[date] = Query(default=None),
               end: Optional[date] = Query(default=None),
               stores: ShelterStores = Depends(get_stores)):
    """Meal records, optionally narrowed to one category and an inclusive civil date range."""
    if category is not None:
        _check_category(category)
    records = stores.meals.records(category)
    if start or end:
        records = [r for r in records if _within(r, start, end)]
    return {'count': len(records), 'records': [r.to_dict() for r in records]}


@router.post("/api/meals", status_code=201)
def add_meal(payload: MealInput, stores: ShelterStores = Depends(get_stores),
             now: datetime = Depends(get_now)):
    with http_errors():
        record = stores.meals.add_meal_record(payload.guest_id, payload.count,
                                              payload.picked_up_by_guest_id, now=now)
    return saved_or_500(record, "Failed to log meal").to_dict()


@router.post("/api/meals/extra", status_code=201)
def add_extra_meal(payload: ExtraMealInput, stores: ShelterStores = Depends(get_stores),
                   now: datetime = Depends(get_now)):
    with http_errors():
        record = stores.meals.add_extra_meal_record(payload.guest_id, payload.count, now=now)
    return saved_or_500(record, "Failed to log extra meal").to_dict()


@router.post("/api/meals/bulk", status_code=201)
def add_bulk_meal(payload: BulkMealInput, stores: ShelterStores = Depends(get_stores),
                  now: datetime = Depends(get_now)):
    with http_errors():
        record = stores.meals.add_bulk_meal_record(payload.category, payload.count, day=payload.date, now=now)
    return saved_or_500(record, f"Failed to log {payload.category} meals").to_dict()


@router.post("/api/meals/automatic")
def add_automatic_meals(stores: ShelterStores = Depends(get_stores), now: datetime = Depends(get_now)):
    added = stores.meals.check_and_add_automatic_meals(now=now)
    return {'added': [r.to_dict() for r in added]}


@router.patch("/api/meals/{record_id}")
def update_bulk_meal(record_id: str, payload: BulkMealUpdateInput, stores: ShelterStores = Depends(get_stores)):
    with http_errors():
        record = stores.meals.update_bulk_meal_record(record_id, payload.count)
    return saved_or_500(record, "Failed to update meal record").to_dict()


@router.delete("/api/meals/{category}/{record_id}")
def delete_meal(category: str, record_id: str, stores: ShelterStores = Depends(get_stores)):
    _check_category(category)
    if not stores.meals.delete_meal_record(record_id, category):
        raise HTTPException(status_code=404, detail="Meal record not found")
    return {'deleted': record_id}


@router.post("/api/meals/{category}/bulk-delete")
def bulk_delete_meals(category: str, payload: BulkDeleteInput, stores: ShelterStores = Depends(get_stores)):
    """Delete several records; failures are reported per id and nothing is rolled back."""
    _check_category(category)
    result = stores.meals.delete_bulk_records(category, payload.ids)
    return result.to_dict()
