"""Meals store: guest, extra and bulk meal records for the loaded period."""
import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from shelter.domain.Action import MEAL_ADDED, EXTRA_MEALS_ADDED
from shelter.domain.MealRecord import MealRecord
from shelter.infra.Data_Store import RecordNotFoundError
from shelter.infra.paths import MEALS_TABLE
from shelter.logic.reporting.classifier import classify, group_by_category, is_bulk
from shelter.stores.base import Store, failed
from shelter.utilities.civil_time import civil_date_string, day_of_week, utc_timestamp
from shelter.utilities.constants import (
    MEAL_CATEGORIES, GUEST, EXTRA, AUTOMATIC_MEALS, SERVICE_END_TIME,
    MAX_BASE_MEALS_PER_DAY, MAX_EXTRA_MEALS_PER_DAY, MAX_TOTAL_MEALS_PER_DAY,
)

logger = logging.getLogger(__name__)


class BatchResult:
    """Outcome of a batch of independent calls; nothing is rolled back."""

    def __init__(self):
        self.succeeded: List[str] = []
        self.failed: List[str] = []

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self):
        return {
            'deleted': self.succeeded,
            'failed': self.failed,
            'total_deleted': len(self.succeeded),
            'ok': self.ok,
        }


class MealsStore(Store):
    name = "meals"

    def __init__(self, *args, history=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._history = history
        self._records: List[MealRecord] = []

    # --- Reads ---------------------------------------------------------------
    def load(self, start: Optional[date] = None, end: Optional[date] = None):
        """Load records for [start, end] (civil dates) or everything when no period is given."""
        if start is not None and end is not None:
            rows = self._db.fetch_for_period(MEALS_TABLE, start, end)
        else:
            rows = self._db.fetch_all(MEALS_TABLE)
        self._records = [classify(r) for r in rows]
        logger.info("Loaded %s meal records", len(self._records))
        return self

    def records(self, category: Optional[str] = None) -> List[MealRecord]:
        if category is None:
            return list(self._records)
        return [r for r in self._records if r.category == category]

    def records_by_category(self) -> Dict[str, List[MealRecord]]:
        return group_by_category(self._records)

    def records_on(self, day: date, category: Optional[str] = None) -> List[MealRecord]:
        key = day.isoformat()
        return [r for r in self.records(category) if civil_date_string(r.date) == key]

    def guest_counts_on(self, guest_id: str, day: date):
        """(base meals, extra meals) already logged for guest_id on day."""
        base = sum(r.count or 0 for r in self.records_on(day, GUEST) if r.guest_id == guest_id)
        extra = sum(r.count or 0 for r in self.records_on(day, EXTRA) if r.guest_id == guest_id)
        return base, extra

    # --- Mutations -----------------------------------------------------------
    def _insert(self, record: MealRecord, failure_message: str) -> Optional[MealRecord]:
        row = record.to_dict()
        row.pop('id')
        saved = self._persist(lambda: self._db.insert(MEALS_TABLE, row), failure_message)
        if failed(saved):
            return None
        stored = MealRecord.from_dict(saved)
        self._records.append(stored)
        self._changed('add', saved)
        return stored

    def add_meal_record(self, guest_id: str, count: int = 1, picked_up_by_guest_id: Optional[str] = None,
                        now: Optional[datetime] = None) -> Optional[MealRecord]:
        """Log base meals for a guest, optionally picked up by another guest (proxy)."""
        if not guest_id:
            raise ValueError("A guest meal needs a guest")
        if count < 1:
            raise ValueError("Meal count must be at least 1")
        if picked_up_by_guest_id and picked_up_by_guest_id == guest_id:
            raise ValueError("A guest cannot pick up meals as their own proxy")
        current = self.now(now)
        base, extra = self.guest_counts_on(guest_id, current.date())
        if base + count > MAX_BASE_MEALS_PER_DAY:
            raise ValueError(f"Guest already has {base} of {MAX_BASE_MEALS_PER_DAY} meals today")
        if base + extra + count > MAX_TOTAL_MEALS_PER_DAY:
            raise ValueError(f"Guest has reached the daily limit of {MAX_TOTAL_MEALS_PER_DAY} meals")
        record = MealRecord(date=utc_timestamp(current), count=count, category=GUEST, guest_id=guest_id,
                            picked_up_by_guest_id=picked_up_by_guest_id, created_at=utc_timestamp(current))
        stored = self._insert(record, "Failed to log meal")
        if stored and self._history is not None:
            self._history.add_action(MEAL_ADDED, stored.id, guest_id, now=current)
        return stored

    def add_extra_meal_record(self, guest_id: str, count: int = 1,
                              now: Optional[datetime] = None) -> Optional[MealRecord]:
        if not guest_id:
            raise ValueError("An extra meal needs a guest")
        if count < 1:
            raise ValueError("Meal count must be at least 1")
        current = self.now(now)
        base, extra = self.guest_counts_on(guest_id, current.date())
        if extra + count > MAX_EXTRA_MEALS_PER_DAY:
            raise ValueError(f"Guest already has {extra} of {MAX_EXTRA_MEALS_PER_DAY} extra meals today")
        if base + extra + count > MAX_TOTAL_MEALS_PER_DAY:
            raise ValueError(f"Guest has reached the daily limit of {MAX_TOTAL_MEALS_PER_DAY} meals")
        record = MealRecord(date=utc_timestamp(current), count=count, category=EXTRA, guest_id=guest_id,
                            created_at=utc_timestamp(current))
        stored = self._insert(record, "Failed to log extra meal")
        if stored and self._history is not None:
            self._history.add_action(EXTRA_MEALS_ADDED, stored.id, guest_id, now=current)
        return stored

    def add_bulk_meal_record(self, category: str, count: int, day: Optional[date] = None,
                             now: Optional[datetime] = None) -> Optional[MealRecord]:
        """Log a batch count for a bulk category (RV, shelter, lunch bags, ...)."""
        if category not in MEAL_CATEGORIES or not is_bulk(category):
            raise ValueError(f"Not a bulk meal category: {category}")
        if count < 0:
            raise ValueError("Meal count cannot be negative")
        current = self.now(now)
        record = MealRecord(date=day.isoformat() if day else utc_timestamp(current), count=count,
                            category=category, created_at=utc_timestamp(current))
        return self._insert(record, f"Failed to log {category} meals")

    def update_bulk_meal_record(self, record_id: str, count: int) -> Optional[MealRecord]:
        if count < 0:
            raise ValueError("Meal count cannot be negative")
        target = next((r for r in self._records if r.id == record_id), None)
        if target is None:
            raise RecordNotFoundError(MEALS_TABLE, record_id)
        if not target.bulk:
            raise ValueError("Only bulk meal records can be edited")
        saved = self._persist(lambda: self._db.update(MEALS_TABLE, record_id, {'count': count}),
                              "Failed to update meal record")
        if failed(saved):
            return None
        target.count = count
        self._changed('update', saved)
        return target

    def delete_meal_record(self, record_id: str, category: str) -> bool:
        result = self._persist(lambda: self._db.delete_by_id_and_category(MEALS_TABLE, record_id, category),
                               "Failed to delete meal record")
        if failed(result):
            return False
        self._records = [r for r in self._records if r.id != record_id]
        self._changed('delete', {'id': record_id, 'category': category})
        return True

    def delete_bulk_records(self, category: str, ids: Optional[Iterable[str]] = None) -> BatchResult:
        """Delete several records one call at a time.

        A failing delete does not stop the batch and already deleted records
        stay deleted; the result lists both sides.
        """
        targets = list(ids) if ids is not None else [r.id for r in self.records(category)]
        result = BatchResult()
        for record_id in targets:
            if self.delete_meal_record(record_id, category):
                result.succeeded.append(record_id)
            else:
                result.failed.append(record_id)
        if result.failed:
            logger.warning("Bulk delete of %s: %s deleted, %s failed",
                           category, len(result.succeeded), len(result.failed))
        elif result.succeeded:
            self._success(f"Deleted {len(result.succeeded)} {category} records")
        return result

    def check_and_add_automatic_meals(self, now: Optional[datetime] = None) -> List[MealRecord]:
        """Add the day's scheduled bulk counts once service has ended.

        Categories that already have a record today are left alone, so calling
        this repeatedly is safe.
        """
        current = self.now(now)
        schedule = AUTOMATIC_MEALS.get(day_of_week(current.date()))
        if not schedule or current.strftime("%H:%M") <= SERVICE_END_TIME:
            return []
        added = []
        for category, count in schedule.items():
            if self.records_on(current.date(), category):
                continue
            stored = self.add_bulk_meal_record(category, count, day=current.date(), now=current)
            if stored:
                added.append(stored)
        if added:
            logger.info("Automatic meals added for %s: %s", current.date(), [r.category for r in added])
        return added
