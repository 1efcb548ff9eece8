"""
Input validation schemas using Pydantic for the API request bodies.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import datetime as dt

from shelter.utilities.constants import BULK_CATEGORIES, REMINDER_SERVICE_TYPES


class MealInput(BaseModel):
    """Schema for logging guest meals."""
    guest_id: str = Field(..., min_length=1)
    count: int = Field(1, ge=1, le=4)
    picked_up_by_guest_id: Optional[str] = None

    @field_validator('guest_id')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        v = v.strip()
        if not v:
            raise ValueError('guest_id cannot be empty')
        return v

    @field_validator('picked_up_by_guest_id')
    @classmethod
    def strip_proxy(cls, v):
        if isinstance(v, str):
            return v.strip() or None
        return v


class ExtraMealInput(BaseModel):
    guest_id: str = Field(..., min_length=1)
    count: int = Field(1, ge=1, le=4)

    @field_validator('guest_id')
    @classmethod
    def strip_whitespace(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('guest_id cannot be empty')
        return v


class BulkMealInput(BaseModel):
    """Schema for a bulk count (RV, shelter, day workers, lunch bags...)."""
    category: str
    count: int = Field(..., ge=0, le=100000)
    date: Optional[dt.date] = None

    @field_validator('category')
    @classmethod
    def validate_category(cls, v):
        v = v.strip().lower()
        if v not in BULK_CATEGORIES:
            raise ValueError(f'Unknown bulk category: {v}')
        return v


class BulkMealUpdateInput(BaseModel):
    count: int = Field(..., ge=0, le=100000)


class BulkDeleteInput(BaseModel):
    """Ids to delete; an omitted list deletes every loaded record of the category."""
    ids: Optional[List[str]] = None

    @field_validator('ids')
    @classmethod
    def validate_ids(cls, v):
        if v is None:
            return v
        return [i.strip() for i in v if i and i.strip()]


class BookingInput(BaseModel):
    """Schema for booking a shower or laundry slot."""
    guest_id: str = Field(..., min_length=1)
    date: Optional[dt.date] = None
    time: Optional[str] = Field(None, pattern=r'^\d{2}:\d{2}( - \d{2}:\d{2})?$')
    linked_to: Optional[str] = None
    laundry_type: Optional[str] = None
    waitlist: bool = False


class BicycleInput(BaseModel):
    guest_id: str = Field(..., min_length=1)
    repair_types: List[str] = Field(..., min_length=1)

    @field_validator('repair_types')
    @classmethod
    def validate_repair_types(cls, v):
        """Filter out empty repair types."""
        cleaned = [r.strip() for r in v if r and r.strip()]
        if not cleaned:
            raise ValueError('At least one repair type is required')
        return cleaned


class ReminderInput(BaseModel):
    """Schema for a guest reminder."""
    message: str = Field(..., min_length=1, max_length=500)
    applies_to: List[str] = Field(default_factory=lambda: ["all"])

    @field_validator('message')
    @classmethod
    def validate_message(cls, v):
        if not v.strip():
            raise ValueError('Reminder message cannot be empty')
        return v.strip()

    @field_validator('applies_to')
    @classmethod
    def validate_applies_to(cls, v):
        unknown = [s for s in v if s not in REMINDER_SERVICE_TYPES]
        if unknown:
            raise ValueError(f'Unknown services: {", ".join(unknown)}')
        return v or ["all"]


class GuestInput(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    preferred_name: str = ""
    bicycle_description: str = ""
    banned_from_bicycle: bool = False
