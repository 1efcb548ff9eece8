from typing import Final

# Weekday numbering follows CivilDateParts: 0=Sunday .. 6=Saturday
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
ALL_DAYS: Final[frozenset] = frozenset(range(7))

GUEST: Final[str] = "guest"
EXTRA: Final[str] = "extra"
RV: Final[str] = "rv"
DAY_WORKER: Final[str] = "day_worker"
SHELTER: Final[str] = "shelter"
UNITED_EFFORT: Final[str] = "united_effort"
LUNCH_BAG: Final[str] = "lunch_bag"

MEAL_CATEGORIES: Final[tuple] = (GUEST, EXTRA, RV, DAY_WORKER, SHELTER, UNITED_EFFORT, LUNCH_BAG)
BULK_CATEGORIES: Final[frozenset] = frozenset({RV, DAY_WORKER, SHELTER, UNITED_EFFORT, LUNCH_BAG})

# Weekdays on which each category is normally served on-site
SERVICE_DAYS: Final[dict[str, frozenset]] = {
    GUEST: frozenset({MONDAY, WEDNESDAY, FRIDAY, SATURDAY}),
    EXTRA: frozenset({MONDAY, WEDNESDAY, FRIDAY, SATURDAY}),
    RV: frozenset({MONDAY, WEDNESDAY, THURSDAY, SATURDAY}),
    DAY_WORKER: frozenset({SATURDAY}),
    SHELTER: ALL_DAYS,
    UNITED_EFFORT: ALL_DAYS,
    LUNCH_BAG: frozenset({MONDAY, WEDNESDAY, FRIDAY, SATURDAY}),
}

# Named RV sub-buckets in the monthly summary; anything else lands in the catch-all
RV_DAY_GROUPS: Final[dict[str, frozenset]] = {
    "Wed/Sat": frozenset({WEDNESDAY, SATURDAY}),
    "Mon/Thu": frozenset({MONDAY, THURSDAY}),
}
RV_CATCH_ALL_LABEL: Final[str] = "Other days"
PDF_RV_SHELTER_LABEL: Final[str] = "RV + shelter"

# Per-guest daily meal limits
MAX_BASE_MEALS_PER_DAY: Final[int] = 2
MAX_EXTRA_MEALS_PER_DAY: Final[int] = 2
MAX_TOTAL_MEALS_PER_DAY: Final[int] = 4

# Bulk meals logged automatically once the day's service has ended
SERVICE_END_TIME: Final[str] = "10:00"
AUTOMATIC_MEALS: Final[dict[int, dict[str, int]]] = {
    MONDAY: {RV: 100, LUNCH_BAG: 120},
    WEDNESDAY: {RV: 40, LUNCH_BAG: 120},
    SATURDAY: {RV: 100, LUNCH_BAG: 220, DAY_WORKER: 50},
}

# Bookable services
SHOWER: Final[str] = "shower"
LAUNDRY: Final[str] = "laundry"
BICYCLE: Final[str] = "bicycle"
SLOT_SERVICES: Final[tuple] = (SHOWER, LAUNDRY)

# (first slot start, slot count, slot length in minutes) per service and day type
SLOT_SCHEDULES: Final[dict[str, dict[str, tuple]]] = {
    SHOWER: {
        "weekday": ("07:30", 9, 30),
        "saturday": ("08:30", 8, 30),
    },
    LAUNDRY: {
        "weekday": ("07:30", 5, 60),
        "saturday": ("08:30", 4, 60),
    },
}

INACTIVE_BOOKING_STATUSES: Final[frozenset] = frozenset({"cancelled"})

# Reminders can target every service or a subset of them
REMINDER_SERVICE_TYPES: Final[tuple] = ("all", SHOWER, LAUNDRY, BICYCLE)

RECENT_GUEST_WINDOW_DAYS: Final[int] = 7
NEW_BICYCLE_REPAIR_TYPE: Final[str] = "New Bicycle"
NEW_BICYCLE_COOLDOWN_MONTHS: Final[int] = 6
