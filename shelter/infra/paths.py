from shelter.utilities.config import DATA_DIR, DATA_FILE

# Table names inside the JSON document store (single source of truth)
MEALS_TABLE = 'meal_records'
BOOKINGS_TABLE = 'service_bookings'
BLOCKED_SLOTS_TABLE = 'blocked_slots'
REMINDERS_TABLE = 'guest_reminders'
ACTIONS_TABLE = 'action_history'
GUESTS_TABLE = 'guests'

TABLES = (MEALS_TABLE, BOOKINGS_TABLE, BLOCKED_SLOTS_TABLE, REMINDERS_TABLE, ACTIONS_TABLE, GUESTS_TABLE)

__all__ = ['DATA_DIR', 'DATA_FILE', 'MEALS_TABLE', 'BOOKINGS_TABLE', 'BLOCKED_SLOTS_TABLE',
           'REMINDERS_TABLE', 'ACTIONS_TABLE', 'GUESTS_TABLE', 'TABLES']
