import unittest
from datetime import date

from shelter.domain.Booking import BookingRecord, BlockedSlot, slot_start
from shelter.logic.slots.availability import (
    SlotStatus, resolve_slots, find_next_available, active_bookings_for, is_blocked,
)
from shelter.logic.slots.generator import (
    day_type, generate_slots, generate_shower_slots, generate_laundry_slots,
)

SATURDAY = date(2026, 1, 10)
TUESDAY = date(2026, 1, 13)


def _booking(time, day=TUESDAY, service='shower', status='booked', guest='g1'):
    return BookingRecord(id=f"{service}-{time}-{guest}", service_type=service, date=day.isoformat(),
                         time=time, guest_id=guest, status=status)


class TestSlotGenerator(unittest.TestCase):

    def test_day_type(self):
        self.assertEqual(day_type(SATURDAY), "saturday")
        self.assertEqual(day_type(TUESDAY), "weekday")

    def test_weekday_showers(self):
        slots = generate_shower_slots(TUESDAY)
        self.assertEqual(len(slots), 9)
        self.assertEqual(slots[0].label, "07:30")
        self.assertEqual(slots[-1].range_label, "11:30 - 12:00")

    def test_saturday_grid_differs(self):
        weekday, saturday = generate_shower_slots(TUESDAY), generate_shower_slots(SATURDAY)
        self.assertNotEqual(weekday[0].label, saturday[0].label)
        self.assertEqual(saturday[0].label, "08:30")
        self.assertEqual(len(saturday), 8)

    def test_laundry_grids(self):
        weekday = generate_laundry_slots(TUESDAY)
        self.assertEqual([s.label for s in weekday], ["07:30", "08:30", "09:30", "10:30", "11:30"])
        self.assertEqual(len(generate_laundry_slots(SATURDAY)), 4)
        self.assertEqual(weekday[0].display_range, "7:30 AM - 8:30 AM")

    def test_unknown_service(self):
        with self.assertRaises(ValueError):
            generate_slots("haircut", TUESDAY)


class TestAvailability(unittest.TestCase):

    def test_laundry_range_time_normalised(self):
        self.assertEqual(slot_start("07:30 - 08:30"), "07:30")
        self.assertEqual(slot_start(None), "")

    def test_booked_and_open(self):
        states = resolve_slots('shower', TUESDAY, [_booking("07:30")], [])
        self.assertEqual(states[0].status, SlotStatus.BOOKED)
        self.assertEqual(states[0].booking_count, 1)
        self.assertTrue(states[1].is_open)
        self.assertEqual(find_next_available(states).label, "08:00")

    def test_bookings_on_other_dates_do_not_occupy(self):
        yesterday = _booking("07:30", day=date(2026, 1, 12))
        states = resolve_slots('shower', TUESDAY, [yesterday], [])
        self.assertTrue(all(s.is_open for s in states))
        self.assertEqual(find_next_available(states).label, "07:30")

    def test_cancelled_and_other_service_bookings_ignored(self):
        bookings = [_booking("07:30", status='cancelled'), _booking("07:30", service='laundry')]
        states = resolve_slots('shower', TUESDAY, bookings, [])
        self.assertTrue(states[0].is_open)

    def test_bookings_without_time_never_occupy(self):
        states = resolve_slots('shower', TUESDAY, [_booking(None, status='waitlisted')], [])
        self.assertTrue(all(s.is_open for s in states))

    def test_blocked_wins_over_booked(self):
        blocked = [BlockedSlot(service_type='shower', date=TUESDAY.isoformat(), time="07:30")]
        states = resolve_slots('shower', TUESDAY, [_booking("07:30")], blocked)
        self.assertEqual(states[0].status, SlotStatus.BLOCKED)
        self.assertEqual(states[0].booking_count, 1)
        self.assertTrue(is_blocked('shower', TUESDAY, "07:30", blocked))

    def test_laundry_range_bookings_match_slot(self):
        bookings = [_booking("07:30 - 08:30", service='laundry')]
        states = resolve_slots('laundry', TUESDAY, bookings, [])
        self.assertEqual(states[0].status, SlotStatus.BOOKED)
        self.assertEqual(len(active_bookings_for('laundry', TUESDAY, "07:30", bookings)), 1)

    def test_linked_bookings_share_a_slot(self):
        bookings = [_booking("09:00", guest='g1'), _booking("09:00", guest='g2')]
        states = resolve_slots('shower', TUESDAY, bookings, [])
        nine = next(s for s in states if s.slot.label == "09:00")
        self.assertEqual(nine.booking_count, 2)

    def test_no_slot_left(self):
        bookings = [_booking(s.label, service='laundry', guest=f"g{i}")
                    for i, s in enumerate(generate_laundry_slots(TUESDAY))]
        states = resolve_slots('laundry', TUESDAY, bookings, [])
        self.assertIsNone(find_next_available(states))

    def test_state_to_dict(self):
        d = resolve_slots('shower', TUESDAY, [], [])[0].to_dict()
        self.assertEqual(d['label'], "07:30")
        self.assertEqual(d['status'], "open")
        self.assertEqual(d['display_label'], "7:30 AM")
