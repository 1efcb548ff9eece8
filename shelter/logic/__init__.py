"""Core business logic layer.

Subpackages:
- reporting: meal classification, report filter policies and monthly totals
- slots: shower/laundry slot generation and availability
- guests: guest activity selectors (recent guests, today's actions, bicycle rules)

Everything here is pure: callers pass records and the current time in.
"""
__all__ = ["reporting", "slots", "guests"]
