# backend/scheduling/services/slots/__init__.py
"""
Slots calculation module.

Grid: candidate slots of one day with availability flags (calculator)
Availability: bookable slots, commit-time re-check, calendar (availability)
"""

from .config import BookingConfig, get_booking_config
from .working_hours import OpenInterval, WorkingHoursConfig
from .intervals import TimeInterval, merge_busy_intervals
from .calculator import Slot, calculate_slot_grid
from .availability import (
    DayAvailability,
    SlotCheck,
    calculate_calendar,
    check_slot,
    generate_slots,
)

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "OpenInterval",
    "WorkingHoursConfig",
    "TimeInterval",
    "merge_busy_intervals",
    "Slot",
    "calculate_slot_grid",
    "DayAvailability",
    "SlotCheck",
    "calculate_calendar",
    "check_slot",
    "generate_slots",
]
