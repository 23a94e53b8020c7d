# backend/scheduling/services/slots/config.py
"""
Booking configuration for slots calculation.
"""

from dataclasses import dataclass
from functools import lru_cache

from ...config import settings


@dataclass(frozen=True)
class BookingConfig:
    """
    Booking policy of a tenant.

    Attributes:
        slot_step_minutes: Grid step between candidate starts (15/30/60 usually)
        min_notice_minutes: Slots starting sooner than now + notice are hidden
        buffer_minutes: Idle time kept free before and after every booking
        lookahead_days: How many days ahead slots can be booked
        min_duration_minutes: Shortest bookable duration
        max_duration_minutes: Longest bookable duration
    """
    slot_step_minutes: int = 30
    min_notice_minutes: int = 0
    buffer_minutes: int = 0
    lookahead_days: int = 60
    min_duration_minutes: int = 15
    max_duration_minutes: int = 240

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes <= 0:
            raise ValueError(f"slot_step_minutes must be positive, got {self.slot_step_minutes}")
        if self.min_notice_minutes < 0 or self.buffer_minutes < 0 or self.lookahead_days < 0:
            raise ValueError("min_notice_minutes, buffer_minutes and lookahead_days must not be negative")
        if self.min_duration_minutes > self.max_duration_minutes:
            raise ValueError(
                f"min_duration_minutes ({self.min_duration_minutes}) exceeds "
                f"max_duration_minutes ({self.max_duration_minutes})"
            )

    def accepts_duration(self, duration_minutes: int) -> bool:
        return self.min_duration_minutes <= duration_minutes <= self.max_duration_minutes


@lru_cache
def get_booking_config() -> BookingConfig:
    """
    Default booking policy (singleton), built from settings.

    Tenants without their own policy fall back to this one.
    """
    return BookingConfig(
        slot_step_minutes=settings.slot_step_minutes,
        min_notice_minutes=settings.min_notice_minutes,
        buffer_minutes=settings.buffer_minutes,
        lookahead_days=settings.lookahead_days,
        min_duration_minutes=settings.min_duration_minutes,
        max_duration_minutes=settings.max_duration_minutes,
    )


def time_str_to_minutes(value: str) -> int:
    """
    Convert "HH:MM" to minutes since midnight.

    "24:00" is accepted as the end of the day (1440).

    Raises:
        ValueError: if the string is not a valid wall-clock time
    """
    parts = value.strip().split(":")
    if len(parts) != 2:
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")

    hour, minute = int(parts[0]), int(parts[1])
    if hour == 24 and minute == 0:
        return 24 * 60
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Time out of range: {value!r}")
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
