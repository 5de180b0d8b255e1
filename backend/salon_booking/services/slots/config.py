# backend/salon_booking/services/slots/config.py
"""
Booking configuration for slots calculation.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from ...config import settings

TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""
    if not TIME_RE.match(value):
        raise ValueError(f"Time must be in HH:MM format, got {value!r}")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the booking/slots system.

    Attributes:
        open_time: Daily opening time "HH:MM"
        close_time: Daily closing time "HH:MM"
        closed_weekday: Weekly closed day (0 = Monday ... 6 = Sunday)
        slot_step_minutes: Grid step, the smallest stagger between two bookings
        horizon_days: How many days ahead reservations are accepted
    """
    open_time: str = "10:00"
    close_time: str = "20:00"
    closed_weekday: int = 0
    slot_step_minutes: int = 10
    horizon_days: int = 60

    def __post_init__(self):
        """Validate configuration."""
        if self.slot_step_minutes not in (5, 10, 15, 20, 30, 60):
            raise ValueError(
                f"slot_step_minutes must be 5, 10, 15, 20, 30 or 60, got {self.slot_step_minutes}"
            )
        if not 0 <= self.closed_weekday <= 6:
            raise ValueError(f"closed_weekday must be 0..6, got {self.closed_weekday}")
        if self.horizon_days < 0:
            raise ValueError(f"horizon_days must not be negative, got {self.horizon_days}")

        open_min = time_str_to_minutes(self.open_time)
        close_min = time_str_to_minutes(self.close_time)
        if open_min >= close_min:
            raise ValueError(f"open_time {self.open_time} must be before close_time {self.close_time}")
        if (close_min - open_min) % self.slot_step_minutes:
            raise ValueError("slot_step_minutes must evenly divide business hours")

    @property
    def open_minutes(self) -> int:
        return time_str_to_minutes(self.open_time)

    @property
    def close_minutes(self) -> int:
        return time_str_to_minutes(self.close_time)

    def is_on_grid(self, minutes: int) -> bool:
        """True if minutes is one of the grid points counted from open_time."""
        return (minutes - self.open_minutes) % self.slot_step_minutes == 0


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton) from settings."""
    return BookingConfig(
        open_time=settings.booking_open_time,
        close_time=settings.booking_close_time,
        closed_weekday=settings.booking_closed_weekday,
        slot_step_minutes=settings.booking_slot_step_minutes,
        horizon_days=settings.booking_horizon_days,
    )
