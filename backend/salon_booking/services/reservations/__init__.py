# backend/salon_booking/services/reservations/__init__.py
"""
Write side of the reservation engine.

Every change that can add occupancy (book, restore) runs its overlap check
and its write in one transaction holding the date's lock.
"""

from .status import (
    OCCUPYING_STATUSES,
    TRANSITIONS,
    ReservationStatus,
    change_status,
)
from .guard import book
from .store import get_reservation, list_reservations, lock_day

__all__ = [
    "OCCUPYING_STATUSES",
    "TRANSITIONS",
    "ReservationStatus",
    "change_status",
    "book",
    "get_reservation",
    "list_reservations",
    "lock_day",
]
