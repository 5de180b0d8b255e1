# backend/salon_booking/errors.py
"""
Domain errors of the reservation engine.

Every error here is an expected, user-facing outcome: the API layer turns
it into a 4xx response with a stable ``code``. Anything else (database
unreachable, lock timeout) is an internal fault and is reported as 503.
"""

from typing import Any

from fastapi import status


class ReservationError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class InvalidSelectionError(ReservationError):
    """Empty selection, or an unknown/inactive/duplicate service id."""


class ClosedDayError(ReservationError):
    """Date is the weekly closed day or a full-day holiday."""


class CutoffExceededError(ReservationError):
    """Start time is after the selection's last bookable start time."""


class BookingWindowError(ReservationError):
    """Date or start time is in the past or beyond the booking horizon."""


class InvalidStartTimeError(ReservationError):
    """Start time is off the slot grid or the interval leaves business hours."""


class InvalidTransitionError(ReservationError):
    """Status change not present in the transition table."""


class SlotConflictError(ReservationError):
    """Interval collides with a confirmed reservation or a partial holiday."""

    status_code = status.HTTP_409_CONFLICT


class HolidayExistsError(ReservationError):
    """Same date and time window is already registered as a holiday."""

    status_code = status.HTTP_409_CONFLICT


class NotFoundError(ReservationError):
    """Referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidHolidayError(ReservationError):
    """Holiday window is half-specified or empty, or a month filter lacks its year."""
