from .generated import (
    Base,
    Holidays,
    ReservationDayLocks,
    ReservationLines,
    Reservations,
    Services,
)

__all__ = [
    "Base",
    "Holidays",
    "ReservationDayLocks",
    "ReservationLines",
    "Reservations",
    "Services",
]
