# backend/salon_booking/services/slots/conflicts.py
"""
Conflict detection.

Occupancy of a date = CONFIRMED reservations + partial holiday windows.
All intervals are half-open [start, end) in minutes since midnight, so a
reservation ending at 14:00 does not block one starting at 14:00.
"""

from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from .config import minutes_to_time_str, time_str_to_minutes


@dataclass(frozen=True)
class TimeWindow:
    start: int
    end: int

    def overlaps(self, other: "TimeWindow") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Blocker:
    """Something occupying a window: a reservation or a holiday."""
    kind: str  # "reservation" | "holiday"
    window: TimeWindow
    ref_id: int | None = None

    def describe(self) -> dict:
        return {
            "kind": self.kind,
            "id": self.ref_id,
            "start_time": minutes_to_time_str(self.window.start),
            "end_time": minutes_to_time_str(self.window.end),
        }


def load_occupancy(
    db: Session,
    target_date: date,
    partial_closures: list[TimeWindow],
    exclude_reservation_id: int | None = None,
) -> list[Blocker]:
    """
    Collect everything that blocks time on target_date.

    Reads committed state only; callers that write afterwards must hold
    the day lock (see reservations.store.lock_day).
    """
    blockers = [Blocker("holiday", window) for window in partial_closures]

    for reservation in _get_confirmed_reservations(db, target_date):
        if reservation.id == exclude_reservation_id:
            continue
        blockers.append(Blocker(
            "reservation",
            TimeWindow(
                time_str_to_minutes(reservation.start_time),
                time_str_to_minutes(reservation.end_time),
            ),
            reservation.id,
        ))

    return blockers


def find_conflict(
    start: int,
    total_duration: int,
    blockers: list[Blocker],
) -> Blocker | None:
    """First blocker overlapping [start, start + total_duration), if any."""
    candidate = TimeWindow(start, start + total_duration)
    for blocker in blockers:
        if blocker.window.overlaps(candidate):
            return blocker
    return None


def is_blocked(start: int, total_duration: int, blockers: list[Blocker]) -> bool:
    return find_conflict(start, total_duration, blockers) is not None


# ── Database helpers ─────────────────────────────────────────────────────


def _get_confirmed_reservations(db: Session, target_date: date) -> list:
    """Get reservations occupying target_date."""
    from ...models.generated import Reservations
    from ..reservations.status import OCCUPYING_STATUSES

    return (
        db.query(Reservations)
        .filter(
            Reservations.date == target_date.isoformat(),
            Reservations.status.in_([s.value for s in OCCUPYING_STATUSES]),
        )
        .order_by(Reservations.start_time)
        .all()
    )
