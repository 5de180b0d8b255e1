# backend/salon_booking/services/reservations/status.py
"""
Reservation status machine.

    CONFIRMED ──> CANCELLED ──┐
        │  ^                  │ restore (conflict re-check under day lock)
        │  └──────────────────┤
        └────> NO_SHOW ───────┘

Only CONFIRMED occupies time, so only a restore takes the day lock.
Self-transitions are no-ops. Any pair not in TRANSITIONS is rejected.
Transitions never touch times or lines.
"""

import logging
from datetime import date
from enum import Enum

from sqlalchemy.orm import Session

from ...database import write_transaction
from ...errors import ClosedDayError, InvalidTransitionError, SlotConflictError
from ..events import emit_event, reservation_payload
from ..slots.calendar import resolve_day
from ..slots.config import BookingConfig, get_booking_config, time_str_to_minutes
from ..slots.conflicts import find_conflict, load_occupancy
from .store import get_reservation, lock_day, now_str

logger = logging.getLogger(__name__)


class ReservationStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


INITIAL_STATUS = ReservationStatus.CONFIRMED

OCCUPYING_STATUSES = frozenset({ReservationStatus.CONFIRMED})

TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELLED, ReservationStatus.NO_SHOW}),
    ReservationStatus.CANCELLED: frozenset({ReservationStatus.CONFIRMED}),
    ReservationStatus.NO_SHOW: frozenset({ReservationStatus.CONFIRMED}),
}


def parse_status(value: "ReservationStatus | str") -> ReservationStatus:
    try:
        return ReservationStatus(value)
    except ValueError:
        raise InvalidTransitionError(
            f"Unknown reservation status: {value}",
            details={"status": value, "allowed": [s.value for s in ReservationStatus]},
        ) from None


def is_transition_allowed(current: ReservationStatus, target: ReservationStatus) -> bool:
    return current == target or target in TRANSITIONS[current]


def change_status(
    db: Session,
    reservation_id: int,
    target: "ReservationStatus | str",
    reason: str | None = None,
    config: BookingConfig | None = None,
):
    """
    Move a reservation to target status.

    The current status is read inside the write transaction, so a change
    another writer committed first is seen. When the reservation is
    already in target the call is a no-op and emits nothing.

    Raises:
        NotFoundError: unknown reservation id
        InvalidTransitionError: unknown status or pair not in TRANSITIONS
        SlotConflictError: restore onto an interval that is now occupied
        ClosedDayError: restore onto a day that is now fully closed
    """
    target = parse_status(target)
    config = config or get_booking_config()

    with write_transaction(db):
        reservation = get_reservation(db, reservation_id)
        if target in OCCUPYING_STATUSES:
            lock_day(db, date.fromisoformat(reservation.date))
            # Someone else may have changed it while we waited for the lock
            db.refresh(reservation)

        previous = parse_status(reservation.status)
        changed = previous != target
        if changed:
            if not is_transition_allowed(previous, target):
                raise InvalidTransitionError(
                    f"Cannot change status from {previous.value} to {target.value}",
                    details={"from": previous.value, "to": target.value},
                )
            if target in OCCUPYING_STATUSES:
                _check_restore(db, reservation, config)
                reservation.cancel_reason = None
            elif target == ReservationStatus.CANCELLED:
                reservation.cancel_reason = reason
            reservation.status = target.value
            reservation.updated_at = now_str()

    db.refresh(reservation)
    if not changed:
        return reservation

    logger.info(
        f"Reservation status changed: id={reservation.id}, {previous.value} -> {target.value}, "
        f"date={reservation.date} {reservation.start_time}-{reservation.end_time}"
    )
    payload = reservation_payload(reservation)
    payload["from"] = previous.value
    emit_event("reservation_status_changed", payload)
    return reservation


def _check_restore(db: Session, reservation, config: BookingConfig) -> None:
    """Re-entering the occupancy set gets the same checks a new booking gets."""
    target_date = date.fromisoformat(reservation.date)

    policy = resolve_day(db, target_date, config)
    if policy.closed:
        raise ClosedDayError(
            "The reservation's date is now closed",
            details={"date": reservation.date, "reason": policy.reason},
        )

    blockers = load_occupancy(
        db, target_date, policy.partial_closures, exclude_reservation_id=reservation.id
    )
    conflict = find_conflict(
        time_str_to_minutes(reservation.start_time), reservation.total_duration, blockers
    )
    if conflict:
        logger.warning(
            f"Restore rejected: id={reservation.id}, date={reservation.date} "
            f"{reservation.start_time}-{reservation.end_time} overlaps {conflict.kind} {conflict.ref_id}"
        )
        raise SlotConflictError(
            "The original time slot is no longer free",
            details={"reservation_id": reservation.id, "conflict": conflict.describe()},
        )
