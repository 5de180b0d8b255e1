# backend/salon_booking/services/reservations/guard.py
"""
Booking transaction guard.

The availability list a client saw may be stale by the time it submits,
so book() repeats every check inside one write transaction that holds the
date's lock, and only then inserts. Two overlapping attempts on the same
date are serialized: the second one sees the first one's reservation and
fails with SlotConflictError, leaving nothing behind.
"""

import logging
from datetime import date, datetime

from sqlalchemy.orm import Session

from ...database import write_transaction
from ...errors import (
    BookingWindowError,
    ClosedDayError,
    CutoffExceededError,
    InvalidStartTimeError,
    SlotConflictError,
)
from ...models.generated import ReservationLines, Reservations
from ..events import emit_event, reservation_payload
from ..slots.availability import is_slot_in_past, is_within_booking_window
from ..slots.calendar import resolve_day
from ..slots.catalog import aggregate_selection, load_catalog
from ..slots.config import (
    BookingConfig,
    get_booking_config,
    minutes_to_time_str,
    time_str_to_minutes,
)
from ..slots.conflicts import find_conflict, load_occupancy
from .status import INITIAL_STATUS
from .store import lock_day, now_str

logger = logging.getLogger(__name__)


def book(
    db: Session,
    target_date: date,
    start_time: str,
    service_ids: list[str],
    note: str | None = None,
    config: BookingConfig | None = None,
    now: datetime | None = None,
) -> Reservations:
    """
    Create a CONFIRMED reservation for service_ids starting at start_time.

    Raises:
        ClosedDayError: weekly closed day or full-day holiday
        BookingWindowError: past date/time or beyond the horizon
        InvalidSelectionError: empty, unknown, inactive or duplicate services
        CutoffExceededError: start after the selection's last bookable time
        InvalidStartTimeError: off the grid or outside business hours
        SlotConflictError: overlaps a confirmed reservation or a partial holiday
    """
    config = config or get_booking_config()
    now = now or datetime.now()

    try:
        start_min = time_str_to_minutes(start_time)
    except ValueError as e:
        raise InvalidStartTimeError(str(e), details={"start_time": start_time}) from e

    with write_transaction(db):
        lock_day(db, target_date)

        # Step 1: Calendar policy
        policy = resolve_day(db, target_date, config)
        if policy.closed:
            raise ClosedDayError(
                "The salon is closed on this date",
                details={"date": target_date.isoformat(), "reason": policy.reason},
            )

        if not is_within_booking_window(target_date, now.date(), config) or is_slot_in_past(
            target_date, start_min, now
        ):
            raise BookingWindowError(
                f"Reservations are accepted from now up to {config.horizon_days} days ahead",
                details={"date": target_date.isoformat(), "start_time": start_time},
            )

        # Step 2: Selection and its cutoff
        selection = aggregate_selection(load_catalog(db), service_ids)
        if start_min > selection.binding_cutoff:
            cutoff = minutes_to_time_str(selection.binding_cutoff)
            raise CutoffExceededError(
                f"The last start time for the selected services is {cutoff}",
                details={"start_time": start_time, "cutoff": cutoff},
            )

        end_min = start_min + selection.total_duration
        if (
            start_min < config.open_minutes
            or end_min > config.close_minutes
            or not config.is_on_grid(start_min)
        ):
            raise InvalidStartTimeError(
                f"Start time must be on the {config.slot_step_minutes}-minute grid "
                f"and the reservation must fit within {config.open_time}-{config.close_time}",
                details={"start_time": start_time, "end_time": minutes_to_time_str(end_min)},
            )

        # Step 3: Overlap check against committed state
        blockers = load_occupancy(db, target_date, policy.partial_closures)
        conflict = find_conflict(start_min, selection.total_duration, blockers)
        if conflict:
            logger.warning(
                f"Booking rejected: date={target_date} {start_time}-{minutes_to_time_str(end_min)} "
                f"overlaps {conflict.kind} {conflict.ref_id}"
            )
            raise SlotConflictError(
                "This time slot is no longer available",
                details={"conflict": conflict.describe()},
            )

        # Step 4: Insert
        timestamp = now_str()
        reservation = Reservations(
            date=target_date.isoformat(),
            start_time=minutes_to_time_str(start_min),
            end_time=minutes_to_time_str(end_min),
            total_duration=selection.total_duration,
            status=INITIAL_STATUS.value,
            note=note,
            created_at=timestamp,
            updated_at=timestamp,
            lines=[
                ReservationLines(
                    service_id=service.id,
                    service_name=service.name,
                    duration_min=service.duration_min,
                    order_index=index,
                )
                for index, service in enumerate(selection.services)
            ],
        )
        db.add(reservation)

    db.refresh(reservation)

    logger.info(
        f"Reservation created: id={reservation.id}, date={reservation.date} "
        f"{reservation.start_time}-{reservation.end_time}, services={selection.service_ids}"
    )

    emit_event("reservation_created", reservation_payload(reservation))

    return reservation
