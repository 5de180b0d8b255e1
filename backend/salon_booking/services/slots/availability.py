# backend/salon_booking/services/slots/availability.py
"""
Availability of start times for a selection of services on one day.

Composes:
- calendar policy (weekly closed day, holidays)
- selection aggregation (total duration, binding cutoff)
- slot grid (what fits inside business hours)
- conflict detection (confirmed reservations, partial holidays)

The result is advisory: nothing is locked or written, and a booking must
re-check everything at commit time (see reservations.guard).
"""

from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from .calendar import resolve_day
from .catalog import aggregate_selection, load_catalog
from .config import BookingConfig, get_booking_config, minutes_to_time_str
from .conflicts import is_blocked, load_occupancy
from .grid import generate_slot_grid


def compute_availability(
    db: Session,
    target_date: date,
    service_ids: list[str],
    config: BookingConfig | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Calculate slot availability for a selection of services.

    Returns:
        Dict for AvailabilityResponse.

    Raises:
        InvalidSelectionError: when the day is open and the selection is invalid
    """
    config = config or get_booking_config()
    now = now or datetime.now()

    result = {
        "date": target_date,
        "day_of_week": target_date.weekday(),
        "is_closed": False,
        "total_duration": 0,
        "slots": [],
    }

    # Step 1: Calendar policy
    policy = resolve_day(db, target_date, config)
    if policy.closed:
        result["is_closed"] = True
        return result

    # Step 2: Selection
    selection = aggregate_selection(load_catalog(db), service_ids)
    result["total_duration"] = selection.total_duration

    if not is_within_booking_window(target_date, now.date(), config):
        return result

    # Step 3: Candidate start times
    candidates = generate_slot_grid(
        config.open_minutes,
        config.close_minutes,
        selection.total_duration,
        config.slot_step_minutes,
    )

    # Step 4: Flag each candidate
    blockers = load_occupancy(db, target_date, policy.partial_closures)
    slots = []
    for t in candidates:
        available = (
            t <= selection.binding_cutoff
            and not is_slot_in_past(target_date, t, now)
            and not is_blocked(t, selection.total_duration, blockers)
        )
        slots.append({"time": minutes_to_time_str(t), "available": available})

    result["slots"] = slots
    return result


def is_within_booking_window(target_date: date, today: date, config: BookingConfig) -> bool:
    """Dates from today up to today + horizon_days are bookable."""
    return today <= target_date <= today + timedelta(days=config.horizon_days)


def is_slot_in_past(target_date: date, start_min: int, now: datetime) -> bool:
    slot_dt = datetime.combine(target_date, datetime.min.time()) + timedelta(minutes=start_min)
    return slot_dt <= now
