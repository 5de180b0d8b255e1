# backend/salon_booking/services/slots/calendar.py
"""
Calendar policy: is a date operable, and which windows of it are closed.

Contains:
✓ fixed weekly schedule (open/close time, one closed weekday)
✓ holiday registry overrides (full-day and partial)

Does NOT contain:
✗ Reservations (see conflicts.py)
✗ Service cutoffs (see catalog.py)
"""

from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.orm import Session

from .. import holidays as holiday_registry
from .config import BookingConfig, get_booking_config, time_str_to_minutes
from .conflicts import TimeWindow


@dataclass(frozen=True)
class DayPolicy:
    closed: bool
    partial_closures: list[TimeWindow] = field(default_factory=list)
    reason: str | None = None


def resolve_day(
    db: Session,
    target_date: date,
    config: BookingConfig | None = None,
) -> DayPolicy:
    """Resolve the calendar policy for target_date. Never raises."""
    config = config or get_booking_config()

    if target_date.weekday() == config.closed_weekday:
        return DayPolicy(closed=True, reason="weekly_closed_day")

    partial: list[TimeWindow] = []
    for override in holiday_registry.get_overrides_for_date(db, target_date):
        if override.is_full_day:
            return DayPolicy(closed=True, reason=override.reason or "holiday")
        partial.append(TimeWindow(
            time_str_to_minutes(override.start_time),
            time_str_to_minutes(override.end_time),
        ))

    return DayPolicy(closed=False, partial_closures=partial)
