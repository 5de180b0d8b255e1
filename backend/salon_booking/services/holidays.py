# backend/salon_booking/services/holidays.py
"""
Holiday registry.

Ad hoc closures layered on top of the weekly schedule. A row without
start/end time closes the whole day; a row with both closes one window.
Several rows may exist for the same date.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy.orm import Session

from ..database import write_transaction
from ..errors import HolidayExistsError, InvalidHolidayError, NotFoundError
from ..models.generated import Holidays
from .slots.config import time_str_to_minutes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HolidayOverride:
    """Typed, read-only view of a holiday row."""
    id: int
    date: date
    start_time: str | None = None
    end_time: str | None = None
    reason: str | None = None

    @property
    def is_full_day(self) -> bool:
        return self.start_time is None and self.end_time is None


def get_overrides_for_date(db: Session, target_date: date) -> list[HolidayOverride]:
    """All overrides registered for target_date, ordered by start time."""
    rows = (
        db.query(Holidays)
        .filter(Holidays.date == target_date.isoformat())
        .order_by(Holidays.start_time, Holidays.id)
        .all()
    )
    return [_to_override(row) for row in rows]


def list_holidays(
    db: Session,
    year: int | None = None,
    month: int | None = None,
) -> list[Holidays]:
    """
    List holidays, optionally limited to a year or a single month of it.

    Raises:
        InvalidHolidayError: month given without year
    """
    if month is not None and year is None:
        raise InvalidHolidayError("month filter requires year", details={"month": month})

    query = db.query(Holidays)

    if year is not None:
        if month is not None:
            last_day = calendar.monthrange(year, month)[1]
            start, end = date(year, month, 1), date(year, month, last_day)
        else:
            start, end = date(year, 1, 1), date(year, 12, 31)
        query = query.filter(
            Holidays.date >= start.isoformat(),
            Holidays.date <= end.isoformat(),
        )

    return query.order_by(Holidays.date, Holidays.start_time, Holidays.id).all()


def create_holiday(
    db: Session,
    target_date: date,
    start_time: str | None = None,
    end_time: str | None = None,
    reason: str | None = None,
) -> Holidays:
    """
    Register a closure.

    Raises:
        InvalidHolidayError: only one of start/end given, or start >= end
        HolidayExistsError: same date and window already registered
    """
    if (start_time is None) != (end_time is None):
        raise InvalidHolidayError(
            "start_time and end_time must be given together or not at all",
            details={"start_time": start_time, "end_time": end_time},
        )
    if start_time is not None:
        try:
            start_min = time_str_to_minutes(start_time)
            end_min = time_str_to_minutes(end_time)
        except ValueError as e:
            raise InvalidHolidayError(str(e)) from e
        if start_min >= end_min:
            raise InvalidHolidayError(
                "start_time must be before end_time",
                details={"start_time": start_time, "end_time": end_time},
            )

    date_str = target_date.isoformat()
    with write_transaction(db):
        existing = (
            db.query(Holidays)
            .filter(
                Holidays.date == date_str,
                Holidays.start_time.is_(start_time) if start_time is None else Holidays.start_time == start_time,
                Holidays.end_time.is_(end_time) if end_time is None else Holidays.end_time == end_time,
            )
            .first()
        )
        if existing:
            raise HolidayExistsError(
                "This date and time window is already registered as a holiday",
                details={"holiday_id": existing.id},
            )

        obj = Holidays(
            date=date_str,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
        )
        db.add(obj)
    db.refresh(obj)

    window = f"{start_time}-{end_time}" if start_time else "full day"
    logger.info(f"Holiday created: id={obj.id}, date={date_str}, window={window}")
    return obj


def delete_holiday(db: Session, holiday_id: int) -> None:
    with write_transaction(db):
        obj = db.get(Holidays, holiday_id)
        if not obj:
            raise NotFoundError("Holiday not found", details={"holiday_id": holiday_id})
        date_str = obj.date
        db.delete(obj)
    logger.info(f"Holiday deleted: id={holiday_id}, date={date_str}")


def _to_override(row: Holidays) -> HolidayOverride:
    return HolidayOverride(
        id=row.id,
        date=date.fromisoformat(row.date),
        start_time=row.start_time,
        end_time=row.end_time,
        reason=row.reason,
    )
