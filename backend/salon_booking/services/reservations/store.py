# backend/salon_booking/services/reservations/store.py
"""
Reservation store helpers: lookups and the per-date write lock.
"""

from datetime import date, datetime

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ...errors import NotFoundError
from ...models.generated import ReservationDayLocks, Reservations


def now_str() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def lock_day(db: Session, target_date: date) -> None:
    """
    Take the write lock for target_date until the transaction ends.

    Bumps the date's row in reservation_day_locks. On server databases this
    is a row lock that serializes writers of the same date; on SQLite the
    first write takes the database write lock. Either way the overlap check
    that follows sees every reservation committed before us.
    """
    date_str = target_date.isoformat()
    stmt = (
        update(ReservationDayLocks)
        .where(ReservationDayLocks.date == date_str)
        .values(version=ReservationDayLocks.version + 1)
        .execution_options(synchronize_session=False)
    )
    if db.execute(stmt).rowcount:
        return

    try:
        with db.begin_nested():
            db.add(ReservationDayLocks(date=date_str, version=1))
    except IntegrityError:
        # Created concurrently; lock the existing row instead
        db.execute(stmt)


def get_reservation(db: Session, reservation_id: int) -> Reservations:
    obj = db.get(Reservations, reservation_id)
    if not obj:
        raise NotFoundError("Reservation not found", details={"reservation_id": reservation_id})
    return obj


def list_reservations(
    db: Session,
    status: str | None = None,
    target_date: date | None = None,
    page: int = 1,
    limit: int = 10,
) -> tuple[list[Reservations], int]:
    """Newest first. Returns (page of reservations, total count)."""
    query = db.query(Reservations)
    if status:
        query = query.filter(Reservations.status == status)
    if target_date:
        query = query.filter(Reservations.date == target_date.isoformat())

    total = query.count()
    items = (
        query.options(selectinload(Reservations.lines))
        .order_by(Reservations.date.desc(), Reservations.start_time.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total
