import threading
from datetime import date, datetime

import pytest

from salon_booking.errors import (
    BookingWindowError,
    ClosedDayError,
    CutoffExceededError,
    InvalidSelectionError,
    InvalidStartTimeError,
    ReservationError,
    SlotConflictError,
)
from salon_booking.models.generated import ReservationDayLocks, ReservationLines, Reservations
from salon_booking.services.reservations.guard import book
from salon_booking.services.slots.availability import compute_availability

from .conftest import NOW, TUESDAY, assert_no_overlap


def test_book_creates_confirmed_reservation_with_ordered_lines(db, catalog, config, redis_mock):
    reservation = book(db, TUESDAY, "13:00", ["blow", "cut"], note="First visit", config=config, now=NOW)

    assert reservation.id is not None
    assert reservation.date == "2025-12-16"
    assert reservation.start_time == "13:00"
    assert reservation.end_time == "14:10"
    assert reservation.total_duration == 70
    assert reservation.status == "CONFIRMED"
    assert reservation.note == "First visit"
    assert [(line.service_id, line.duration_min, line.order_index) for line in reservation.lines] == [
        ("blow", 30, 0),
        ("cut", 40, 1),
    ]
    assert sum(line.duration_min for line in reservation.lines) == reservation.total_duration

    lock = db.get(ReservationDayLocks, "2025-12-16")
    assert lock.version == 1
    redis_mock.rpush.assert_called_once()


def test_end_time_may_touch_closing_time(db, catalog, config):
    reservation = book(db, TUESDAY, "19:20", ["cut"], config=config, now=NOW)
    assert reservation.end_time == "20:00"


def test_book_on_weekly_closed_day(db, catalog, config):
    with pytest.raises(ClosedDayError):
        book(db, date(2025, 12, 15), "13:00", ["cut"], config=config, now=NOW)


def test_book_on_full_day_holiday(db, catalog, config, add_holiday):
    add_holiday(TUESDAY)
    with pytest.raises(ClosedDayError):
        book(db, TUESDAY, "13:00", ["cut"], config=config, now=NOW)


def test_book_after_cutoff(db, catalog, config):
    with pytest.raises(CutoffExceededError) as exc_info:
        book(db, TUESDAY, "19:10", ["blow"], config=config, now=NOW)
    assert exc_info.value.details["cutoff"] == "19:00"


def test_book_at_exact_cutoff(db, catalog, config):
    reservation = book(db, TUESDAY, "19:00", ["blow"], config=config, now=NOW)
    assert reservation.end_time == "19:30"


@pytest.mark.parametrize("start_time", ["09:50", "13:05", "25:00", "1300"])
def test_book_with_invalid_start_time(db, catalog, config, start_time):
    with pytest.raises(InvalidStartTimeError):
        book(db, TUESDAY, start_time, ["cut"], config=config, now=NOW)


def test_book_past_closing_time(db, catalog, config):
    # cut + color = 130 minutes, cutoff 18:00, 18:00 + 130 > 20:00
    with pytest.raises(InvalidStartTimeError):
        book(db, TUESDAY, "18:00", ["cut", "color"], config=config, now=NOW)


def test_book_invalid_selection(db, catalog, config):
    with pytest.raises(InvalidSelectionError):
        book(db, TUESDAY, "13:00", [], config=config, now=NOW)
    with pytest.raises(InvalidSelectionError):
        book(db, TUESDAY, "13:00", ["unknown"], config=config, now=NOW)


def test_book_outside_booking_window(db, catalog, config):
    with pytest.raises(BookingWindowError):
        book(db, date(2025, 11, 25), "13:00", ["cut"], config=config, now=NOW)
    with pytest.raises(BookingWindowError):
        book(db, date(2026, 3, 3), "13:00", ["cut"], config=config, now=NOW)
    with pytest.raises(BookingWindowError):
        book(db, TUESDAY, "13:00", ["cut"], config=config, now=datetime(2025, 12, 16, 13, 0))


def test_book_overlapping_confirmed_reservation(db, catalog, config, add_reservation):
    existing = add_reservation(TUESDAY, "14:00", "15:00")

    with pytest.raises(SlotConflictError) as exc_info:
        book(db, TUESDAY, "13:40", ["cut"], config=config, now=NOW)
    assert exc_info.value.details["conflict"]["id"] == existing.id

    assert book(db, TUESDAY, "13:20", ["cut"], config=config, now=NOW).end_time == "14:00"
    assert book(db, TUESDAY, "15:00", ["cut"], config=config, now=NOW).start_time == "15:00"


def test_book_overlapping_partial_holiday(db, catalog, config, add_holiday):
    add_holiday(TUESDAY, "12:00", "13:00")
    with pytest.raises(SlotConflictError) as exc_info:
        book(db, TUESDAY, "11:30", ["cut"], config=config, now=NOW)
    assert exc_info.value.details["conflict"]["kind"] == "holiday"


def test_cancelled_reservation_frees_slot(db, catalog, config, add_reservation):
    add_reservation(TUESDAY, "14:00", "15:00", status="CANCELLED")
    reservation = book(db, TUESDAY, "14:00", ["cut"], config=config, now=NOW)
    assert reservation.status == "CONFIRMED"


def test_failed_booking_writes_nothing(db, catalog, config, add_reservation):
    add_reservation(TUESDAY, "14:00", "15:00")
    with pytest.raises(SlotConflictError):
        book(db, TUESDAY, "14:20", ["cut", "blow"], config=config, now=NOW)

    assert db.query(Reservations).count() == 1
    assert db.query(ReservationLines).count() == 1


def test_availability_is_sound(db, catalog, config, add_reservation, add_holiday):
    """Every slot marked available books; every other slot fails with a domain error."""
    add_reservation(TUESDAY, "14:00", "15:00")
    add_holiday(TUESDAY, "12:00", "13:00")

    result = compute_availability(db, TUESDAY, ["blow"], config, now=NOW)
    for slot in result["slots"]:
        if slot["available"]:
            reservation = book(db, TUESDAY, slot["time"], ["blow"], config=config, now=NOW)
            # Undo so the next slot is judged against the same state
            reservation.status = "CANCELLED"
            db.commit()
        else:
            with pytest.raises(ReservationError):
                book(db, TUESDAY, slot["time"], ["blow"], config=config, now=NOW)


def test_no_overlap_invariant_after_many_attempts(db, catalog, config):
    attempts = [
        ("10:00", ["color"]), ("10:30", ["cut"]), ("11:30", ["cut"]), ("11:40", ["blow"]),
        ("12:10", ["blow"]), ("12:20", ["cut", "blow"]), ("12:40", ["treatment"]),
        ("13:30", ["cut"]), ("14:00", ["color"]), ("15:30", ["blow"]), ("16:00", ["cut"]),
    ]
    booked = 0
    for start_time, service_ids in attempts:
        try:
            book(db, TUESDAY, start_time, service_ids, config=config, now=NOW)
            booked += 1
        except SlotConflictError:
            pass

    assert booked > 0
    assert_no_overlap(db, TUESDAY)


def test_concurrent_bookings_for_same_slot_only_one_commits(session_factory, catalog, config):
    barrier = threading.Barrier(2)
    outcomes = []
    lock = threading.Lock()

    def attempt(service_ids):
        session = session_factory()
        try:
            advisory = compute_availability(session, TUESDAY, service_ids, config, now=NOW)
            slot = next(s for s in advisory["slots"] if s["time"] == "14:00")
            assert slot["available"]
            barrier.wait(timeout=10)
            reservation = book(session, TUESDAY, "14:00", service_ids, config=config, now=NOW)
            result = ("ok", reservation.id)
        except SlotConflictError as e:
            result = ("conflict", e.code)
        except Exception as e:  # surfaced through the assertions below
            result = ("error", repr(e))
        finally:
            session.close()
        with lock:
            outcomes.append(result)

    threads = [
        threading.Thread(target=attempt, args=(["cut"],)),
        threading.Thread(target=attempt, args=(["treatment"],)),
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    kinds = sorted(kind for kind, _ in outcomes)
    assert kinds == ["conflict", "ok"], outcomes

    session = session_factory()
    try:
        assert session.query(Reservations).filter(Reservations.status == "CONFIRMED").count() == 1
        assert_no_overlap(session, TUESDAY)
    finally:
        session.close()


def test_concurrent_bookings_on_different_slots_both_commit(session_factory, catalog, config):
    barrier = threading.Barrier(2)
    outcomes = []

    def attempt(start_time):
        session = session_factory()
        try:
            barrier.wait(timeout=10)
            book(session, TUESDAY, start_time, ["cut"], config=config, now=NOW)
            outcomes.append("ok")
        except Exception as e:
            outcomes.append(repr(e))
        finally:
            session.close()

    threads = [threading.Thread(target=attempt, args=(t,)) for t in ("11:00", "15:00")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert outcomes == ["ok", "ok"]
