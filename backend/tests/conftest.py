# backend/tests/conftest.py
"""
Shared fixtures.

Every test gets its own file-backed SQLite database (so several threads
can open connections to it) and a mocked Redis client.
"""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from salon_booking.database import build_engine, get_db
from salon_booking.main import app
from salon_booking.models.generated import Base, Holidays, ReservationLines, Reservations, Services
from salon_booking.services.slots.config import BookingConfig, time_str_to_minutes

# Monday 2025-12-01 08:00; the salon is closed on Mondays
NOW = datetime(2025, 12, 1, 8, 0)
TUESDAY = date(2025, 12, 16)
WEDNESDAY = date(2025, 12, 17)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}", lock_timeout=10)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    # Loaded objects stay usable after commit without opening a new read transaction
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(autouse=True)
def redis_mock(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr("salon_booking.services.events.redis_client", mock)
    return mock


@pytest.fixture
def config():
    return BookingConfig(
        open_time="10:00",
        close_time="20:00",
        closed_weekday=0,
        slot_step_minutes=10,
        horizon_days=60,
    )


@pytest.fixture
def catalog(db):
    services = [
        Services(id="cut", name="Cut", category="cut", duration_min=40, last_booking_time="19:20"),
        Services(id="color", name="Color", category="color", duration_min=90, last_booking_time="18:00"),
        Services(id="blow", name="Blow dry", category="finish", duration_min=30, last_booking_time="19:00"),
        Services(id="treatment", name="Treatment", category="care", duration_min=60, last_booking_time="19:00"),
        Services(id="spa", name="Head spa", category="care", duration_min=60, last_booking_time="19:00"),
        Services(id="retired", name="Retired", category="old", duration_min=30,
                 last_booking_time="19:00", is_active=0),
    ]
    db.add_all(services)
    db.commit()
    return {s.id: s for s in services}


@pytest.fixture
def add_reservation(db, catalog):
    """Insert a reservation row directly, bypassing the guard."""
    def _add(target_date, start_time, end_time, status="CONFIRMED", service_id="cut"):
        start_h, start_m = map(int, start_time.split(":"))
        end_h, end_m = map(int, end_time.split(":"))
        duration = (end_h * 60 + end_m) - (start_h * 60 + start_m)
        obj = Reservations(
            date=target_date.isoformat(),
            start_time=start_time,
            end_time=end_time,
            total_duration=duration,
            status=status,
            lines=[ReservationLines(
                service_id=service_id,
                service_name=service_id,
                duration_min=duration,
                order_index=0,
            )],
        )
        db.add(obj)
        db.commit()
        db.refresh(obj)
        db.commit()  # end the read transaction opened by refresh
        return obj
    return _add


@pytest.fixture
def add_holiday(db):
    def _add(target_date, start_time=None, end_time=None, reason=None):
        obj = Holidays(
            date=target_date.isoformat(),
            start_time=start_time,
            end_time=end_time,
            reason=reason,
        )
        db.add(obj)
        db.commit()
        db.refresh(obj)
        db.commit()  # end the read transaction opened by refresh
        return obj
    return _add


@pytest.fixture
def client(session_factory, catalog):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def assert_no_overlap(db, target_date):
    """No two CONFIRMED reservations of target_date share a minute."""
    db.rollback()
    confirmed = (
        db.query(Reservations)
        .filter(Reservations.date == target_date.isoformat(), Reservations.status == "CONFIRMED")
        .order_by(Reservations.start_time)
        .all()
    )
    for earlier, later in zip(confirmed, confirmed[1:]):
        assert time_str_to_minutes(earlier.end_time) <= time_str_to_minutes(later.start_time)
