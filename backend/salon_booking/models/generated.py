from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, Text, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Services(Base):
    __tablename__ = 'services'
    __table_args__ = (
        CheckConstraint('duration_min > 0'),
    )

    id = Column(Text, primary_key=True)  # slug, e.g. "cut"
    name = Column(Text, nullable=False)
    duration_min = Column(Integer, nullable=False)
    last_booking_time = Column(Text, nullable=False)  # "HH:MM"
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    category = Column(Text)
    description = Column(Text)

    reservation_lines = relationship('ReservationLines', back_populates='service')


class Holidays(Base):
    __tablename__ = 'holidays'
    __table_args__ = (
        Index('ix_holidays_date', 'date'),
    )

    date = Column(Text, nullable=False)  # "YYYY-MM-DD"
    id = Column(Integer, primary_key=True)
    start_time = Column(Text)  # NULL together with end_time = full-day closure
    end_time = Column(Text)
    reason = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    @property
    def is_full_day(self) -> bool:
        return self.start_time is None and self.end_time is None


class Reservations(Base):
    __tablename__ = 'reservations'
    __table_args__ = (
        Index('ix_reservations_date_status', 'date', 'status'),
    )

    date = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    total_duration = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'CONFIRMED'"))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    id = Column(Integer, primary_key=True)
    note = Column(Text)
    cancel_reason = Column(Text)

    lines = relationship(
        'ReservationLines',
        back_populates='reservation',
        order_by='ReservationLines.order_index',
        cascade='all',
    )


class ReservationLines(Base):
    __tablename__ = 'reservation_lines'

    reservation_id = Column(ForeignKey('reservations.id'), nullable=False)
    service_id = Column(ForeignKey('services.id'), nullable=False)
    service_name = Column(Text, nullable=False)
    duration_min = Column(Integer, nullable=False)
    order_index = Column(Integer, nullable=False)
    id = Column(Integer, primary_key=True)

    reservation = relationship('Reservations', back_populates='lines')
    service = relationship('Services', back_populates='reservation_lines')


class ReservationDayLocks(Base):
    __tablename__ = 'reservation_day_locks'

    date = Column(Text, primary_key=True)
    version = Column(Integer, nullable=False, server_default=text('0'))
