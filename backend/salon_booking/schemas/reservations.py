# backend/salon_booking/schemas/reservations.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from ..services.reservations.status import ReservationStatus


class ReservationCreate(BaseModel):
    date: date
    start_time: str = Field(pattern=r"^\d{2}:\d{2}$", description="Time in HH:MM format")
    service_ids: list[str]
    note: Optional[str] = None

    model_config = {"from_attributes": True}


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus
    reason: Optional[str] = None


class ReservationLineRead(BaseModel):
    service_id: str
    service_name: str
    duration_min: int
    order_index: int

    model_config = {"from_attributes": True}


class ReservationRead(BaseModel):
    id: int

    date: date
    start_time: str
    end_time: str
    total_duration: int

    status: ReservationStatus
    note: Optional[str] = None
    cancel_reason: Optional[str] = None

    lines: list[ReservationLineRead]

    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class ReservationList(BaseModel):
    reservations: list[ReservationRead]
    pagination: Pagination
