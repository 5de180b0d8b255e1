# backend/salon_booking/schemas/availability.py
"""
Pydantic schemas for the availability API.
"""

from datetime import date
from pydantic import BaseModel, Field


class SlotInfo(BaseModel):
    """A single candidate start time."""
    time: str  # "HH:MM"
    available: bool

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    """Slots of one day for a selection of services."""
    date: date
    day_of_week: int = Field(description="0 = Monday ... 6 = Sunday")
    is_closed: bool
    total_duration: int = Field(description="Sum of selected service durations, minutes")
    slots: list[SlotInfo]

    model_config = {"from_attributes": True}
