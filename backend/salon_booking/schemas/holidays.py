# backend/salon_booking/schemas/holidays.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class HolidayCreate(BaseModel):
    date: date
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    reason: Optional[str] = None

    @model_validator(mode="after")
    def check_window(self):
        if (self.start_time is None) != (self.end_time is None):
            raise ValueError("start_time and end_time must be given together or not at all")
        if self.start_time is not None and self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self

    model_config = {"from_attributes": True}


class HolidayRead(BaseModel):
    id: int
    date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None
    is_full_day: bool
    created_at: Optional[str] = None

    model_config = {"from_attributes": True}
