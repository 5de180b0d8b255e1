# backend/salon_booking/schemas/services.py

from typing import Optional
from pydantic import BaseModel


class ServiceRead(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    duration_min: int
    last_booking_time: str
    is_active: bool

    model_config = {"from_attributes": True}
