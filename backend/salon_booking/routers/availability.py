# backend/salon_booking/routers/availability.py
"""
Availability API.

GET /availability - start times of one day for a selection of services.
The answer is advisory; POST /reservations re-checks everything.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.availability import AvailabilityResponse
from ..services.slots import compute_availability, get_booking_config


router = APIRouter(prefix="/availability", tags=["availability"])


@router.get("", response_model=AvailabilityResponse)
def get_availability(
    target_date: date = Query(..., alias="date"),
    service_ids: str = Query("", description="Comma-separated service ids, e.g. cut,color-short"),
    db: Session = Depends(get_db),
):
    """Get slots of a day with per-slot availability flags."""
    ids = [s.strip() for s in service_ids.split(",") if s.strip()]

    result = compute_availability(
        db=db,
        target_date=target_date,
        service_ids=ids,
        config=get_booking_config(),
    )

    return AvailabilityResponse(**result)
