# backend/salon_booking/routers/holidays.py
# PATCH = 405, DELETE = ALLOWED (hard)

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.holidays import (
    HolidayCreate,
    HolidayRead,
)
from ..services import holidays as holiday_registry

router = APIRouter(prefix="/holidays", tags=["holidays"])


@router.get("/", response_model=list[HolidayRead])
def list_holidays(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    db: Session = Depends(get_db),
):
    return holiday_registry.list_holidays(db, year=year, month=month)


@router.post("/", response_model=HolidayRead, status_code=status.HTTP_201_CREATED)
def create_holiday(
    data: HolidayCreate,
    db: Session = Depends(get_db),
):
    return holiday_registry.create_holiday(
        db,
        target_date=data.date,
        start_time=data.start_time,
        end_time=data.end_time,
        reason=data.reason,
    )


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_holiday(id: int, db: Session = Depends(get_db)):
    holiday_registry.delete_holiday(db, id)
