# backend/salon_booking/routers/reservations.py
# PATCH /{id} = 405, DELETE = 405 (reservations are cancelled, never deleted)

from datetime import date
from math import ceil
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.reservations import (
    Pagination,
    ReservationCreate,
    ReservationList,
    ReservationRead,
    ReservationStatusUpdate,
)
from ..services.reservations import (
    ReservationStatus,
    book,
    change_status,
    get_reservation,
    list_reservations,
)

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("/", response_model=ReservationList)
def list_all_reservations(
    status_filter: Optional[ReservationStatus] = Query(None, alias="status"),
    target_date: Optional[date] = Query(None, alias="date"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    items, total = list_reservations(
        db,
        status=status_filter.value if status_filter else None,
        target_date=target_date,
        page=page,
        limit=limit,
    )
    return ReservationList(
        reservations=[ReservationRead.model_validate(obj) for obj in items],
        pagination=Pagination(
            total=total,
            page=page,
            limit=limit,
            total_pages=ceil(total / limit),
        ),
    )


@router.get("/{id}", response_model=ReservationRead)
def get_one_reservation(id: int, db: Session = Depends(get_db)):
    return get_reservation(db, id)


@router.post("/", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
):
    return book(
        db,
        target_date=data.date,
        start_time=data.start_time,
        service_ids=data.service_ids,
        note=data.note,
    )


@router.patch("/{id}/status", response_model=ReservationRead)
def update_reservation_status(
    id: int,
    data: ReservationStatusUpdate,
    db: Session = Depends(get_db),
):
    return change_status(db, id, data.status, reason=data.reason)


@router.patch("/{id}")
def patch_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )


@router.delete("/{id}")
def delete_not_allowed():
    raise HTTPException(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        detail="Method not allowed",
    )
