# backend/salon_booking/routers/services.py
# Read-only catalog lookup; catalog management lives elsewhere.

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.generated import Services as DBServices
from ..schemas.services import ServiceRead

router = APIRouter(prefix="/services", tags=["services"])


@router.get("/", response_model=list[ServiceRead])
def list_services(db: Session = Depends(get_db)):
    return (
        db.query(DBServices)
        .filter(DBServices.is_active == 1)
        .order_by(DBServices.category, DBServices.id)
        .all()
    )


@router.get("/{id}", response_model=ServiceRead)
def get_service(id: str, db: Session = Depends(get_db)):
    obj = db.get(DBServices, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj
