import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .database import SessionLocal
from .errors import ReservationError
from .redis_client import redis_client
from .routers import availability, holidays, reservations, services

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Salon Reservations API")

app.include_router(availability.router)
app.include_router(reservations.router)
app.include_router(holidays.router)
app.include_router(services.router)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    # Store unreachable, lock timeout, ...: the caller should retry later,
    # not pick another slot
    logger.exception(f"Database failure on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": {
            "message": "Service temporarily unavailable, try again later",
            "code": "InternalError",
            "details": {},
        }},
    )


@app.get("/health")
def health():
    db = SessionLocal()
    try:
        db_ok = db.execute(text("SELECT 1")).scalar() == 1
    except SQLAlchemyError:
        logger.exception("Health check: database unreachable")
        db_ok = False
    finally:
        db.close()

    try:
        redis_ok = bool(redis_client.ping())
    except Exception as e:
        logger.warning(f"Health check: redis unreachable: {e}")
        redis_ok = False

    return {"database": db_ok, "redis": redis_ok}
