"""
backend/salon_booking/services/events.py

Event emitter: pushes reservation events to a Redis list so that other
processes (notifications, audit consumers) can pick them up.

Queue:
- events:p2p: reservation_created, reservation_status_changed

Every event is a JSON object:

    {
        "type": "reservation_status_changed",
        "reservation_id": 12,
        "date": "2025-12-16",
        "start_time": "14:00",
        "end_time": "14:40",
        "status": "CANCELLED",
        "from": "CONFIRMED",        # status changes only
        "ts": 1765872000
    }
"""

import json
import time
import logging

from ..redis_client import redis_client

logger = logging.getLogger(__name__)

EVENTS_QUEUE = "events:p2p"


def reservation_payload(reservation) -> dict:
    """Common fields of every reservation event."""
    return {
        "reservation_id": reservation.id,
        "date": reservation.date,
        "start_time": reservation.start_time,
        "end_time": reservation.end_time,
        "status": reservation.status,
    }


def emit_event(event_type: str, payload: dict) -> None:
    """
    Push one event onto EVENTS_QUEUE.

    Called after the change is committed, so emission is best effort: a
    Redis failure is logged and never undoes the change.
    """
    message = json.dumps({"type": event_type, **payload, "ts": int(time.time())})
    try:
        redis_client.rpush(EVENTS_QUEUE, message)
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")
        return
    logger.info(f"Event emitted: {event_type} ({payload.get('reservation_id')})")
