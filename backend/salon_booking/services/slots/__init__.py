# backend/salon_booking/services/slots/__init__.py
"""
Slot availability.

Read side of the reservation engine: calendar policy, selection
aggregation, slot grid and conflict detection, composed into a per-day
availability list. Nothing here is cached; every call reads committed
state.
"""

from .config import BookingConfig, get_booking_config
from .calendar import DayPolicy, resolve_day
from .catalog import CatalogService, Selection, aggregate_selection, load_catalog
from .grid import generate_slot_grid
from .conflicts import Blocker, TimeWindow, find_conflict, is_blocked, load_occupancy
from .availability import compute_availability

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "DayPolicy",
    "resolve_day",
    "CatalogService",
    "Selection",
    "aggregate_selection",
    "load_catalog",
    "generate_slot_grid",
    "Blocker",
    "TimeWindow",
    "find_conflict",
    "is_blocked",
    "load_occupancy",
    "compute_availability",
]
