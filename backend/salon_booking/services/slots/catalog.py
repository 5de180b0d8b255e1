# backend/salon_booking/services/slots/catalog.py
"""
Service catalog snapshot and selection aggregation.

The catalog is read fresh for every request and frozen into a snapshot;
aggregation is a pure function over that snapshot.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from sqlalchemy.orm import Session

from ...errors import InvalidSelectionError
from .config import time_str_to_minutes


@dataclass(frozen=True)
class CatalogService:
    id: str
    name: str
    duration_min: int
    last_booking_time: str  # "HH:MM", latest allowed start
    is_active: bool = True
    category: str | None = None

    @property
    def cutoff_minutes(self) -> int:
        return time_str_to_minutes(self.last_booking_time)


CatalogSnapshot = Mapping[str, CatalogService]


@dataclass(frozen=True)
class Selection:
    """Aggregated view of the services picked for one reservation."""
    services: tuple[CatalogService, ...]
    total_duration: int
    binding_cutoff: int  # minutes since midnight

    @property
    def service_ids(self) -> list[str]:
        return [s.id for s in self.services]


def load_catalog(db: Session) -> CatalogSnapshot:
    """Read the whole catalog into an immutable snapshot."""
    from ...models.generated import Services

    snapshot = {
        row.id: CatalogService(
            id=row.id,
            name=row.name,
            duration_min=row.duration_min,
            last_booking_time=row.last_booking_time,
            is_active=bool(row.is_active),
            category=row.category,
        )
        for row in db.query(Services).all()
    }
    return MappingProxyType(snapshot)


def aggregate_selection(
    catalog: CatalogSnapshot,
    service_ids: Iterable[str],
) -> Selection:
    """
    Sum durations and derive the binding cutoff of a selection.

    The order of service_ids is kept: services are performed back to back
    in that order.

    Raises:
        InvalidSelectionError: empty selection, unknown/inactive id,
            repeated id or two services of the same category
    """
    service_ids = list(service_ids)
    if not service_ids:
        raise InvalidSelectionError("Select at least one service")

    services: list[CatalogService] = []
    seen_ids: set[str] = set()
    seen_categories: dict[str, str] = {}

    for service_id in service_ids:
        service = catalog.get(service_id)
        if service is None or not service.is_active:
            raise InvalidSelectionError(
                f"Service not found or inactive: {service_id}",
                details={"service_id": service_id},
            )
        if service_id in seen_ids:
            raise InvalidSelectionError(
                f"Service selected more than once: {service_id}",
                details={"service_id": service_id},
            )
        if service.category:
            other = seen_categories.get(service.category)
            if other is not None:
                raise InvalidSelectionError(
                    f"Only one service per category may be selected: {other}, {service_id}",
                    details={"category": service.category, "service_ids": [other, service_id]},
                )
            seen_categories[service.category] = service_id

        seen_ids.add(service_id)
        services.append(service)

    return Selection(
        services=tuple(services),
        total_duration=sum(s.duration_min for s in services),
        binding_cutoff=min(s.cutoff_minutes for s in services),
    )
