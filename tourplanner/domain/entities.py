"""
Domain entities and value objects.

Patterns used
-------------
- ``Stop`` and ``OptimizedRoute`` are immutable value objects produced and
  consumed by the optimizer; nothing here is persisted.
- ``Tour.ensure_reorderable`` guards the one state rule the route planner
  cares about: finished tours keep their stop order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Optional

from .enums import FROZEN_TOUR_STATUSES, TourStatus, UserRole


class InvalidStateTransition(Exception):
    """Raised when a tour change is not allowed in its current status."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Stop:
    id: Hashable
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def coordinate(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class OptimizedRoute:
    ordered_locations: list[Stop] = field(default_factory=list)
    total_distance: float = 0.0  # km, one decimal
    estimated_duration: int = 0  # minutes
    maps_url: str = ""


@dataclass(frozen=True)
class TourStopView:
    """A tour stop joined to its house, as read for route planning."""

    stop_id: int
    house_id: int
    order_index: int
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_stop(self) -> Stop:
        return Stop(
            id=self.house_id,
            latitude=self.latitude,
            longitude=self.longitude,
            address=self.address,
        )


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class Tour:
    id: Optional[int] = None
    name: str = ""
    realtor_id: int = 0
    buyer_id: Optional[int] = None
    status: TourStatus = TourStatus.PLANNED
    is_deleted: bool = False

    def can_view(self, user_id: int, role: UserRole) -> bool:
        return role == UserRole.ADMIN or user_id in (self.realtor_id, self.buyer_id)

    def can_reorder(self, user_id: int, role: UserRole) -> bool:
        return role == UserRole.ADMIN or user_id == self.realtor_id

    def ensure_reorderable(self) -> None:
        """Raise if the tour's stops may no longer be reordered."""
        if self.status in FROZEN_TOUR_STATUSES:
            raise InvalidStateTransition(
                f"Cannot modify a {self.status.value.lower()} tour"
            )
