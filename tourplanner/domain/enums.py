"""Domain enumerations and tour editing rules."""

import enum


class TourStatus(str, enum.Enum):
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# Tours in these states can no longer have their stops reordered
FROZEN_TOUR_STATUSES: frozenset[TourStatus] = frozenset(
    {TourStatus.COMPLETED, TourStatus.CANCELLED}
)


class UserRole(str, enum.Enum):
    BUYER = "BUYER"
    REALTOR = "REALTOR"
    ADMIN = "ADMIN"
