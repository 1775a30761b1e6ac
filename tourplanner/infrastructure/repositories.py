"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and returns
domain entities, never ORM rows, so the API layer can hand them straight to
the optimizer.
"""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import HouseModel, TourModel, TourStopModel
from tourplanner.domain.entities import Tour, TourStopView
from tourplanner.domain.enums import TourStatus


class TourRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tour_id: int) -> Optional[Tour]:
        row = await self.session.get(TourModel, tour_id)
        if row is None:
            return None
        return Tour(
            id=row.id,
            name=row.name,
            realtor_id=row.realtor_id,
            buyer_id=row.buyer_id,
            status=TourStatus(row.status),
            is_deleted=row.deleted_at is not None,
        )


class TourStopRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_stops_with_houses(self, tour_id: int) -> list[TourStopView]:
        """Live stops of *tour_id* in their stored visiting order."""
        result = await self.session.execute(
            select(TourStopModel, HouseModel)
            .join(HouseModel, HouseModel.id == TourStopModel.house_id)
            .where(
                TourStopModel.tour_id == tour_id,
                TourStopModel.deleted_at.is_(None),
            )
            .order_by(TourStopModel.order_index, TourStopModel.id)
        )
        return [
            TourStopView(
                stop_id=stop.id,
                house_id=house.id,
                order_index=stop.order_index,
                address=house.display_address,
                latitude=house.latitude,
                longitude=house.longitude,
            )
            for stop, house in result.all()
        ]

    async def apply_order(self, stop_ids: Sequence[int]) -> None:
        """Set ``order_index`` of each stop to its position in *stop_ids*."""
        for index, stop_id in enumerate(stop_ids):
            await self.session.execute(
                update(TourStopModel)
                .where(TourStopModel.id == stop_id)
                .values(order_index=index)
            )
        await self.session.flush()

