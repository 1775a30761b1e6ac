"""
Tour route-optimization endpoints
=================================

POST /api/v1/tours/{tour_id}/optimize-route -- optimize (and optionally apply)
GET  /api/v1/tours/{tour_id}/optimize-route -- current vs. optimized, read-only
"""

import logging
from typing import Optional

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tourplanner.api.dependencies import CurrentUser, get_current_user, get_db
from tourplanner.api.middleware import limiter
from tourplanner.api.schemas import (
    CurrentRouteOut,
    CurrentStopOut,
    ErrorResponse,
    ExcludedStopOut,
    HouseOut,
    HouseStatusOut,
    OptimizationSummary,
    OptimizedStopOut,
    OptimizeTourRequest,
    OptimizeTourResponse,
    PotentialOptimization,
    RouteStatusResponse,
)
from tourplanner.config import settings
from tourplanner.domain.entities import InvalidStateTransition, Tour, TourStopView
from tourplanner.domain.enums import UserRole
from tourplanner.domain.optimizer import (
    calculate_improvement,
    google_maps_url,
    optimize_route,
    optimize_route_from_start,
    round_half_up,
    sequential_distance_km,
)
from tourplanner.infrastructure.locks import DistributedLock, LockNotAcquired
from tourplanner.infrastructure.redis_client import get_redis
from tourplanner.infrastructure.repositories import (
    TourRepository,
    TourStopRepository,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tours", tags=["tours"])

_ERRORS = {
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


async def _load_tour(db: AsyncSession, tour_id: int, user: CurrentUser) -> Tour:
    tour = await TourRepository(db).get_by_id(tour_id)
    if not tour:
        raise HTTPException(status_code=404, detail="Tour not found")
    if not tour.can_view(user.user_id, user.role):
        raise HTTPException(status_code=403, detail="Access denied")
    if tour.is_deleted:
        raise HTTPException(status_code=404, detail="Tour has been deleted")
    return tour


def _first_per_house(stops: list[TourStopView]) -> list[TourStopView]:
    """Located stops, keeping only the first stop of a house listed twice."""
    seen: dict[int, TourStopView] = {}
    for s in stops:
        if s.has_coordinates:
            seen.setdefault(s.house_id, s)
    return list(seen.values())


def _house_status(stops: list[TourStopView]) -> list[CurrentStopOut]:
    return [
        CurrentStopOut(
            stop_id=s.stop_id,
            order_index=index,
            house=HouseStatusOut(
                id=s.house_id, address=s.address, has_coordinates=s.has_coordinates
            ),
        )
        for index, s in enumerate(stops)
    ]


@router.post(
    "/{tour_id}/optimize-route",
    response_model=OptimizeTourResponse,
    summary="Optimize the visiting order of a tour",
    description=(
        "Orders the tour's geocoded houses to minimise great-circle travel "
        "distance.  Houses without coordinates are reported as excluded.  "
        "With ``apply_optimization`` the realtor (or an admin) saves the "
        "new order; buyers only ever get a preview."
    ),
    responses={**_ERRORS, 409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def optimize_tour_route(
    request: Request,
    tour_id: int,
    body: Optional[OptimizeTourRequest] = None,
    db: AsyncSession = Depends(get_db),
    redis: aioredis.Redis = Depends(get_redis),
    user: CurrentUser = Depends(get_current_user),
):
    body = body or OptimizeTourRequest()
    tour = await _load_tour(db, tour_id, user)
    stop_repo = TourStopRepository(db)

    stops = await stop_repo.get_stops_with_houses(tour_id)
    located = _first_per_house(stops)
    missing = [s for s in stops if not s.has_coordinates]

    if len(located) < 2:
        raise HTTPException(
            status_code=422,
            detail="Tour needs at least 2 houses with coordinates to optimize the route",
        )
    if len(located) > settings.max_tour_stops:
        raise HTTPException(
            status_code=422,
            detail=f"Tour has more than {settings.max_tour_stops} stops to optimize",
        )

    locations = [s.to_stop() for s in located]
    if body.start_from_house_id is not None:
        result = optimize_route_from_start(locations, body.start_from_house_id)
    else:
        result = optimize_route(locations)
    improvement = calculate_improvement(locations, result.ordered_locations)

    stop_for_house = {s.house_id: s.stop_id for s in located}

    # ── Apply ─────────────────────────────────────────────────────
    applied = body.apply_optimization and user.role != UserRole.BUYER
    if applied:
        if not tour.can_reorder(user.user_id, user.role):
            raise HTTPException(
                status_code=403,
                detail="Only the tour creator can apply route optimization",
            )
        try:
            tour.ensure_reorderable()
        except InvalidStateTransition as exc:
            raise HTTPException(status_code=409, detail=str(exc))

        # Unlocated and repeated stops keep their relative order at the end
        new_order = [stop_for_house[loc.id] for loc in result.ordered_locations]
        placed = set(new_order)
        new_order += [s.stop_id for s in stops if s.stop_id not in placed]
        try:
            async with DistributedLock.for_tour_reorder(
                redis, tour_id, ttl_seconds=settings.reorder_lock_ttl_seconds
            ):
                await stop_repo.apply_order(new_order)
                await db.commit()
        except LockNotAcquired:
            logger.warning("Reorder of tour %d already in progress", tour_id)
            raise HTTPException(
                status_code=409,
                detail="Route optimization is already being applied to this tour",
            )
        logger.info(
            "Applied optimized order to tour %d (%d stops, %.1f%% shorter)",
            tour_id,
            len(new_order),
            improvement,
        )

    return OptimizeTourResponse(
        tour_id=tour.id,
        tour_name=tour.name,
        optimization=OptimizationSummary(
            total_distance=result.total_distance,
            estimated_duration=result.estimated_duration,
            improvement=improvement,
            google_maps_url=result.maps_url,
        ),
        optimized_route=[
            OptimizedStopOut(
                stop_id=stop_for_house.get(loc.id),
                order_index=index,
                house=HouseOut(
                    id=loc.id,
                    address=loc.address,
                    latitude=loc.latitude,
                    longitude=loc.longitude,
                ),
            )
            for index, loc in enumerate(result.ordered_locations)
        ],
        excluded=[
            ExcludedStopOut(
                stop_id=s.stop_id, house=HouseOut(id=s.house_id, address=s.address)
            )
            for s in missing
        ],
        applied=applied,
        message=(
            "Route optimization applied successfully"
            if applied
            else "Route optimization calculated. Set apply_optimization to true to save changes."
        ),
    )


@router.get(
    "/{tour_id}/optimize-route",
    response_model=RouteStatusResponse,
    summary="Compare the current tour order with the optimized one",
    responses=_ERRORS,
)
@limiter.limit(settings.rate_limit)
async def get_route_status(
    request: Request,
    tour_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    tour = await _load_tour(db, tour_id, user)
    stops = await TourStopRepository(db).get_stops_with_houses(tour_id)
    located = _first_per_house(stops)
    without_coordinates = [
        HouseOut(id=s.house_id, address=s.address)
        for s in stops
        if not s.has_coordinates
    ]

    reason = None
    if len(located) < 2:
        reason = "Need at least 2 houses with coordinates"
    elif len(located) > settings.max_tour_stops:
        reason = f"Tour has more than {settings.max_tour_stops} stops to optimize"
    if reason:
        return RouteStatusResponse(
            tour_id=tour.id,
            tour_name=tour.name,
            can_optimize=False,
            reason=reason,
            current_route=CurrentRouteOut(stops=_house_status(stops)),
            houses_without_coordinates=without_coordinates,
        )

    locations = [s.to_stop() for s in located]
    result = optimize_route(locations)
    current_km = sequential_distance_km(locations)

    return RouteStatusResponse(
        tour_id=tour.id,
        tour_name=tour.name,
        can_optimize=True,
        current_route=CurrentRouteOut(
            stops=_house_status(stops),
            google_maps_url=google_maps_url(locations),
            total_distance=round_half_up(current_km, 1),
        ),
        potential_optimization=PotentialOptimization(
            estimated_improvement=calculate_improvement(
                locations, result.ordered_locations
            ),
            optimized_distance=result.total_distance,
            optimized_duration=result.estimated_duration,
        ),
        houses_without_coordinates=without_coordinates,
    )
