"""
Ad-hoc route planning
=====================

POST /api/v1/routes/optimize -- optimize a caller-supplied list of stops

Nothing is read from or written to the database; the request carries the
stops and the response carries the route.
"""

from fastapi import APIRouter, HTTPException, Request

from tourplanner.api.middleware import limiter
from tourplanner.api.schemas import (
    ErrorResponse,
    OptimizeStopsRequest,
    OptimizeStopsResponse,
    StopOut,
)
from tourplanner.config import settings
from tourplanner.domain.entities import Stop
from tourplanner.domain.optimizer import (
    calculate_improvement,
    optimize_route,
    optimize_route_from_start,
)

router = APIRouter(prefix="/routes", tags=["routes"])


@router.post(
    "/optimize",
    response_model=OptimizeStopsResponse,
    summary="Optimize the visiting order of a list of stops",
    responses={422: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit)
async def optimize_stops(request: Request, body: OptimizeStopsRequest):
    if len(body.stops) > settings.max_tour_stops:
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.max_tour_stops} stops can be optimized at once",
        )

    stops = [
        Stop(id=s.id, latitude=s.latitude, longitude=s.longitude, address=s.address)
        for s in body.stops
    ]
    if body.start_id is not None:
        result = optimize_route_from_start(stops, body.start_id)
    else:
        result = optimize_route(stops)

    return OptimizeStopsResponse(
        ordered_stops=[
            StopOut(
                id=s.id, latitude=s.latitude, longitude=s.longitude, address=s.address
            )
            for s in result.ordered_locations
        ],
        total_distance=result.total_distance,
        estimated_duration=result.estimated_duration,
        google_maps_url=result.maps_url,
        improvement=calculate_improvement(stops, result.ordered_locations),
        skipped=[s.id for s in stops if not s.has_coordinates],
    )
