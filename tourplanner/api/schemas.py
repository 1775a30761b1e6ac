"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field

StopId = Union[int, str]


# ── Requests ──────────────────────────────────────────────────────────


class OptimizeTourRequest(BaseModel):
    start_from_house_id: Optional[int] = Field(
        None, description="House the tour must start from."
    )
    apply_optimization: bool = Field(
        False,
        description="Persist the optimized order (realtor or admin only).",
    )


class StopIn(BaseModel):
    id: StopId
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=500)


class OptimizeStopsRequest(BaseModel):
    stops: list[StopIn]
    start_id: Optional[StopId] = Field(
        None, description="Stop the route must start from."
    )


# ── Responses ─────────────────────────────────────────────────────────


class HouseOut(BaseModel):
    id: int
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class HouseStatusOut(BaseModel):
    id: int
    address: str
    has_coordinates: bool


class OptimizedStopOut(BaseModel):
    stop_id: Optional[int] = None
    order_index: int
    house: HouseOut


class ExcludedStopOut(BaseModel):
    stop_id: int
    house: HouseOut
    reason: str = "Missing coordinates"


class OptimizationSummary(BaseModel):
    total_distance: float
    total_distance_unit: str = "km"
    estimated_duration: int
    estimated_duration_unit: str = "minutes"
    improvement: float
    improvement_unit: str = "%"
    google_maps_url: str


class OptimizeTourResponse(BaseModel):
    tour_id: int
    tour_name: str
    optimization: OptimizationSummary
    optimized_route: list[OptimizedStopOut]
    excluded: list[ExcludedStopOut] = []
    applied: bool
    message: str


class CurrentStopOut(BaseModel):
    stop_id: int
    order_index: int
    house: HouseStatusOut


class CurrentRouteOut(BaseModel):
    stops: list[CurrentStopOut]
    google_maps_url: str = ""
    total_distance: float = 0.0


class PotentialOptimization(BaseModel):
    estimated_improvement: float
    improvement_unit: str = "%"
    optimized_distance: float
    optimized_duration: int


class RouteStatusResponse(BaseModel):
    tour_id: int
    tour_name: str
    can_optimize: bool
    reason: Optional[str] = None
    current_route: CurrentRouteOut
    potential_optimization: Optional[PotentialOptimization] = None
    houses_without_coordinates: list[HouseOut] = []


class StopOut(BaseModel):
    id: StopId
    latitude: float
    longitude: float
    address: Optional[str] = None


class OptimizeStopsResponse(BaseModel):
    ordered_stops: list[StopOut]
    total_distance: float
    total_distance_unit: str = "km"
    estimated_duration: int
    estimated_duration_unit: str = "minutes"
    google_maps_url: str
    improvement: float
    improvement_unit: str = "%"
    skipped: list[StopId] = []


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
