"""
Tour Route Optimizer
====================

Public entry points used by the API layer:

* ``optimize_route``            -- multi-start search over every stop
* ``optimize_route_from_start`` -- single pass anchored at a chosen stop
* ``calculate_improvement``     -- % shorter than a reference order

Stops without both coordinates are dropped before any distance work, so
none of these functions fail on partial data: empty input gives an empty
route, a single stop a trivial one, and an unknown start id falls back to
the multi-start search.

Duration model
--------------
  minutes = distance_km / AVERAGE_SPEED_KMH x 60  +  STOP_MINUTES x stops

A fixed urban speed stands in for live traffic data; the per-stop dwell
covers parking, walking and showing the house.

All functions are pure; results are built fresh per call.
"""

from __future__ import annotations

import logging
import math
from typing import Hashable, Sequence

from .distance import build_distance_matrix, path_length_km
from .entities import OptimizedRoute, Stop
from .tsp import best_route, improve_from, route_length

logger = logging.getLogger(__name__)

AVERAGE_SPEED_KMH = 30.0
STOP_MINUTES = 15
GOOGLE_MAPS_DIR_URL = "https://www.google.com/maps/dir/"


# ── Metrics & formatting ──────────────────────────────────────────────


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def estimate_duration_minutes(total_distance_km: float, stop_count: int) -> int:
    driving = total_distance_km / AVERAGE_SPEED_KMH * 60
    return int(round_half_up(driving + STOP_MINUTES * stop_count))


def google_maps_url(stops: Sequence[Stop]) -> str:
    """Directions URL visiting *stops* in order; ``""`` when empty."""
    if not stops:
        return ""
    points = "/".join(f"{s.latitude},{s.longitude}" for s in stops)
    return GOOGLE_MAPS_DIR_URL + points


def valid_stops(stops: Sequence[Stop]) -> list[Stop]:
    return [s for s in stops if s.has_coordinates]


def sequential_distance_km(stops: Sequence[Stop]) -> float:
    """Great-circle length of *stops* visited in the given order."""
    return path_length_km([s.coordinate for s in valid_stops(stops)])


# ── Entry points ──────────────────────────────────────────────────────


def _build_result(
    stops: list[Stop], route: list[int], matrix: list[list[float]]
) -> OptimizedRoute:
    ordered = [stops[i] for i in route]
    distance = route_length(route, matrix)
    return OptimizedRoute(
        ordered_locations=ordered,
        total_distance=round_half_up(distance, 1),
        estimated_duration=estimate_duration_minutes(distance, len(stops)),
        maps_url=google_maps_url(ordered),
    )


def _trivial_result(stops: list[Stop]) -> OptimizedRoute | None:
    if not stops:
        return OptimizedRoute()
    if len(stops) == 1:
        return OptimizedRoute(
            ordered_locations=list(stops),
            total_distance=0.0,
            estimated_duration=STOP_MINUTES,
            maps_url=google_maps_url(stops),
        )
    return None


def optimize_route(stops: Sequence[Stop]) -> OptimizedRoute:
    """Best route found by nearest-neighbour + 2-opt from every start."""
    located = valid_stops(stops)
    trivial = _trivial_result(located)
    if trivial is not None:
        return trivial

    matrix = build_distance_matrix([s.coordinate for s in located])
    route = best_route(matrix)
    logger.debug(
        "Optimized %d stops (%d skipped), starting at %r",
        len(located),
        len(stops) - len(located),
        located[route[0]].id,
    )
    return _build_result(located, route, matrix)


def optimize_route_from_start(
    stops: Sequence[Stop], start_id: Hashable
) -> OptimizedRoute:
    """
    Route that begins at the stop with id *start_id*.

    Falls back to :func:`optimize_route` when no located stop carries that
    id.
    """
    located = valid_stops(stops)
    start_index = next(
        (i for i, s in enumerate(located) if s.id == start_id), None
    )
    if start_index is None:
        logger.debug("Start %r not among located stops, using multi-start", start_id)
        return optimize_route(located)

    trivial = _trivial_result(located)
    if trivial is not None:
        return trivial

    matrix = build_distance_matrix([s.coordinate for s in located])
    route = improve_from(matrix, start_index)
    return _build_result(located, route, matrix)


def calculate_improvement(
    original: Sequence[Stop], optimized: Sequence[Stop]
) -> float:
    """
    Percentage by which *optimized* is shorter than *original*.

    Both lists are measured hop by hop in the order given.  Returns ``0.0``
    when either side has fewer than two located stops, when the original
    length is zero, or when the optimized order is not shorter.
    """
    if len(original) < 2:
        return 0.0

    original_located = valid_stops(original)
    optimized_located = valid_stops(optimized)
    if len(original_located) < 2 or len(optimized_located) < 2:
        return 0.0

    original_km = sequential_distance_km(original_located)
    if original_km == 0:
        return 0.0
    optimized_km = sequential_distance_km(optimized_located)

    improvement = (original_km - optimized_km) / original_km * 100
    return max(0.0, round_half_up(improvement, 1))
