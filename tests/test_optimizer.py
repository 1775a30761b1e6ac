"""
Unit tests for the optimizer entry points.

Covers:
- Degenerate inputs (no stops, one stop, missing coordinates)
- Fixed-start routes and their fallback
- Improvement percentage, duration model and directions URL
"""

from __future__ import annotations

import itertools

import pytest

from tourplanner.domain.entities import OptimizedRoute, Stop
from tourplanner.domain.optimizer import (
    STOP_MINUTES,
    calculate_improvement,
    estimate_duration_minutes,
    google_maps_url,
    optimize_route,
    optimize_route_from_start,
    round_half_up,
    sequential_distance_km,
)

# Four houses on one meridian, 0.01 deg (~1.1 km) apart
A = Stop(id="a", latitude=30.00, longitude=-97.70, address="A Street")
B = Stop(id="b", latitude=30.01, longitude=-97.70, address="B Street")
C = Stop(id="c", latitude=30.02, longitude=-97.70, address="C Street")
D = Stop(id="d", latitude=30.03, longitude=-97.70, address="D Street")
UNMAPPED = Stop(id="x", address="Unmapped Lane")
HALF_MAPPED = Stop(id="y", latitude=30.05)

SHUFFLED = [C, A, D, B]


def _ids(route: OptimizedRoute) -> list:
    return [s.id for s in route.ordered_locations]


# ── optimize_route ────────────────────────────────────────────────────


class TestOptimizeRoute:
    def test_empty(self):
        result = optimize_route([])
        assert result == OptimizedRoute()
        assert result.maps_url == ""

    def test_only_unmapped_stops(self):
        assert optimize_route([UNMAPPED, HALF_MAPPED]) == OptimizedRoute()

    def test_single_stop(self):
        result = optimize_route([A])
        assert _ids(result) == ["a"]
        assert result.total_distance == 0.0
        assert result.estimated_duration == STOP_MINUTES
        assert "30.0,-97.7" in result.maps_url

    def test_two_stops_keep_input_order(self):
        assert _ids(optimize_route([D, A])) == ["d", "a"]

    def test_skips_stops_without_coordinates(self):
        result = optimize_route([UNMAPPED, C, HALF_MAPPED, A, D, B])
        assert sorted(_ids(result)) == ["a", "b", "c", "d"]

    def test_orders_collinear_stops(self):
        result = optimize_route(SHUFFLED)
        assert _ids(result) in (["a", "b", "c", "d"], ["d", "c", "b", "a"])
        assert result.total_distance == 3.3
        assert result.estimated_duration == 67

    def test_result_is_permutation_of_located_input(self):
        stops = [
            Stop(
                id=i,
                latitude=30.2 + (i * 37 % 17) / 200,
                longitude=-97.8 + (i * 11 % 7) / 100,
            )
            for i in range(15)
        ]
        assert sorted(_ids(optimize_route(stops))) == list(range(15))

    def test_right_triangle_matches_brute_force(self):
        # Legs of 1 deg on the equator and the prime meridian
        stops = [
            Stop(id="a", latitude=0.0, longitude=0.0),
            Stop(id="b", latitude=0.0, longitude=1.0),
            Stop(id="c", latitude=1.0, longitude=0.0),
        ]
        shortest = min(
            sequential_distance_km(list(p)) for p in itertools.permutations(stops)
        )
        assert optimize_route(stops).total_distance == round_half_up(shortest, 1)
        assert optimize_route(stops).total_distance == 222.4
        assert _ids(optimize_route(stops))[1] == "a"

    def test_input_is_not_modified(self):
        stops = list(SHUFFLED)
        optimize_route(stops)
        assert stops == SHUFFLED


# ── optimize_route_from_start ─────────────────────────────────────────


class TestOptimizeFromStart:
    def test_starts_at_requested_stop(self):
        result = optimize_route_from_start(SHUFFLED, "b")
        assert _ids(result)[0] == "b"
        assert sorted(_ids(result)) == ["a", "b", "c", "d"]

    def test_starting_at_an_end_is_optimal(self):
        result = optimize_route_from_start(SHUFFLED, "d")
        assert _ids(result) == ["d", "c", "b", "a"]

    def test_unknown_start_falls_back(self):
        fallback = optimize_route_from_start(SHUFFLED, "nope")
        assert fallback == optimize_route(SHUFFLED)

    def test_unmapped_start_falls_back(self):
        fallback = optimize_route_from_start([UNMAPPED, *SHUFFLED], "x")
        assert fallback.total_distance == optimize_route(SHUFFLED).total_distance

    def test_single_stop(self):
        result = optimize_route_from_start([A, UNMAPPED], "a")
        assert _ids(result) == ["a"]
        assert result.estimated_duration == STOP_MINUTES


# ── calculate_improvement ─────────────────────────────────────────────


class TestImprovement:
    def test_collinear_example(self):
        # 0.07 deg as entered vs 0.03 deg optimized
        assert calculate_improvement(SHUFFLED, [A, B, C, D]) == 57.1

    def test_unmapped_stops_are_ignored(self):
        assert calculate_improvement([UNMAPPED, *SHUFFLED], [A, B, C, D]) == 57.1

    @pytest.mark.parametrize(
        "original, optimized",
        [
            ([], []),
            ([A], [A]),
            ([A, UNMAPPED], [A]),
            ([A, B], [A]),
            ([A, A, A], [A, A, A]),
        ],
    )
    def test_degenerate_inputs_are_zero(self, original, optimized):
        assert calculate_improvement(original, optimized) == 0.0

    def test_never_negative(self):
        assert calculate_improvement([A, B, C, D], SHUFFLED) == 0.0

    def test_same_order_is_zero(self):
        assert calculate_improvement(SHUFFLED, SHUFFLED) == 0.0


# ── Formatting ────────────────────────────────────────────────────────


class TestFormatting:
    @pytest.mark.parametrize(
        "value, ndigits, expected",
        [(0.5, 0, 1.0), (1.5, 0, 2.0), (2.5, 0, 3.0), (2.25, 1, 2.3), (7.04, 1, 7.0)],
    )
    def test_round_half_up(self, value, ndigits, expected):
        assert round_half_up(value, ndigits) == expected

    def test_duration_adds_dwell_per_stop(self):
        # 10 km at 30 km/h = 20 min, plus 2 x 15
        assert estimate_duration_minutes(10.0, 2) == 50

    def test_duration_without_stops(self):
        assert estimate_duration_minutes(15.0, 0) == 30

    def test_maps_url(self):
        url = google_maps_url([A, C])
        assert url == "https://www.google.com/maps/dir/30.0,-97.7/30.02,-97.7"

    def test_maps_url_empty(self):
        assert google_maps_url([]) == ""
