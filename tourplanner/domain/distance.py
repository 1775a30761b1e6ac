"""
Distance calculation using the Haversine formula.

Assumption
----------
Tours are planned on great-circle (Haversine) distance rather than a road
network so that the optimizer stays pure and runs without external API
keys.  Real driving distance is left to the mapping app the realtor opens
from the generated directions URL.

Complexity: O(1) per pair, O(N^2) for a full matrix.
"""

from __future__ import annotations

import math
from typing import Sequence

EARTH_RADIUS_KM = 6_371.0

Coordinate = tuple[float, float]


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # Float overshoot past 1.0 would make asin raise
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def build_distance_matrix(coordinates: Sequence[Coordinate]) -> list[list[float]]:
    """
    Symmetric N x N matrix of pairwise distances, zero on the diagonal.

    Indexed by position in *coordinates*; each pair is computed once and
    mirrored so ``m[i][j] == m[j][i]`` holds exactly.
    """
    n = len(coordinates)
    matrix = [[0.0] * n for _ in range(n)]
    for i in range(n):
        lat_i, lng_i = coordinates[i]
        for j in range(i + 1, n):
            lat_j, lng_j = coordinates[j]
            d = haversine_km(lat_i, lng_i, lat_j, lng_j)
            matrix[i][j] = d
            matrix[j][i] = d
    return matrix


def path_length_km(coordinates: Sequence[Coordinate]) -> float:
    """Sum of consecutive hop distances along *coordinates* in given order."""
    total = 0.0
    for (lat1, lng1), (lat2, lng2) in zip(coordinates, coordinates[1:]):
        total += haversine_km(lat1, lng1, lat2, lng2)
    return total
