"""
Multi-Start Nearest-Neighbour + 2-opt Search
=============================================

1. **Construction** -- nearest neighbour from a start index: repeatedly
   move to the closest unvisited stop.
2. **Improvement**  -- 2-opt first-improvement: reverse a segment whenever
   that shortens the route, until a full pass accepts no move.
3. **Multi-start**   -- run (1) + (2) once per start index and keep the
   shortest open path.

Routes are lists of indices into the distance matrix.  They are open paths:
the last stop does not connect back to the first.

Move evaluation
---------------
For positions ``i < j`` the 2-opt move compares::

    m[r[i]][r[i+1]] + m[r[j]][r[(j+1) % N]]
    m[r[i]][r[j]]   + m[r[i+1]][r[(j+1) % N]]

The second edge wraps around to ``r[0]`` when ``j == N-1``, i.e. moves are
scored as if the tour were closed.  This wrap decides which local optimum is
reached and is kept as-is.

Tie-breaking
------------
Every scan runs in ascending index order and only a *strict* improvement is
accepted, so the same matrix always yields the same route.

Complexity
----------
Let N = stops.

* Construction:  O(N^2)
* 2-opt pass:    O(N^2); the number of passes is bounded because every
                 accepted move strictly lowers a non-negative cost
* Multi-start:   N x (construction + 2-opt)

Fine for a single day's tour (tens of stops); not meant for city-wide
routing.
"""

from __future__ import annotations

from typing import Sequence

Matrix = Sequence[Sequence[float]]


def route_length(route: Sequence[int], matrix: Matrix) -> float:
    """Open-path length: sum of consecutive hops, no return leg."""
    total = 0.0
    for a, b in zip(route, route[1:]):
        total += matrix[a][b]
    return total


def nearest_neighbor_route(matrix: Matrix, start: int = 0) -> list[int]:
    """Greedy route from *start*; ties go to the lowest index."""
    n = len(matrix)
    visited = [False] * n
    route = [start]
    visited[start] = True

    while len(route) < n:
        current = route[-1]
        nearest = -1
        nearest_dist = float("inf")
        for i in range(n):
            if not visited[i] and matrix[current][i] < nearest_dist:
                nearest_dist = matrix[current][i]
                nearest = i
        if nearest == -1:
            # Only reachable with non-finite distances; keep index order
            nearest = visited.index(False)
        route.append(nearest)
        visited[nearest] = True

    return route


def two_opt(route: Sequence[int], matrix: Matrix) -> list[int]:
    """
    Improve *route* by 2-opt segment reversals.

    An accepted reversal is applied immediately and the scan carries on
    with the updated route; passes repeat until one accepts nothing.  The
    result is never longer (as an open path) than the input: if the
    closed-tour scoring drifted the open length upward the input is
    returned instead.
    """
    best = list(route)
    n = len(best)
    improved = True

    while improved:
        improved = False
        for i in range(n - 2):
            for j in range(i + 2, n):
                a, b = best[i], best[i + 1]
                c, d = best[j], best[(j + 1) % n]
                current = matrix[a][b] + matrix[c][d]
                candidate = matrix[a][c] + matrix[b][d]
                if candidate < current:
                    best[i + 1 : j + 1] = best[i + 1 : j + 1][::-1]
                    improved = True

    if route_length(best, matrix) > route_length(route, matrix):
        return list(route)
    return best


def improve_from(matrix: Matrix, start: int) -> list[int]:
    """One construction + improvement pass anchored at *start*."""
    return two_opt(nearest_neighbor_route(matrix, start), matrix)


def best_route(matrix: Matrix) -> list[int]:
    """Shortest route over all start indices; the first winner keeps ties."""
    n = len(matrix)
    if n <= 1:
        return list(range(n))
    if n == 2:
        return [0, 1]

    winner: list[int] = []
    winner_dist = float("inf")
    for start in range(n):
        route = improve_from(matrix, start)
        dist = route_length(route, matrix)
        if dist < winner_dist:
            winner, winner_dist = route, dist
    return winner
